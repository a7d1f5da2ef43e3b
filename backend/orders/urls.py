from django.urls import path, include
from rest_framework import routers
from rest_framework_nested import routers as nested_routers

from kds.views import OrderKitchenTicketViewSet
from payments.views import OrderPaymentViewSet
from .views import OrderViewSet

app_name = "orders"

router = routers.DefaultRouter()
router.register(r"orders", OrderViewSet, basename="order")

orders_router = nested_routers.NestedSimpleRouter(router, r"orders", lookup="order")
orders_router.register(r"payments", OrderPaymentViewSet, basename="order-payment")
orders_router.register(r"kitchen-tickets", OrderKitchenTicketViewSet, basename="order-kitchen-ticket")

urlpatterns = [
    # Include the nested router URLs first for precedence.
    path("", include(orders_router.urls)),
    # Include the main router URLs.
    path("", include(router.urls)),
]
