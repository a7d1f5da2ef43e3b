"""
Exception Handler Tests

The domain error taxonomy and its HTTP rendering through
pos_exception_handler.
"""
import pytest
from decimal import Decimal
from rest_framework import status
from rest_framework.exceptions import NotFound
from rest_framework.test import APIRequestFactory

from core_backend.exceptions import (
    EmptyOrderError,
    InactiveTenantError,
    InvalidAmountError,
    InvalidTransitionError,
    LineValidationError,
    NoPendingItemsError,
    NotFoundError,
    OrderCancelledError,
    OrderClosedError,
    OrderNotFoundError,
    OrderStateError,
    OverpaymentRejectedError,
    POSServiceError,
    POSValidationError,
    TenantMismatchError,
    pos_exception_handler,
)


@pytest.fixture
def context():
    request = APIRequestFactory().post('/api/orders/')
    return {'request': request, 'view': None}


class TestErrorTaxonomy:

    @pytest.mark.parametrize("exc,expected_status", [
        (EmptyOrderError(), status.HTTP_400_BAD_REQUEST),
        (LineValidationError(0, 'bad quantity'), status.HTTP_400_BAD_REQUEST),
        (InvalidAmountError('0'), status.HTTP_400_BAD_REQUEST),
        (OrderNotFoundError('abc'), status.HTTP_404_NOT_FOUND),
        (TenantMismatchError(), status.HTTP_403_FORBIDDEN),
        (InactiveTenantError('abc'), status.HTTP_403_FORBIDDEN),
        (InvalidTransitionError('draft', 'ready'), status.HTTP_409_CONFLICT),
        (OrderCancelledError('ORD-00001'), status.HTTP_409_CONFLICT),
        (OrderClosedError('ORD-00001'), status.HTTP_409_CONFLICT),
        (NoPendingItemsError(), status.HTTP_409_CONFLICT),
        (OverpaymentRejectedError(Decimal('10'), Decimal('5')), status.HTTP_409_CONFLICT),
    ])
    def test_http_status(self, exc, expected_status):
        assert exc.http_status == expected_status
        assert isinstance(exc, POSServiceError)

    def test_families(self):
        assert issubclass(EmptyOrderError, POSValidationError)
        assert issubclass(OrderNotFoundError, NotFoundError)
        assert issubclass(InvalidTransitionError, OrderStateError)
        assert issubclass(OrderCancelledError, OrderStateError)

    def test_default_messages(self):
        assert str(OrderCancelledError('ORD-00007')) == 'Order ORD-00007 is cancelled'
        assert str(OrderClosedError()) == 'Order is already completed'
        assert str(LineValidationError(2, 'quantity must be a positive integer')) == (
            'Line 2: quantity must be a positive integer'
        )


class TestExceptionHandler:

    def test_domain_error_rendered(self, context):
        response = pos_exception_handler(OrderNotFoundError('abc'), context)

        assert response.status_code == 404
        assert response.data == {'error': "Order 'abc' not found", 'code': 'order_not_found'}

    def test_transition_error_includes_statuses(self, context):
        response = pos_exception_handler(InvalidTransitionError('draft', 'ready'), context)

        assert response.status_code == 409
        assert response.data['from_status'] == 'draft'
        assert response.data['to_status'] == 'ready'

    def test_overpayment_includes_amounts(self, context):
        response = pos_exception_handler(
            OverpaymentRejectedError(Decimal('100.00'), Decimal('40.00')), context
        )

        assert response.status_code == 409
        assert response.data['attempted_amount'] == '100.00'
        assert response.data['remaining_amount'] == '40.00'

    def test_line_error_includes_index(self, context):
        response = pos_exception_handler(LineValidationError(3, 'base price cannot be negative'), context)
        assert response.data['line'] == 3

    def test_drf_errors_are_delegated(self, context):
        response = pos_exception_handler(NotFound(), context)
        assert response.status_code == 404

    def test_unknown_errors_are_not_handled(self, context):
        assert pos_exception_handler(RuntimeError('boom'), context) is None


@pytest.mark.django_db
class TestHealthCheck:

    def test_health(self, api_client):
        response = api_client.get('/api/health/')
        assert response.status_code == 200
        assert response.json()['status'] == 'ok'
