"""
Orders API Integration Tests

End-to-end HTTP tests for the order endpoints: catalog-priced creation,
status actions, listings and the error contract of the exception handler.
"""
import pytest

from orders.models import Order


ORDERS_URL = '/api/orders/'


def detail_url(order, action=None):
    url = f'{ORDERS_URL}{order.id}/'
    return f'{url}{action}/' if action else url


@pytest.mark.django_db
class TestCreateOrderAPI:

    def test_create_priced_from_catalog(self, client_tenant_a, burger_tenant_a, burger_options):
        """
        CRITICAL: The API prices items from the catalog, not from client input

        Business Impact: Clients cannot submit their own prices
        """
        addons = burger_tenant_a.option_groups.get(name='Add-ons')
        payload = {
            'items': [{
                'product_id': str(burger_tenant_a.id),
                'quantity': 1,
                'selections': [{
                    'group_id': str(addons.id),
                    'option_ids': [
                        str(burger_options['Extra Cheese'].id),
                        str(burger_options['Bacon'].id),
                    ],
                }],
            }],
            'table_number': 'T5',
        }

        response = client_tenant_a.post(ORDERS_URL, payload, format='json')

        assert response.status_code == 201, response.data
        order = response.data['order']
        assert order['status'] == 'draft'
        assert order['payment_status'] == 'unpaid'
        assert order['order_number'] == 'ORD-00001'
        assert order['subtotal'] == '120000.00'
        assert order['tax_amount'] == '12000.00'
        assert order['service_charge_amount'] == '6000.00'
        assert order['total_amount'] == '138000.00'
        assert order['table_number'] == 'T5'
        assert len(order['items'][0]['selected_options']) == 2
        assert response.data['pricing']['total_amount'] == '138000.00'

    def test_same_configuration_is_merged(self, client_tenant_a, pizza_tenant_a, pizza_catalog):
        size, sizes = pizza_catalog['Size']
        toppings, tops = pizza_catalog['Toppings']
        item = {
            'product_id': str(pizza_tenant_a.id),
            'selections': [
                {'group_id': str(size.id), 'option_ids': [str(sizes['Small'].id)]},
                {'group_id': str(toppings.id), 'option_ids': [str(tops['Cheese'].id)]},
            ],
        }
        payload = {'items': [dict(item, quantity=1), dict(item, quantity=3)]}

        response = client_tenant_a.post(ORDERS_URL, payload, format='json')

        assert response.status_code == 201, response.data
        items = response.data['order']['items']
        assert len(items) == 1
        assert items[0]['quantity'] == 4
        assert items[0]['item_subtotal'] == '360000.00'

    def test_missing_required_selection(self, client_tenant_a, pizza_tenant_a):
        payload = {'items': [{'product_id': str(pizza_tenant_a.id)}]}

        response = client_tenant_a.post(ORDERS_URL, payload, format='json')

        assert response.status_code == 400
        assert response.data['code'] == 'missing_selection'
        assert Order.objects.count() == 0

    def test_nested_child_group_selection(self, client_tenant_a, combo_tenant_a):
        drink = combo_tenant_a.option_groups.get(name='Drink')
        coffee = drink.options.get(name='Coffee')
        milk = combo_tenant_a.option_groups.get(name='Milk')
        payload = {'items': [{
            'product_id': str(combo_tenant_a.id),
            'selections': [{'group_id': str(drink.id), 'options': [
                {'option_id': str(coffee.id), 'child_groups': [
                    {'group_id': str(milk.id), 'option_ids': [str(milk.options.get().id)]},
                ]},
            ]}],
        }]}

        response = client_tenant_a.post(ORDERS_URL, payload, format='json')

        assert response.status_code == 201
        item = response.data['order']['items'][0]
        assert item['unit_price'] == '58000.00'
        assert [o['option_name'] for o in item['selected_options']] == ['Coffee', 'Oat Milk']

    def test_malformed_nested_options_rejected(self, client_tenant_a, combo_tenant_a):
        """
        CRITICAL: A malformed option tree is a client error, not a server error

        Business Impact: Terminals must get a 400 they can show, never a 500
        """
        drink = combo_tenant_a.option_groups.get(name='Drink')
        coffee = drink.options.get(name='Coffee')
        milk = combo_tenant_a.option_groups.get(name='Milk')
        payload = {'items': [{
            'product_id': str(combo_tenant_a.id),
            'selections': [{'group_id': str(drink.id), 'options': [
                {'option_id': str(coffee.id), 'child_groups': [
                    {'group_id': str(milk.id), 'options': ['oops']},
                ]},
            ]}],
        }]}

        response = client_tenant_a.post(ORDERS_URL, payload, format='json')

        assert response.status_code == 400
        assert 'items' in response.data
        assert Order.objects.count() == 0

    def test_empty_items(self, client_tenant_a):
        response = client_tenant_a.post(ORDERS_URL, {'items': []}, format='json')

        assert response.status_code == 400
        assert response.data['code'] == 'empty_order'

    def test_zero_quantity_rejected_by_serializer(self, client_tenant_a, burger_tenant_a):
        payload = {'items': [{'product_id': str(burger_tenant_a.id), 'quantity': 0}]}
        response = client_tenant_a.post(ORDERS_URL, payload, format='json')
        assert response.status_code == 400

    def test_other_tenant_product_is_not_found(self, client_tenant_a, product_tenant_b):
        """
        CRITICAL: Tenant A cannot order from tenant B's catalog

        Security Impact: Catalog lookups are tenant scoped
        """
        payload = {'items': [{'product_id': str(product_tenant_b.id)}]}

        response = client_tenant_a.post(ORDERS_URL, payload, format='json')

        assert response.status_code == 404
        assert response.data['code'] == 'product_not_found'

    def test_missing_tenant_header(self, api_client, burger_tenant_a):
        payload = {'items': [{'product_id': str(burger_tenant_a.id)}]}
        response = api_client.post(ORDERS_URL, payload, format='json')

        assert response.status_code == 400
        assert response.data['code'] == 'validation_error'

    def test_unknown_tenant_header(self, api_client, burger_tenant_a):
        api_client.credentials(HTTP_X_TENANT_ID='00000000-0000-0000-0000-000000000000')
        payload = {'items': [{'product_id': str(burger_tenant_a.id)}]}
        response = api_client.post(ORDERS_URL, payload, format='json')

        assert response.status_code == 404
        assert response.data['code'] == 'tenant_not_found'


@pytest.mark.django_db
class TestOrderDetailAPI:

    def test_retrieve(self, client_tenant_a, draft_order):
        response = client_tenant_a.get(detail_url(draft_order))

        assert response.status_code == 200
        assert response.data['order_number'] == draft_order.order_number
        assert response.data['remaining_amount'] == '138000.00'

    def test_retrieve_other_tenant_order_forbidden(self, client_tenant_b, draft_order):
        response = client_tenant_b.get(detail_url(draft_order))

        assert response.status_code == 403
        assert response.data['code'] == 'tenant_mismatch'

    def test_retrieve_unknown_order(self, client_tenant_a):
        response = client_tenant_a.get(f'{ORDERS_URL}8d5c3f9e-1111-4f4f-9999-000000000000/')
        assert response.status_code == 404
        assert response.data['code'] == 'order_not_found'


@pytest.mark.django_db
class TestStatusActionsAPI:

    def test_full_happy_path(self, client_tenant_a, draft_order):
        assert client_tenant_a.post(detail_url(draft_order, 'confirm')).data['status'] == 'confirmed'
        assert client_tenant_a.post(detail_url(draft_order, 'start-preparing')).data['status'] == 'preparing'
        assert client_tenant_a.post(detail_url(draft_order, 'mark-ready')).data['status'] == 'ready'

        payment = client_tenant_a.post(
            detail_url(draft_order, 'payments'),
            {'amount': '138000.00', 'method': 'cash'},
            format='json',
        )
        assert payment.status_code == 201

        response = client_tenant_a.post(detail_url(draft_order, 'complete'))
        assert response.status_code == 200
        assert response.data['status'] == 'completed'
        assert response.data['payment_status'] == 'paid'

    def test_invalid_transition_is_conflict(self, client_tenant_a, draft_order):
        response = client_tenant_a.post(detail_url(draft_order, 'mark-ready'))

        assert response.status_code == 409
        assert response.data['code'] == 'invalid_transition'
        assert response.data['from_status'] == 'draft'
        assert response.data['to_status'] == 'ready'

    def test_complete_unpaid(self, client_tenant_a, ready_order):
        response = client_tenant_a.post(detail_url(ready_order, 'complete'))

        assert response.status_code == 400
        assert response.data['code'] == 'payment_incomplete'

    def test_cancel_with_reason(self, client_tenant_a, draft_order):
        response = client_tenant_a.post(
            detail_url(draft_order, 'cancel'), {'reason': 'Customer left'}, format='json'
        )

        assert response.status_code == 200
        assert response.data['status'] == 'cancelled'
        assert '[CANCELLED] Customer left' in response.data['notes']

    def test_generic_status_endpoint(self, client_tenant_a, confirmed_order):
        response = client_tenant_a.post(
            detail_url(confirmed_order, 'status'), {'status': 'preparing'}, format='json'
        )
        assert response.status_code == 200
        assert response.data['status'] == 'preparing'

    def test_other_tenant_cannot_cancel(self, client_tenant_b, draft_order):
        response = client_tenant_b.post(detail_url(draft_order, 'cancel'), {}, format='json')

        assert response.status_code == 403
        draft_order.refresh_from_db()
        assert draft_order.status == Order.Status.DRAFT


@pytest.mark.django_db
class TestOrderListingsAPI:

    def test_open_orders(self, client_tenant_a, draft_order, order_tenant_b):
        response = client_tenant_a.get(ORDERS_URL)

        assert response.status_code == 200
        assert [o['id'] for o in response.data['results']] == [str(draft_order.id)]
        assert response.data['results'][0]['item_count'] == 1
        assert response.data['pagination']['total'] == 1

    def test_open_orders_pagination_params(self, client_tenant_a, draft_order):
        response = client_tenant_a.get(ORDERS_URL, {'limit': 1, 'offset': 0})
        assert response.data['pagination'] == {'total': 1, 'limit': 1, 'offset': 0, 'has_more': False}

    def test_invalid_limit(self, client_tenant_a):
        response = client_tenant_a.get(ORDERS_URL, {'limit': 'abc'})
        assert response.status_code == 400

    def test_history(self, client_tenant_a, draft_order, tenant_a):
        client_tenant_a.post(detail_url(draft_order, 'cancel'), {'reason': 'Test'}, format='json')

        response = client_tenant_a.get(f'{ORDERS_URL}history/')
        assert response.status_code == 200
        assert [o['status'] for o in response.data['results']] == ['cancelled']

        open_response = client_tenant_a.get(ORDERS_URL)
        assert open_response.data['results'] == []

    def test_history_status_filter(self, client_tenant_a, draft_order):
        client_tenant_a.post(detail_url(draft_order, 'cancel'), {}, format='json')

        response = client_tenant_a.get(f'{ORDERS_URL}history/', {'status': 'completed'})
        assert response.data['results'] == []

    def test_history_date_filter(self, client_tenant_a, draft_order):
        client_tenant_a.post(detail_url(draft_order, 'cancel'), {}, format='json')
        created = draft_order.created_at.date().isoformat()

        response = client_tenant_a.get(
            f'{ORDERS_URL}history/', {'date_from': created, 'date_to': created}
        )
        assert len(response.data['results']) == 1

    def test_history_rejects_open_status_filter(self, client_tenant_a):
        response = client_tenant_a.get(f'{ORDERS_URL}history/', {'status': 'draft'})
        assert response.status_code == 400

    def test_history_rejects_bad_date(self, client_tenant_a):
        response = client_tenant_a.get(f'{ORDERS_URL}history/', {'date_to': 'not-a-date'})

        assert response.status_code == 400
        assert response.data['code'] == 'validation_error'
