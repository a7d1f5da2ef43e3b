"""
Root conftest.py for all backend tests.

This file makes fixtures available to all test files across all apps.
"""
import pytest


# ============================================================================
# API CLIENT FIXTURES
# ============================================================================

@pytest.fixture
def api_client():
    """
    Provide DRF API client for API tests.

    Usage:
        def test_my_api(api_client):
            response = api_client.get('/api/orders/')
            assert response.status_code == 200
    """
    from rest_framework.test import APIClient
    return APIClient()


@pytest.fixture
def client_tenant_a(api_client, tenant_a):
    """
    API client that acts for tenant A.

    Usage:
        def test_list_orders(client_tenant_a):
            response = client_tenant_a.get('/api/orders/')
            assert response.status_code == 200
    """
    api_client.credentials(HTTP_X_TENANT_ID=str(tenant_a.id))
    return api_client


@pytest.fixture
def client_tenant_b(tenant_b):
    """API client that acts for tenant B (separate client instance)."""
    from rest_framework.test import APIClient
    client = APIClient()
    client.credentials(HTTP_X_TENANT_ID=str(tenant_b.id))
    return client


# ============================================================================
# IMPORT ALL FIXTURES FROM core_backend/tests/fixtures.py
# ============================================================================
from core_backend.tests.fixtures import *
