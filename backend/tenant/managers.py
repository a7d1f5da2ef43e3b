import uuid

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import models, transaction

from core_backend.exceptions import (
    InactiveTenantError,
    TenantMismatchError,
    TenantNotFoundError,
)


def tenant_pk(tenant):
    """
    Normalize a Tenant instance or raw id into the primary key value.

    Services accept either so callers holding only the header value can pass
    it straight through.
    """
    return getattr(tenant, 'pk', tenant)


def same_tenant(tenant_id, tenant):
    """Compare a stored tenant id with a Tenant instance or raw id."""
    other = tenant_pk(tenant)
    try:
        return uuid.UUID(str(tenant_id)) == uuid.UUID(str(other))
    except ValueError:
        return False


class TenantRecordManager(models.Manager):
    """Lookup helpers for the Tenant model itself."""

    def find_by_id(self, tenant_id):
        """Return the tenant or None when the id is unknown or malformed."""
        if tenant_id is None:
            return None
        try:
            return self.get_queryset().filter(pk=tenant_pk(tenant_id)).first()
        except (ValueError, DjangoValidationError):
            return None

    def get_active(self, tenant_id):
        """
        Resolve an active tenant.

        Raises:
            TenantNotFoundError: if the tenant does not exist
            InactiveTenantError: if the tenant exists but is deactivated
        """
        tenant = self.find_by_id(tenant_id)
        if tenant is None:
            raise TenantNotFoundError(tenant_id)
        if not tenant.is_active:
            raise InactiveTenantError(tenant_id)
        return tenant


class TenantScopedQuerySet(models.QuerySet):
    """
    QuerySet for models carrying a `tenant` foreign key.

    Tenant scoping is always explicit: callers pass the tenant (or its id)
    they are acting for.
    """

    def for_tenant(self, tenant):
        if tenant is None:
            # Fail closed
            return self.none()
        return self.filter(tenant_id=tenant_pk(tenant))


class TenantScopedManager(models.Manager.from_queryset(TenantScopedQuerySet)):
    """
    Default manager for tenant-owned models.

    Usage:
        class Product(models.Model):
            tenant = models.ForeignKey('tenant.Tenant', on_delete=models.CASCADE)
            objects = TenantScopedManager()

        Product.objects.for_tenant(tenant_id).filter(is_active=True)
    """

    def find_by_id(self, record_id, lock=False):
        """Return the record or None when the id is unknown or malformed."""
        queryset = self.get_queryset()
        if lock:
            queryset = queryset.select_for_update()
        try:
            return queryset.filter(pk=record_id).first()
        except (ValueError, DjangoValidationError):
            return None

    def get_owned(self, record_id, tenant, not_found, lock=False):
        """
        Fetch a record and verify it belongs to `tenant`.

        `not_found` is the exception instance raised when the record is
        missing. A record owned by another tenant raises TenantMismatchError.
        With `lock=True` the row is selected FOR UPDATE.
        """
        record = self.find_by_id(record_id, lock=lock)
        if record is None:
            raise not_found
        if not same_tenant(record.tenant_id, tenant):
            raise TenantMismatchError(self.model.__name__)
        return record


class TenantSequenceManager(models.Manager):

    def next_value(self, tenant, key) -> int:
        """
        Increment and return the counter for (tenant, key).

        Must run inside a transaction; the counter row stays locked until the
        surrounding transaction commits.
        """
        with transaction.atomic():
            sequence, _ = self.get_or_create(tenant_id=tenant_pk(tenant), key=key)
            sequence = self.select_for_update().get(pk=sequence.pk)
            sequence.last_value += 1
            sequence.save(update_fields=['last_value', 'updated_at'])
            return sequence.last_value

    def next_number(self, tenant, key, prefix) -> str:
        """Formatted number, e.g. ORD-00001."""
        value = self.next_value(tenant, key)
        padding = getattr(settings, 'POS_SEQUENCE_PADDING', 5)
        return f"{prefix}{value:0{padding}d}"
