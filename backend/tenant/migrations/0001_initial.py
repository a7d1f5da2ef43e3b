import uuid
from decimal import Decimal

import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Tenant',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(help_text="Display name for the tenant (e.g., Joe's Pizza)", max_length=255)),
                ('slug', models.SlugField(help_text='URL-safe identifier for the tenant', unique=True)),
                ('is_active', models.BooleanField(default=True, help_text='Inactive tenants cannot create or modify orders')),
                ('tax_rate', models.DecimalField(blank=True, decimal_places=4, help_text='Tax rate as a fraction of the subtotal (0.10 = 10%). Blank uses the default.', max_digits=5, null=True, validators=[django.core.validators.MinValueValidator(Decimal('0')), django.core.validators.MaxValueValidator(Decimal('1'))])),
                ('service_charge_rate', models.DecimalField(blank=True, decimal_places=4, help_text='Service charge as a fraction of the subtotal. Blank uses the default.', max_digits=5, null=True, validators=[django.core.validators.MinValueValidator(Decimal('0')), django.core.validators.MaxValueValidator(Decimal('1'))])),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'tenants',
                'ordering': ['name'],
                'indexes': [
                    models.Index(fields=['slug'], name='tenants_slug_idx'),
                    models.Index(fields=['is_active'], name='tenants_is_active_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='TenantSequence',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('key', models.CharField(choices=[('order', 'Order Number'), ('kitchen_ticket', 'Kitchen Ticket Number')], max_length=32)),
                ('last_value', models.PositiveIntegerField(default=0)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('tenant', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='sequences', to='tenant.tenant')),
            ],
            options={
                'db_table': 'tenant_sequences',
                'constraints': [
                    models.UniqueConstraint(fields=('tenant', 'key'), name='unique_tenant_sequence_key'),
                ],
            },
        ),
    ]
