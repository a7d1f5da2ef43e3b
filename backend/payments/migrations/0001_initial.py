import uuid

import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('tenant', '0001_initial'),
        ('orders', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Payment',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('amount', models.DecimalField(decimal_places=2, max_digits=10)),
                ('method', models.CharField(choices=[('cash', 'Cash'), ('card', 'Card'), ('ewallet', 'E-Wallet'), ('other', 'Other')], max_length=10)),
                ('status', models.CharField(choices=[('completed', 'Completed')], default='completed', max_length=10)),
                ('transaction_ref', models.CharField(blank=True, help_text='External reference, e.g. card terminal or e-wallet transaction id', max_length=100, null=True)),
                ('notes', models.TextField(blank=True, null=True)),
                ('paid_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('order', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='payments', to='orders.order')),
                ('tenant', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='payments', to='tenant.tenant')),
            ],
            options={
                'verbose_name': 'Payment',
                'verbose_name_plural': 'Payments',
                'ordering': ['paid_at', 'created_at'],
                'indexes': [
                    models.Index(fields=['tenant', 'order'], name='payment_tenant_order_idx'),
                    models.Index(fields=['tenant', 'method'], name='payment_tenant_method_idx'),
                    models.Index(fields=['tenant', 'paid_at'], name='payment_tenant_paid_idx'),
                ],
            },
        ),
    ]
