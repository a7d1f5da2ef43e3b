import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('tenant', '0001_initial'),
        ('orders', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='KitchenTicket',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('ticket_number', models.CharField(max_length=20)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('preparing', 'Preparing'), ('ready', 'Ready'), ('served', 'Served')], default='pending', max_length=20)),
                ('priority', models.CharField(choices=[('normal', 'Normal'), ('high', 'High'), ('urgent', 'Urgent')], default='normal', max_length=10)),
                ('table_number', models.CharField(blank=True, max_length=20, null=True)),
                ('items', models.JSONField(default=list, help_text='Snapshot of the order items sent to the kitchen')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('printed_at', models.DateTimeField(blank=True, null=True)),
                ('completed_at', models.DateTimeField(blank=True, null=True)),
                ('order', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='kitchen_tickets', to='orders.order')),
                ('tenant', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='kitchen_tickets', to='tenant.tenant')),
            ],
            options={
                'ordering': ['created_at'],
                'indexes': [
                    models.Index(fields=['tenant', 'status'], name='ticket_tenant_stat_idx'),
                    models.Index(fields=['tenant', 'order'], name='ticket_tenant_order_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(fields=('tenant', 'ticket_number'), name='unique_ticket_number_per_tenant'),
                ],
            },
        ),
    ]
