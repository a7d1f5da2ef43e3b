import uuid

import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('tenant', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Product',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=200)),
                ('description', models.TextField(blank=True)),
                ('category', models.CharField(blank=True, help_text="Menu category used for grouping, e.g., 'Burgers'", max_length=100)),
                ('base_price', models.DecimalField(decimal_places=2, help_text='Price before variant and option adjustments.', max_digits=10, validators=[django.core.validators.MinValueValidator(0)])),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('tenant', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='products', to='tenant.tenant')),
            ],
            options={
                'ordering': ['category', 'name'],
                'indexes': [
                    models.Index(fields=['tenant', 'is_active'], name='product_tenant_active_idx'),
                    models.Index(fields=['tenant', 'category'], name='product_tenant_cat_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='ProductVariant',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=100)),
                ('price_delta', models.DecimalField(decimal_places=2, default=0, help_text='The amount to add or subtract from the base product price.', max_digits=10)),
                ('is_active', models.BooleanField(default=True)),
                ('display_order', models.PositiveIntegerField(default=0)),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='variants', to='products.product')),
                ('tenant', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='product_variants', to='tenant.tenant')),
            ],
            options={
                'ordering': ['display_order', 'name'],
                'unique_together': {('product', 'name')},
            },
        ),
        migrations.CreateModel(
            name='OptionGroup',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(help_text="Customer-facing name, e.g., 'Choose your size'", max_length=100)),
                ('selection_type', models.CharField(choices=[('single', 'Single Choice'), ('multiple', 'Multiple Choices')], default='single', max_length=10)),
                ('is_required', models.BooleanField(default=False)),
                ('min_selections', models.PositiveIntegerField(default=0, help_text='Minimum required selections (0 for optional)')),
                ('max_selections', models.PositiveIntegerField(blank=True, help_text='Maximum allowed selections (null for unlimited)', null=True)),
                ('display_order', models.PositiveIntegerField(default=0)),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='option_groups', to='products.product')),
                ('tenant', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='option_groups', to='tenant.tenant')),
            ],
            options={
                'ordering': ['display_order', 'name'],
                'indexes': [
                    models.Index(fields=['tenant', 'product'], name='optgroup_tenant_product_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Option',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=100)),
                ('price_delta', models.DecimalField(decimal_places=2, default=0, help_text='The amount to add or subtract from the base product price.', max_digits=10)),
                ('is_available', models.BooleanField(default=True)),
                ('display_order', models.PositiveIntegerField(default=0)),
                ('group', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='options', to='products.optiongroup')),
                ('tenant', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='options', to='tenant.tenant')),
            ],
            options={
                'ordering': ['display_order', 'name'],
                'unique_together': {('group', 'name')},
            },
        ),
        migrations.AddField(
            model_name='optiongroup',
            name='parent_option',
            field=models.ForeignKey(blank=True, help_text='If set, this group only appears when the option is chosen.', null=True, on_delete=django.db.models.deletion.CASCADE, related_name='child_groups', to='products.option'),
        ),
    ]
