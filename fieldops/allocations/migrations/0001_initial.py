# Generated manually for Allocation

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('catalog', '0001_initial'),
        ('locations', '0001_initial'),
        ('promoters', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Allocation',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('days_of_week', models.JSONField(default=list)),
                ('frequency_per_week', models.PositiveSmallIntegerField()),
                ('active', models.BooleanField(db_index=True, default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('brand', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='allocations', to='catalog.brand')),
                ('promoter', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='allocations', to='promoters.promoter')),
                ('store', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='allocations', to='locations.store')),
            ],
            options={
                'db_table': 'promoter_allocations',
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['promoter', 'store', 'active'], name='alloc_promoter_store_idx')],
                'unique_together': {('promoter', 'brand', 'store')},
            },
        ),
    ]
