from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='SearchSyncOutboxModel',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('product_id', models.BigIntegerField(db_index=True, verbose_name='Product ID')),
                ('action', models.CharField(choices=[('index', 'Index'), ('delete', 'Delete')], default='index', max_length=10, verbose_name='Action')),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('done', 'Done'), ('failed', 'Failed')], db_index=True, default='pending', max_length=10, verbose_name='Status')),
                ('attempts', models.PositiveIntegerField(default=0, verbose_name='Attempts')),
                ('last_error', models.TextField(blank=True, default='', verbose_name='Last error')),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, verbose_name='Created at')),
                ('processed_at', models.DateTimeField(blank=True, null=True, verbose_name='Processed at')),
            ],
            options={
                'verbose_name': 'Search Sync Outbox Entry',
                'verbose_name_plural': 'Search Sync Outbox',
                'db_table': 'search_sync_outbox',
                'ordering': ['id'],
            },
        ),
    ]
