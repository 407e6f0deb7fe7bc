from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('categories', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='ProductModel',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(db_index=True, max_length=255, verbose_name='Name')),
                ('slug', models.SlugField(max_length=280, unique=True, verbose_name='Slug')),
                ('sku', models.CharField(blank=True, max_length=100, null=True, unique=True, verbose_name='SKU')),
                ('description', models.TextField(blank=True, default='', verbose_name='Description')),
                ('short_description', models.CharField(blank=True, default='', max_length=500, verbose_name='Short description')),
                ('price', models.DecimalField(decimal_places=2, max_digits=12, verbose_name='List price')),
                ('sale_price', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True, verbose_name='Sale price')),
                ('stock_quantity', models.PositiveIntegerField(default=0, verbose_name='Stock quantity')),
                ('featured_image', models.CharField(blank=True, default='', max_length=500, verbose_name='Featured image URL')),
                ('gallery', models.JSONField(blank=True, default=list, verbose_name='Gallery image URLs')),
                ('status', models.CharField(choices=[('active', 'Active'), ('inactive', 'Inactive'), ('draft', 'Draft')], db_index=True, default='active', max_length=10, verbose_name='Status')),
                ('is_featured', models.BooleanField(default=False, verbose_name='Featured')),
                ('meta_title', models.CharField(blank=True, default='', max_length=255, verbose_name='Meta title')),
                ('meta_description', models.TextField(blank=True, default='', verbose_name='Meta description')),
                ('view_count', models.PositiveIntegerField(default=0, verbose_name='View count')),
                ('purchase_count', models.PositiveIntegerField(default=0, verbose_name='Purchase count')),
                ('average_rating', models.FloatField(default=0, verbose_name='Average rating')),
                ('review_count', models.PositiveIntegerField(default=0, verbose_name='Review count')),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, verbose_name='Created at')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated at')),
                ('category', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='products', to='categories.categorymodel', verbose_name='Category')),
            ],
            options={
                'verbose_name': 'Product',
                'verbose_name_plural': 'Products',
                'db_table': 'products',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['category', 'status'], name='products_categor_3c2a1e_idx'),
                    models.Index(fields=['status', 'is_featured'], name='products_status_8f4b2d_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='ProductViewModel',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('user_id', models.BigIntegerField(blank=True, null=True, verbose_name='User ID')),
                ('ip_address', models.GenericIPAddressField(blank=True, null=True, verbose_name='IP address')),
                ('user_agent', models.CharField(blank=True, default='', max_length=500, verbose_name='User agent')),
                ('referer', models.CharField(blank=True, default='', max_length=500, verbose_name='Referer')),
                ('session_id', models.CharField(blank=True, default='', max_length=100, verbose_name='Session ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, verbose_name='Viewed at')),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='views', to='products.productmodel', verbose_name='Product')),
            ],
            options={
                'verbose_name': 'Product View',
                'verbose_name_plural': 'Product Views',
                'db_table': 'product_views',
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='ProductTagModel',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('tag_name', models.CharField(db_index=True, max_length=50, verbose_name='Tag')),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='tags', to='products.productmodel', verbose_name='Product')),
            ],
            options={
                'verbose_name': 'Product Tag',
                'verbose_name_plural': 'Product Tags',
                'db_table': 'product_tags',
                'ordering': ['tag_name'],
                'constraints': [
                    models.UniqueConstraint(fields=('product', 'tag_name'), name='uniq_product_tag'),
                ],
            },
        ),
    ]
