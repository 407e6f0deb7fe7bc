"""
Products module Django ORM models.
"""
from decimal import Decimal

from django.db import models

from shared.domain.lifecycle import LifecycleStatus
from . import pricing


class ProductQuerySet(models.QuerySet):
    """Query helpers for catalog products."""

    def active(self):
        return self.filter(status=LifecycleStatus.ACTIVE.value)

    def with_details(self):
        return self.select_related('category').prefetch_related('tags')


class ProductModel(models.Model):
    """Sellable catalog product."""

    name = models.CharField(
        max_length=255,
        db_index=True,
        verbose_name='Name'
    )
    slug = models.SlugField(
        max_length=280,
        unique=True,
        verbose_name='Slug'
    )
    sku = models.CharField(
        max_length=100,
        unique=True,
        null=True,
        blank=True,
        verbose_name='SKU'
    )
    description = models.TextField(
        blank=True,
        default='',
        verbose_name='Description'
    )
    short_description = models.CharField(
        max_length=500,
        blank=True,
        default='',
        verbose_name='Short description'
    )
    price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        verbose_name='List price'
    )
    sale_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
        verbose_name='Sale price'
    )
    stock_quantity = models.PositiveIntegerField(
        default=0,
        verbose_name='Stock quantity'
    )
    category = models.ForeignKey(
        'categories.CategoryModel',
        on_delete=models.PROTECT,
        related_name='products',
        verbose_name='Category'
    )
    featured_image = models.CharField(
        max_length=500,
        blank=True,
        default='',
        verbose_name='Featured image URL'
    )
    gallery = models.JSONField(
        default=list,
        blank=True,
        verbose_name='Gallery image URLs'
    )
    status = models.CharField(
        max_length=10,
        choices=LifecycleStatus.choices(),
        default=LifecycleStatus.ACTIVE.value,
        db_index=True,
        verbose_name='Status'
    )
    is_featured = models.BooleanField(
        default=False,
        verbose_name='Featured'
    )
    meta_title = models.CharField(
        max_length=255,
        blank=True,
        default='',
        verbose_name='Meta title'
    )
    meta_description = models.TextField(
        blank=True,
        default='',
        verbose_name='Meta description'
    )
    view_count = models.PositiveIntegerField(
        default=0,
        verbose_name='View count'
    )
    purchase_count = models.PositiveIntegerField(
        default=0,
        verbose_name='Purchase count'
    )
    average_rating = models.FloatField(
        default=0,
        verbose_name='Average rating'
    )
    review_count = models.PositiveIntegerField(
        default=0,
        verbose_name='Review count'
    )
    created_at = models.DateTimeField(
        auto_now_add=True,
        db_index=True,
        verbose_name='Created at'
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        verbose_name='Updated at'
    )

    objects = ProductQuerySet.as_manager()

    class Meta:
        db_table = 'products'
        verbose_name = 'Product'
        verbose_name_plural = 'Products'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['category', 'status']),
            models.Index(fields=['status', 'is_featured']),
        ]

    def __str__(self):
        return f"{self.name} ({self.sku or self.slug})"

    @property
    def is_active(self) -> bool:
        return self.status == LifecycleStatus.ACTIVE.value

    @property
    def is_on_sale(self) -> bool:
        return pricing.is_on_sale(self.price, self.sale_price)

    @property
    def final_price(self) -> Decimal:
        """Effective price: sale price when it undercuts the list price."""
        return pricing.effective_price(self.price, self.sale_price)

    @property
    def discount_percentage(self) -> int:
        return pricing.discount_percentage(self.price, self.sale_price)

    @property
    def boost_score(self) -> float:
        return pricing.calculate_boost_score(self)

    @property
    def tag_names(self) -> list:
        return sorted(tag.tag_name for tag in self.tags.all())


class ProductTagModel(models.Model):
    """Free-form tag attached to a product."""

    product = models.ForeignKey(
        ProductModel,
        on_delete=models.CASCADE,
        related_name='tags',
        verbose_name='Product'
    )
    tag_name = models.CharField(
        max_length=50,
        db_index=True,
        verbose_name='Tag'
    )

    class Meta:
        db_table = 'product_tags'
        verbose_name = 'Product Tag'
        verbose_name_plural = 'Product Tags'
        ordering = ['tag_name']
        constraints = [
            models.UniqueConstraint(fields=['product', 'tag_name'], name='uniq_product_tag'),
        ]

    def __str__(self):
        return self.tag_name


class ProductViewModel(models.Model):
    """A single product detail view, used for trending calculations."""

    product = models.ForeignKey(
        ProductModel,
        on_delete=models.CASCADE,
        related_name='views',
        verbose_name='Product'
    )
    user_id = models.BigIntegerField(
        null=True,
        blank=True,
        verbose_name='User ID'
    )
    ip_address = models.GenericIPAddressField(
        null=True,
        blank=True,
        verbose_name='IP address'
    )
    user_agent = models.CharField(
        max_length=500,
        blank=True,
        default='',
        verbose_name='User agent'
    )
    referer = models.CharField(
        max_length=500,
        blank=True,
        default='',
        verbose_name='Referer'
    )
    session_id = models.CharField(
        max_length=100,
        blank=True,
        default='',
        verbose_name='Session ID'
    )
    created_at = models.DateTimeField(
        auto_now_add=True,
        db_index=True,
        verbose_name='Viewed at'
    )

    class Meta:
        db_table = 'product_views'
        verbose_name = 'Product View'
        verbose_name_plural = 'Product Views'
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.product_id} @ {self.created_at}"
