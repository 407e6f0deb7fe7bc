"""
Categories models.
"""
from django.db import models


class CategoryModel(models.Model):
    """Product category model with hierarchical structure."""

    name = models.CharField(
        max_length=100,
        db_index=True,
        verbose_name='Name'
    )
    slug = models.SlugField(
        max_length=120,
        unique=True,
        verbose_name='Slug'
    )
    description = models.TextField(
        blank=True,
        default='',
        verbose_name='Description'
    )
    image = models.CharField(
        max_length=500,
        blank=True,
        default='',
        verbose_name='Image URL'
    )
    parent = models.ForeignKey(
        'self',
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='children',
        verbose_name='Parent category',
        help_text='Self reference'
    )
    sort_order = models.IntegerField(
        default=0,
        verbose_name='Sort order'
    )
    is_active = models.BooleanField(
        default=True,
        db_index=True,
        verbose_name='Active'
    )
    created_at = models.DateTimeField(
        auto_now_add=True,
        verbose_name='Created at'
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        verbose_name='Updated at'
    )

    class Meta:
        db_table = 'categories'
        verbose_name = 'Category'
        verbose_name_plural = 'Categories'
        ordering = ['sort_order', 'name']

    def __str__(self):
        if self.parent:
            return f"{self.parent.name} > {self.name}"
        return self.name

    @property
    def full_path(self) -> str:
        """Get full category path."""
        path_parts = [self.name]
        parent = self.parent
        while parent:
            path_parts.insert(0, parent.name)
            parent = parent.parent
        return ' > '.join(path_parts)

    @property
    def level(self) -> int:
        """Get category depth level (0 = root)."""
        level = 0
        parent = self.parent
        while parent:
            level += 1
            parent = parent.parent
        return level
