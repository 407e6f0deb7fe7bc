"""
Search module Django ORM models.
"""
from django.db import models


class SearchSyncOutboxModel(models.Model):
    """
    Durable index sync intent.

    Rows are written in the same transaction as the catalog change and
    drained by a Celery task, so a crash or an index outage between the
    commit and the index call never loses the update.
    """

    ACTION_INDEX = 'index'
    ACTION_DELETE = 'delete'
    ACTION_CHOICES = [
        (ACTION_INDEX, 'Index'),
        (ACTION_DELETE, 'Delete'),
    ]

    STATUS_PENDING = 'pending'
    STATUS_DONE = 'done'
    STATUS_FAILED = 'failed'
    STATUS_CHOICES = [
        (STATUS_PENDING, 'Pending'),
        (STATUS_DONE, 'Done'),
        (STATUS_FAILED, 'Failed'),
    ]

    product_id = models.BigIntegerField(
        db_index=True,
        verbose_name='Product ID'
    )
    action = models.CharField(
        max_length=10,
        choices=ACTION_CHOICES,
        default=ACTION_INDEX,
        verbose_name='Action'
    )
    status = models.CharField(
        max_length=10,
        choices=STATUS_CHOICES,
        default=STATUS_PENDING,
        db_index=True,
        verbose_name='Status'
    )
    attempts = models.PositiveIntegerField(
        default=0,
        verbose_name='Attempts'
    )
    last_error = models.TextField(
        blank=True,
        default='',
        verbose_name='Last error'
    )
    created_at = models.DateTimeField(
        auto_now_add=True,
        db_index=True,
        verbose_name='Created at'
    )
    processed_at = models.DateTimeField(
        null=True,
        blank=True,
        verbose_name='Processed at'
    )

    class Meta:
        db_table = 'search_sync_outbox'
        verbose_name = 'Search Sync Outbox Entry'
        verbose_name_plural = 'Search Sync Outbox'
        ordering = ['id']

    def __str__(self):
        return f"{self.action} product {self.product_id} ({self.status})"
