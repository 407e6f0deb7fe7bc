"""
Shared Elasticsearch client.
"""
from django.conf import settings


class ElasticsearchClient:
    """Lazy holder for a pooled Elasticsearch client."""

    def __init__(self):
        self._client = None

    @property
    def client(self):
        """Lazy load Elasticsearch client."""
        if self._client is None:
            from elasticsearch import Elasticsearch

            config = settings.ELASTICSEARCH
            options = {
                'request_timeout': config['REQUEST_TIMEOUT'],
                'max_retries': config['MAX_RETRIES'],
                'retry_on_timeout': True,
                'verify_certs': config.get('VERIFY_CERTS', False),
            }
            if config.get('USERNAME'):
                options['basic_auth'] = (config['USERNAME'], config['PASSWORD'])
            self._client = Elasticsearch(config['HOSTS'], **options)
        return self._client

    @property
    def product_index(self) -> str:
        return settings.ELASTICSEARCH['PRODUCT_INDEX']


elasticsearch_client = ElasticsearchClient()


def get_search_client():
    """Return the process-wide Elasticsearch client."""
    return elasticsearch_client.client
