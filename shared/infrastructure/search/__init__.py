from .elasticsearch_client import ElasticsearchClient, elasticsearch_client, get_search_client

__all__ = ['ElasticsearchClient', 'elasticsearch_client', 'get_search_client']
