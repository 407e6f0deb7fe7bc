"""
Test settings.
"""
from .base import *  # noqa: F401,F403

DEBUG = False

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
        'LOCATION': 'catalog-tests',
    }
}

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

ELASTICSEARCH = {
    **ELASTICSEARCH,  # noqa: F405
    'HOSTS': ['http://localhost:9200'],
    'PRODUCT_INDEX': 'test_products',
    'MAX_RETRIES': 0,
}

SEARCH_SYNC = {
    'MAX_ATTEMPTS': 3,
    'BATCH_SIZE': 50,
    'DRAIN_INTERVAL_SECONDS': 60,
}

CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True
CELERY_BROKER_URL = 'memory://'
CELERY_RESULT_BACKEND = 'cache+memory://'

LOGGING['root']['level'] = 'CRITICAL'  # noqa: F405
