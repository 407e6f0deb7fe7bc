"""
Base settings shared by every environment.
"""
import os
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent.parent
load_dotenv(BASE_DIR / '.env')


def _as_bool(value, default: bool = False) -> bool:
    if value is None:
        return default
    return str(value).strip().lower() in {'1', 'true', 'yes', 'on'}


def _as_list(value: str) -> list:
    return [item.strip() for item in value.split(',') if item.strip()]


SECRET_KEY = os.environ.get('DJANGO_SECRET_KEY', 'django-insecure-catalog-search-dev-key')
DEBUG = _as_bool(os.environ.get('DJANGO_DEBUG'), default=False)
ALLOWED_HOSTS = _as_list(os.environ.get('DJANGO_ALLOWED_HOSTS', 'localhost,127.0.0.1'))

INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',

    # Third party
    'rest_framework',
    'drf_spectacular',

    # Local
    'modules.categories',
    'modules.products',
    'modules.search',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

ROOT_URLCONF = 'config.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.debug',
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
            ],
        },
    },
]

WSGI_APPLICATION = 'config.wsgi.application'

# ======================
# Database
# ======================

DATABASES = {
    'default': {
        'ENGINE': os.environ.get('DB_ENGINE', 'django.db.backends.postgresql'),
        'NAME': os.environ.get('DB_NAME', 'catalog'),
        'USER': os.environ.get('DB_USER', 'catalog'),
        'PASSWORD': os.environ.get('DB_PASSWORD', ''),
        'HOST': os.environ.get('DB_HOST', 'localhost'),
        'PORT': os.environ.get('DB_PORT', '5432'),
        'CONN_MAX_AGE': int(os.environ.get('DB_CONN_MAX_AGE', '60')),
    }
}

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

# ======================
# Cache
# ======================

REDIS_URL = os.environ.get('REDIS_URL', 'redis://localhost:6379/0')

CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.redis.RedisCache',
        'LOCATION': REDIS_URL,
        'KEY_PREFIX': 'catalog',
    }
}

# ======================
# Internationalization
# ======================

LANGUAGE_CODE = 'en-us'
TIME_ZONE = os.environ.get('TIME_ZONE', 'UTC')
USE_I18N = True
USE_TZ = True

STATIC_URL = '/static/'
STATIC_ROOT = BASE_DIR / 'staticfiles'

# ======================
# Django REST Framework
# ======================

REST_FRAMEWORK = {
    'DEFAULT_AUTHENTICATION_CLASSES': [
        'rest_framework.authentication.SessionAuthentication',
        'rest_framework.authentication.BasicAuthentication',
    ],
    'DEFAULT_PERMISSION_CLASSES': [
        'rest_framework.permissions.AllowAny',
    ],
    'DEFAULT_SCHEMA_CLASS': 'drf_spectacular.openapi.AutoSchema',
    'EXCEPTION_HANDLER': 'shared.interfaces.exception_handlers.custom_exception_handler',
}

SPECTACULAR_SETTINGS = {
    'TITLE': 'Catalog Search API',
    'DESCRIPTION': 'Product catalog with Elasticsearch search and relational fallback',
    'VERSION': '1.0.0',
    'SERVE_INCLUDE_SCHEMA': False,
}

# ======================
# Elasticsearch
# ======================

ELASTICSEARCH = {
    'HOSTS': _as_list(os.environ.get('ELASTICSEARCH_NODE', 'http://localhost:9200')),
    'PRODUCT_INDEX': os.environ.get('ELASTICSEARCH_PRODUCT_INDEX', 'ecommerce_products'),
    'REQUEST_TIMEOUT': int(os.environ.get('ELASTICSEARCH_REQUEST_TIMEOUT', '60')),
    'MAX_RETRIES': int(os.environ.get('ELASTICSEARCH_MAX_RETRIES', '3')),
    'USERNAME': os.environ.get('ELASTICSEARCH_USERNAME', ''),
    'PASSWORD': os.environ.get('ELASTICSEARCH_PASSWORD', ''),
    'VERIFY_CERTS': _as_bool(os.environ.get('ELASTICSEARCH_VERIFY_CERTS'), default=False),
}

SEARCH_SYNC = {
    'MAX_ATTEMPTS': int(os.environ.get('SEARCH_SYNC_MAX_ATTEMPTS', '5')),
    'BATCH_SIZE': int(os.environ.get('SEARCH_SYNC_BATCH_SIZE', '100')),
    'DRAIN_INTERVAL_SECONDS': int(os.environ.get('SEARCH_SYNC_DRAIN_INTERVAL', '60')),
}

# ======================
# Celery
# ======================

CELERY_BROKER_URL = os.environ.get('CELERY_BROKER_URL', REDIS_URL)
CELERY_RESULT_BACKEND = os.environ.get('CELERY_RESULT_BACKEND', REDIS_URL)
CELERY_TASK_SERIALIZER = 'json'
CELERY_RESULT_SERIALIZER = 'json'
CELERY_ACCEPT_CONTENT = ['json']
CELERY_TIMEZONE = TIME_ZONE
CELERY_BEAT_SCHEDULE = {
    'drain-search-sync-outbox': {
        'task': 'search.process_sync_outbox',
        'schedule': float(SEARCH_SYNC['DRAIN_INTERVAL_SECONDS']),
    },
}

# ======================
# Logging
# ======================

LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '{asctime} [{levelname}] {name}: {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'verbose',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': 'WARNING',
    },
    'loggers': {
        'django': {
            'handlers': ['console'],
            'level': 'INFO',
            'propagate': False,
        },
        'modules': {
            'handlers': ['console'],
            'level': LOG_LEVEL,
            'propagate': False,
        },
        'shared': {
            'handlers': ['console'],
            'level': LOG_LEVEL,
            'propagate': False,
        },
        'celery': {
            'handlers': ['console'],
            'level': 'INFO',
            'propagate': False,
        },
        'elastic_transport': {
            'handlers': ['console'],
            'level': 'WARNING',
            'propagate': False,
        },
    },
}
