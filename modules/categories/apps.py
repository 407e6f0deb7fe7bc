"""
Categories module configuration.
"""
from django.apps import AppConfig


class CategoriesConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'modules.categories'
    label = 'categories'
    verbose_name = 'Categories'
