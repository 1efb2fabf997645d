"""Django app configuration for django-cutsheets."""

from django.apps import AppConfig


class DjangoCutsheetsConfig(AppConfig):
    """App configuration for django-cutsheets."""

    name = 'django_cutsheets'
    label = 'django_cutsheets'
    verbose_name = 'Cut Sheets'
    default_auto_field = 'django.db.models.BigAutoField'
