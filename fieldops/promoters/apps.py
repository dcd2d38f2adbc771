from django.apps import AppConfig


class PromotersConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'fieldops.promoters'
