from django.apps import AppConfig


class MsalTokenCacheConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'msal_token_cache'
    verbose_name = 'MSAL token cache'
