# token_cache_site/urls.py

from django.urls import path, include

urlpatterns = [
    path('', include('msal_token_cache.urls')),
]
