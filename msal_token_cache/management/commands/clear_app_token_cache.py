import logging

from django.core.cache import caches
from django.core.cache.backends.dummy import DummyCache
from django.core.cache.backends.locmem import LocMemCache
from django.core.management.base import BaseCommand, CommandError

from msal_token_cache import msal_config
from msal_token_cache.adapters import AppFileTokenCache, AppMemoryTokenCache
from msal_token_cache.exceptions import ConfigurationError, TokenCacheError
from msal_token_cache.notifications import NotifyingTokenCache

logger = logging.getLogger(__name__)

# Backends whose entries live only inside the process that created them
PROCESS_LOCAL_BACKENDS = (LocMemCache, DummyCache)


class Command(BaseCommand):
    help = "Evict the application's token cache entry so the next call acquires fresh tokens."

    def add_arguments(self, parser):
        parser.add_argument('--client-id', default=None, help='Client id whose cache to clear (defaults to AZURE_CLIENT_ID)')
        parser.add_argument('--file', action='store_true', help='Also clear the on-disk cache in TOKEN_CACHE_DIR')
        parser.add_argument('--skip-memory', action='store_true', help='Leave the memory cache alone (clear --file only)')

    def handle(self, *args, **options):
        client_id = options['client_id'] or msal_config.AZURE_CLIENT_ID
        if options['skip_memory'] and not options['file']:
            raise CommandError("Nothing to clear: --skip-memory needs --file")

        if not options['skip_memory']:
            backend = caches[msal_config.TOKEN_CACHE_ALIAS]
            if isinstance(backend, PROCESS_LOCAL_BACKENDS):
                logger.warning(f"Refusing to clear app token cache from process-local {type(backend).__name__}")
                raise CommandError(
                    f"The '{msal_config.TOKEN_CACHE_ALIAS}' cache uses {type(backend).__name__}, which lives "
                    "inside each server process; clearing it from here would not reach the server. "
                    "Point TOKEN_CACHE_BACKEND at a shared backend or sign the app out through "
                    "MicrosoftAuthService.clear_app_cache()."
                )

        try:
            adapters = []
            if not options['skip_memory']:
                adapters.append(AppMemoryTokenCache(NotifyingTokenCache(), client_id))
            if options['file']:
                adapters.append(AppFileTokenCache(NotifyingTokenCache(), client_id))
            for adapter in adapters:
                adapter.clear()
                logger.info(f"Cleared {adapter.app_cache_id} from {type(adapter.store).__name__}")
        except (ConfigurationError, TokenCacheError) as e:
            logger.error(f"Failed to clear app token cache: {e}")
            raise CommandError(f"Error: {str(e)}") from e

        self.stdout.write(self.style.SUCCESS(f"Cleared app token cache for {client_id}"))
