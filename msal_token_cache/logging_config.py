import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent
LOGS_DIR = Path(os.getenv('TOKEN_CACHE_LOGS_DIR', str(BASE_DIR / 'logs')))

LOGS_DIR.mkdir(parents=True, exist_ok=True)

LOG_FILES = {
    'token_cache': LOGS_DIR / 'token_cache.log',
    'auth': LOGS_DIR / 'auth.log',
    'debug': LOGS_DIR / 'debug.log',
}

DJANGO_LOGGING_CONFIG = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '{levelname} {asctime} {module} {process:d} {thread:d} {message}',
            'style': '{',
        },
        'simple': {
            'format': '{asctime} - {name} - {levelname} - {message}',
            'style': '{',
            'datefmt': '%Y-%m-%d %H:%M:%S',
        },
    },
    'handlers': {
        'file': {
            'level': 'DEBUG',
            'class': 'logging.FileHandler',
            'filename': str(LOG_FILES['debug']),
            'formatter': 'simple',
        },
        'token_cache_file': {
            'level': 'INFO',
            'class': 'logging.FileHandler',
            'filename': str(LOG_FILES['token_cache']),
            # thread id matters when reading lock contention
            'formatter': 'verbose',
        },
        'auth_file': {
            'level': 'INFO',
            'class': 'logging.FileHandler',
            'filename': str(LOG_FILES['auth']),
            'formatter': 'simple',
        },
    },
    'loggers': {
        'django': {
            'handlers': ['file'],
            'level': 'INFO',
            'propagate': True,
        },
        'msal_token_cache': {
            'handlers': ['token_cache_file'],
            'level': 'INFO',
            'propagate': False,
        },
        'msal_token_cache.services': {
            'handlers': ['auth_file'],
            'level': 'INFO',
            'propagate': False,
        },
        'msal': {
            'handlers': ['auth_file'],
            'level': 'WARNING',
            'propagate': False,
        },
    },
    'root': {
        'handlers': ['file'],
        'level': 'INFO',
    },
}
