"""
Django settings for country_currency project.

Every deployment-specific value can be overridden through an environment
variable of the same name.
"""
import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent


def env_bool(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


ENVIRONMENT = os.environ.get("ENVIRONMENT", "development")

SECRET_KEY = os.environ.get(
    "DJANGO_SECRET_KEY", "django-insecure-change-me-for-anything-but-local-use"
)
DEBUG = env_bool("DJANGO_DEBUG", ENVIRONMENT != "production")
ALLOWED_HOSTS = [
    host.strip()
    for host in os.environ.get("DJANGO_ALLOWED_HOSTS", "*").split(",")
    if host.strip()
]

INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',
    'rest_framework',
    'countries',
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

ROOT_URLCONF = 'country_currency.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
            ],
        },
    },
]

WSGI_APPLICATION = 'country_currency.wsgi.application'

DATABASES = {
    'default': {
        'ENGINE': os.environ.get("DB_ENGINE", 'django.db.backends.sqlite3'),
        'NAME': os.environ.get("DB_NAME", str(BASE_DIR / 'db.sqlite3')),
        'USER': os.environ.get("DB_USER", ""),
        'PASSWORD': os.environ.get("DB_PASSWORD", ""),
        'HOST': os.environ.get("DB_HOST", ""),
        'PORT': os.environ.get("DB_PORT", ""),
    }
}

# The refresh lock lives in the default cache, so multi-process deployments
# need a shared backend here.
CACHES = {
    'default': {
        'BACKEND': os.environ.get(
            "CACHE_BACKEND", 'django.core.cache.backends.locmem.LocMemCache'
        ),
        'LOCATION': os.environ.get("CACHE_LOCATION", 'country-currency'),
    }
}

LANGUAGE_CODE = 'en-us'
TIME_ZONE = 'UTC'
USE_I18N = True
USE_TZ = True

STATIC_URL = 'static/'

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

# Slashless routes (/countries, /status) are the public contract.
APPEND_SLASH = False

REST_FRAMEWORK = {
    'DEFAULT_RENDERER_CLASSES': [
        'rest_framework.renderers.JSONRenderer',
    ],
    # exchange_rate and estimated_gdp are rendered as JSON numbers
    'COERCE_DECIMAL_TO_STRING': False,
    'DEFAULT_THROTTLE_RATES': {
        'refresh': os.environ.get("REFRESH_RATE_LIMIT", "10/min"),
    },
}

# --- Refresh pipeline -------------------------------------------------------

COUNTRIES_API_URL = os.environ.get(
    "COUNTRIES_API_URL",
    'https://restcountries.com/v2/all?fields=name,capital,region,population,flag,currencies',
)
EXCHANGE_API_URL = os.environ.get(
    "EXCHANGE_API_URL", 'https://open.er-api.com/v6/latest/USD'
)
EXTERNAL_API_TIMEOUT = float(os.environ.get("EXTERNAL_API_TIMEOUT", "10"))

if ENVIRONMENT == "production":
    _default_cache_dir = "/tmp/cache"
else:
    _default_cache_dir = str(BASE_DIR / "cache")
SUMMARY_CACHE_DIR = os.environ.get("SUMMARY_CACHE_DIR", _default_cache_dir)
SUMMARY_FONT_PATH = os.environ.get("SUMMARY_FONT_PATH") or None

REFRESH_CHUNK_SIZE = int(os.environ.get("REFRESH_CHUNK_SIZE", "50"))
REFRESH_LOCK_TIMEOUT = int(os.environ.get("REFRESH_LOCK_TIMEOUT", "600"))

# --- Logging ----------------------------------------------------------------

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'standard': {
            'format': '%(asctime)s | %(name)-20s | %(levelname)-7s | %(message)s',
            'datefmt': '%Y-%m-%d %H:%M:%S',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'standard',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': 'WARNING',
    },
    'loggers': {
        'countries': {
            'level': os.environ.get("LOG_LEVEL", "INFO"),
        },
    },
}
