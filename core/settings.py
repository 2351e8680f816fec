"""
Django settings for the campsite reviews backend.

Most values can be overridden through environment variables so the same module serves
local development, the test suite and production deployments.
"""
import os
from pathlib import Path

from core.logging import configure_logging

BASE_DIR = Path(__file__).resolve().parent.parent


def env_bool(name, default=False):
    return os.getenv(name, str(int(default))).strip().lower() in ('1', 'true', 'yes', 'on')


def env_int(name, default):
    return int(os.getenv(name, default))


SECRET_KEY = os.getenv('DJANGO_SECRET_KEY', 'replace-me-in-production')
DEBUG = env_bool('DJANGO_DEBUG', default=True)
ALLOWED_HOSTS = [host.strip() for host in os.getenv('DJANGO_ALLOWED_HOSTS', '*').split(',') if host.strip()]

INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',

    'rest_framework',
    'rest_framework.authtoken',
    'django_filters',

    'profile_app.apps.ProfileAppConfig',
    'campsites_app.apps.CampsitesAppConfig',
    'reviews_app.apps.ReviewsAppConfig',
    'moderation_app.apps.ModerationAppConfig',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
    'core.middleware.RequestLogContextMiddleware',
]

ROOT_URLCONF = 'core.urls'

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

WSGI_APPLICATION = 'core.wsgi.application'
ASGI_APPLICATION = 'core.asgi.application'

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': os.getenv('DJANGO_DB_PATH', str(BASE_DIR / 'db.sqlite3')),
    }
}

AUTH_PASSWORD_VALIDATORS = [
    {'NAME': 'django.contrib.auth.password_validation.UserAttributeSimilarityValidator'},
    {'NAME': 'django.contrib.auth.password_validation.MinimumLengthValidator'},
    {'NAME': 'django.contrib.auth.password_validation.CommonPasswordValidator'},
    {'NAME': 'django.contrib.auth.password_validation.NumericPasswordValidator'},
]

LANGUAGE_CODE = 'en-us'
TIME_ZONE = 'UTC'
USE_I18N = True
USE_TZ = True

STATIC_URL = 'static/'
DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

REST_FRAMEWORK = {
    'DEFAULT_AUTHENTICATION_CLASSES': [
        'core.authentication.LogContextTokenAuthentication',
        'core.authentication.LogContextSessionAuthentication',
    ],
    'DEFAULT_PERMISSION_CLASSES': [
        'rest_framework.permissions.IsAuthenticated',
    ],
    'DEFAULT_FILTER_BACKENDS': [
        'django_filters.rest_framework.DjangoFilterBackend',
    ],
}

# --- Reviews ---
REVIEWS_PAGE_SIZE = env_int('REVIEWS_PAGE_SIZE', 5)
REVIEWS_MAX_PAGE_SIZE = env_int('REVIEWS_MAX_PAGE_SIZE', 50)
RECENT_REVIEWS_LIMIT = env_int('RECENT_REVIEWS_LIMIT', 5)
REPORTED_REVIEWS_PAGE_SIZE = env_int('REPORTED_REVIEWS_PAGE_SIZE', 20)

# --- Moderation ---
MODERATION_LOG_PAGE_SIZE = env_int('MODERATION_LOG_PAGE_SIZE', 20)
MODERATION_LOG_MAX_PAGE_SIZE = env_int('MODERATION_LOG_MAX_PAGE_SIZE', 100)

# --- Logging ---
# Django's dictConfig step is skipped; structlog and the stdlib handlers are set up below.
ENVIRONMENT = os.getenv('ENVIRONMENT', 'development').lower()
LOG_LEVEL = os.getenv('LOG_LEVEL')
LOG_DIR = os.getenv('LOG_DIR')
LOGGING_CONFIG = None
configure_logging(environment=ENVIRONMENT, level=LOG_LEVEL, log_dir=LOG_DIR)
