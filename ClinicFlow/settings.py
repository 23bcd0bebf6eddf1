# ClinicFlow/settings.py
#
# Environment-driven settings (python-decouple). Every value can be set in the
# process environment or in a `.env` file next to manage.py.
# ------------------------------------------------------------------

from pathlib import Path

from decouple import Csv, config

BASE_DIR = Path(__file__).resolve().parent.parent

# ------------------------------------------------------------------#
#                               Core                                 #
# ------------------------------------------------------------------#
SECRET_KEY = config("SECRET_KEY", default="clinicflow-dev-insecure-key")
DEBUG = config("DEBUG", default=False, cast=bool)
ALLOWED_HOSTS = config("ALLOWED_HOSTS", default="localhost,127.0.0.1,testserver", cast=Csv())

INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    # Local apps
    "doctor",
    "patient",
    "room",
    "appointments",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "ClinicFlow.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

# ------------------------------------------------------------------#
#                             Database                               #
# ------------------------------------------------------------------#
# DB_TIMEOUT bounds how long a booking transaction waits on a lock.
DB_ENGINE = config("DB_ENGINE", default="sqlite")
DB_TIMEOUT = config("DB_TIMEOUT", default=5, cast=int)

if DB_ENGINE == "postgres":
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.postgresql",
            "NAME": config("DB_NAME", default="clinicflow"),
            "USER": config("DB_USER", default="clinicflow"),
            "PASSWORD": config("DB_PASSWORD", default=""),
            "HOST": config("DB_HOST", default="localhost"),
            "PORT": config("DB_PORT", default="5432"),
            "OPTIONS": {
                "options": f"-c lock_timeout={DB_TIMEOUT * 1000}",
            },
        }
    }
else:
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.sqlite3",
            "NAME": config("DB_NAME", default=str(BASE_DIR / "db.sqlite3")),
            "OPTIONS": {"timeout": DB_TIMEOUT},
        }
    }

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# ------------------------------------------------------------------#
#                          I18N / Time                               #
# ------------------------------------------------------------------#
LANGUAGE_CODE = "en-us"
TIME_ZONE = config("TIME_ZONE", default="America/Toronto")
USE_I18N = True
USE_TZ = True

STATIC_URL = "static/"
STATIC_ROOT = BASE_DIR / "staticfiles"

# ------------------------------------------------------------------#
#                        Booking policy                              #
# ------------------------------------------------------------------#
# Default visit length for new bookings (minutes).
CLINICFLOW_APPOINTMENT_MINUTES = config("CLINICFLOW_APPOINTMENT_MINUTES", default=30, cast=int)
# Check-and-commit attempts before a booking gives up with StoreUnavailable.
CLINICFLOW_BOOKING_ATTEMPTS = config("CLINICFLOW_BOOKING_ATTEMPTS", default=3, cast=int)
# Region used to normalise phone numbers written without a country code.
CLINICFLOW_PHONE_REGION = config("CLINICFLOW_PHONE_REGION", default="CA")

# ------------------------------------------------------------------#
#                             Logging                                #
# ------------------------------------------------------------------#
LOG_LEVEL = config("LOG_LEVEL", default="INFO")

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "%(asctime)s %(levelname)s [%(name)s] %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "verbose",
        },
    },
    "root": {"handlers": ["console"], "level": "WARNING"},
    "loggers": {
        "ClinicFlow": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False},
        "appointments": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False},
        "doctor": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False},
        "patient": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False},
        "room": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False},
    },
}
