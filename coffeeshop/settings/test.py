"""
Django Test Settings
테스트 환경 전용 설정 (pytest, Django test)
"""

import os

from coffeeshop.settings.base import *  # noqa: F401, F403
from coffeeshop.settings.components.logging import get_logging_config

# ==========================================================================
# Test Mode Flag
# ==========================================================================

TESTING = True
DEBUG = True

# ==========================================================================
# Database (DATABASE_NAME 지정 시 PostgreSQL, 아니면 SQLite)
# ==========================================================================

if os.getenv("DATABASE_NAME"):
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.postgresql",
            "NAME": os.getenv("DATABASE_NAME"),
            "USER": os.getenv("DATABASE_USER", "postgres"),
            "PASSWORD": os.getenv("DATABASE_PASSWORD", "postgres"),
            "HOST": os.getenv("DATABASE_HOST", "localhost"),
            "PORT": os.getenv("DATABASE_PORT", "5432"),
            # 테스트에서는 연결 즉시 닫기
            "CONN_MAX_AGE": 0,
            "CONN_HEALTH_CHECKS": False,
        }
    }
else:
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.sqlite3",
            "NAME": BASE_DIR / "test_db.sqlite3",  # noqa: F405
        }
    }

# ==========================================================================
# Cache (LocMem - 구역 캐시 무효화 동작 검증용)
# ==========================================================================

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "coffeeshop-test",
    }
}

# ==========================================================================
# Celery (동기 실행 - 테스트에서는 즉시 실행)
# ==========================================================================

CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True
CELERY_BROKER_URL = "memory://"
CELERY_RESULT_BACKEND = "cache+memory://"

# ==========================================================================
# Rate Limiting - 테스트에서는 비활성화
# ==========================================================================

REST_FRAMEWORK["DEFAULT_THROTTLE_RATES"] = {  # noqa: F405
    "shipping_calculate": "1000/min",
    "anon_global": "10000/hour",
    "user_global": "10000/hour",
}

# ==========================================================================
# Logging (Quiet mode for tests)
# ==========================================================================

LOGGING = get_logging_config(debug=False)

# ==========================================================================
# Password Hashing (빠른 해싱 - 테스트 속도 향상)
# ==========================================================================

PASSWORD_HASHERS = [
    "django.contrib.auth.hashers.MD5PasswordHasher",
]
