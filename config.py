import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./test.db")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    ENABLE_LOGGING_MIDDLEWARE = bool(data.get("ENABLE_LOGGING_MIDDLEWARE", 1))
    ENABLE_SENTRY = data.get("ENABLE_SENTRY", 0)
    DSN_SENTRY = data.get("DSN_SENTRY", "")
    SENTRY_ENVIRONMENT = data.get("SENTRY_ENVIRONMENT", "dev")

    # Financial reporting
    REPORT_CACHE_TTL_SECONDS = data.get("REPORT_CACHE_TTL_SECONDS", 300)
    LOW_CREDIT_REPORT_THRESHOLD = data.get("LOW_CREDIT_REPORT_THRESHOLD", 100)
    LOW_CREDIT_USAGE_WINDOW_DAYS = data.get("LOW_CREDIT_USAGE_WINDOW_DAYS", 30)

    # Credit movement history
    MOVEMENT_PAGE_SIZE = data.get("MOVEMENT_PAGE_SIZE", 100)

    # Ledger reconciliation
    RECONCILIATION_ENABLED = bool(data.get("RECONCILIATION_ENABLED", True))
    RECONCILIATION_INTERVAL_SECONDS = data.get("RECONCILIATION_INTERVAL_SECONDS", 86400)  # Daily
