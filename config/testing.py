SECRET_KEY = "test-secret"

STORE_BACKEND = "memory"
DB_CONFIG = {}

LOCATION_POLL_SECONDS = 0.05

ADMIN_NAME = "Test Admin"
ADMIN_EMAIL = "admin@test.local"
ADMIN_PASSWORD = "admin123"

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = False
AUTO_SEED_DB = False
