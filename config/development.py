import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

# memory: process-local store, mysql: kv_store table in DB_CONFIG
STORE_BACKEND = os.getenv("STORE_BACKEND", "memory")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "ebus_db"),
}

LOCATION_POLL_SECONDS = float(os.getenv("LOCATION_POLL_SECONDS", "5"))

ADMIN_NAME = os.getenv("ADMIN_NAME", "Admin Demo")
ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@ebus.local")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "admin123")

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
# Seed the admin account, a demo driver and demo buses on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "1")))
