import os

from .base import HISTORY_LIMIT, SESSION_DAYS, db_config, env_flag

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = db_config(default_password="root")

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = env_flag("AUTO_INIT_DB", "1")
# Optional: also seed the demo geofence and demo users on startup
AUTO_SEED_DB = env_flag("AUTO_SEED_DB", "0")
