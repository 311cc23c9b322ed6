from .base import HISTORY_LIMIT, SESSION_DAYS, db_config

SECRET_KEY = "test-secret"

DB_CONFIG = db_config(default_password="test")

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

# Tests inject in-memory repositories; never touch MySQL on startup.
AUTO_INIT_DB = False
AUTO_SEED_DB = False
