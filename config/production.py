import os

from .base import HISTORY_LIMIT, LOG_LEVEL, SESSION_DAYS, db_config, env_flag

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = db_config()

DEBUG = False

AUTO_INIT_DB = env_flag("AUTO_INIT_DB")
AUTO_SEED_DB = env_flag("AUTO_SEED_DB")
