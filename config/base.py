"""Settings shared by every environment (overridable via environment variables / .env)."""
import os


def env_flag(name: str, default: str = "0") -> bool:
    return bool(int(os.getenv(name, default)))


def db_config(default_password: str = "") -> dict:
    return {
        "host": os.getenv("DB_HOST", "localhost"),
        "port": int(os.getenv("DB_PORT", "3306")),
        "user": os.getenv("DB_USER", "root"),
        "password": os.getenv("DB_PASSWORD", default_password),
        "database": os.getenv("DB_NAME", "geo_attendance"),
    }


LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Number of events shown in the dashboard history list
HISTORY_LIMIT = int(os.getenv("HISTORY_LIMIT", "30"))

# Lifetime of a "remember me" login
SESSION_DAYS = int(os.getenv("SESSION_DAYS", "7"))
