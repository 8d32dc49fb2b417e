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
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./workboard.db")
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    JWT_SECRET = data.get("JWT_SECRET", "dev-secret-key-change-in-production")
    JWT_EXPIRE_MINUTES = int(data.get("JWT_EXPIRE_MINUTES", 60))
    ENABLE_SECURITY_LOGGING = bool(data.get("ENABLE_SECURITY_LOGGING", 1))
    SECURITY_LOG_FILE = data.get("SECURITY_LOG_FILE", "")
    ENABLE_SCHEDULERS = bool(data.get("ENABLE_SCHEDULERS", 1))
    BANDWIDTH_REMINDER_DAY = int(data.get("BANDWIDTH_REMINDER_DAY", 25))
    BANDWIDTH_REMINDER_HOUR = int(data.get("BANDWIDTH_REMINDER_HOUR", 9))
    TASK_REMINDER_HOUR = int(data.get("TASK_REMINDER_HOUR", 8))
    NOTIFICATION_HEARTBEAT_SECONDS = float(data.get("NOTIFICATION_HEARTBEAT_SECONDS", 30))
    NOTIFICATION_QUEUE_SIZE = int(data.get("NOTIFICATION_QUEUE_SIZE", 100))
