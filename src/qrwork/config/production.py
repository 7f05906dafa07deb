import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")
JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", SECRET_KEY)

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "qrwork"),
}

BASE_URL = os.getenv("BASE_URL", "http://localhost:5000")

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
COOKIE_SECURE = bool(int(os.getenv("COOKIE_SECURE", "1")))

SUPER_ADMIN_EMAIL = os.getenv("SUPER_ADMIN_EMAIL")
SUPER_ADMIN_PASSWORD = os.getenv("SUPER_ADMIN_PASSWORD")
SUPER_ADMIN_NAME = os.getenv("SUPER_ADMIN_NAME", "Super Admin")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
