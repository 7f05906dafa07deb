import os

SECRET_KEY = "test-secret"
JWT_SECRET_KEY = "test-jwt-secret-with-enough-length-for-hs256"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "qrwork_test"),
}

BASE_URL = "http://testserver"

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"
COOKIE_SECURE = False

SUPER_ADMIN_EMAIL = "root@example.com"
SUPER_ADMIN_PASSWORD = "rootpass"
SUPER_ADMIN_NAME = "Super Admin"

AUTO_INIT_DB = False
