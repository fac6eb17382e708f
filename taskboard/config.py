import os

from dotenv import load_dotenv

# Load .env from the project root so local MONGODB_URI / JWT_SECRET are picked up
load_dotenv()


class Config:
    # Required at first use, not at boot: get_db() and issue_token() fail loudly without them
    MONGO_URI = os.environ.get("MONGODB_URI")
    MONGO_DB_NAME = os.environ.get("MONGO_DB_NAME", "taskboard")

    JWT_SECRET_KEY = os.environ.get("JWT_SECRET")
    SESSION_TTL_SECONDS = int(os.environ.get("SESSION_TTL_SECONDS", str(60 * 60 * 24 * 7)))

    # Session transport: cookie only, never headers or body
    JWT_TOKEN_LOCATION = ["cookies"]
    JWT_ACCESS_COOKIE_NAME = "auth_token"
    JWT_ACCESS_COOKIE_PATH = "/"
    JWT_COOKIE_SAMESITE = "Lax"
    JWT_COOKIE_CSRF_PROTECT = False
    JWT_SESSION_COOKIE = False

    PASSWORD_HASH_METHOD = os.environ.get("PASSWORD_HASH_METHOD", "scrypt:32768:8:1")

    CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "*")
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    ENV = os.environ.get("FLASK_ENV", "development")
    DEBUG = os.environ.get("FLASK_DEBUG", "0") == "1"
