import os


def _split(value):
    return [item.strip() for item in value.split(",") if item.strip()]


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "change-me-treyfa-secret")
    JWT_SECRET = os.getenv("JWT_SECRET", SECRET_KEY)
    JWT_ALGORITHM = "HS256"
    JWT_EXPIRATION_HOURS = int(os.getenv("JWT_EXPIRATION_HOURS", "24"))

    ENVIRONMENT = os.getenv("APP_ENV", os.getenv("FLASK_ENV", "development"))
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///site.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    CORS_ORIGINS = _split(os.getenv("CORS_ORIGINS", "http://localhost:5173,http://localhost:3000"))

    UPLOAD_FOLDER = os.getenv("UPLOAD_FOLDER", "uploads")
    MAX_CONTENT_LENGTH = 10 * 1024 * 1024
    BCRYPT_LOG_ROUNDS = 12

    BOOTSTRAP_ADMIN_USERNAME = os.getenv("BOOTSTRAP_ADMIN_USERNAME", "admin")
    BOOTSTRAP_ADMIN_EMAIL = os.getenv("BOOTSTRAP_ADMIN_EMAIL", "admin@treyfatech.com")
    BOOTSTRAP_ADMIN_PASSWORD = os.getenv("BOOTSTRAP_ADMIN_PASSWORD", "treyfat2024")

    SWAGGER = {
        "title": "Treyfa-Tech Site API",
        "uiversion": 3,
        "openapi": "3.0.3",
        "description": "Content backend for the Treyfa-Tech marketing site and admin dashboard",
        "version": "1.0.0",
        "securityDefinitions": {
            "Bearer": {
                "type": "apiKey",
                "name": "Authorization",
                "in": "header",
                "description": 'JWT Authorization header using the Bearer scheme. Example: "Authorization: Bearer {token}"',
            }
        },
    }


class TestingConfig(Config):
    TESTING = True
    ENVIRONMENT = "testing"
    SECRET_KEY = "test-secret"
    JWT_SECRET = "test-secret"
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    BCRYPT_LOG_ROUNDS = 4
    LOG_LEVEL = "WARNING"
    SEED_BOOTSTRAP_ADMIN = False


class ProductionConfig(Config):
    ENVIRONMENT = "production"
