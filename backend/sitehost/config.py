import os
from dotenv import load_dotenv

load_dotenv()

class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", SECRET_KEY)
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Site history
    SITE_HISTORY_KEEP_COUNT = int(os.getenv("SITE_HISTORY_KEEP_COUNT", "20"))

    # Blob store
    BLOB_STORE_BACKEND = os.getenv("BLOB_STORE_BACKEND", "filesystem")
    BLOB_STORE_ROOT = os.getenv("BLOB_STORE_ROOT", "storage/blobs")
    BLOB_STORE_TIMEOUT = float(os.getenv("BLOB_STORE_TIMEOUT", "10"))
    BLOB_STORE_WORKERS = int(os.getenv("BLOB_STORE_WORKERS", "4"))
    BLOB_STREAM_CHUNK_SIZE = 64 * 1024

class DevelopmentConfig(BaseConfig):
    DEBUG = True
    SQLALCHEMY_DATABASE_URI = os.getenv("DEV_DATABASE_URI", "sqlite:///sitehost-dev.db")

class ProductionConfig(BaseConfig):
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URI")

class TestingConfig(BaseConfig):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    JWT_SECRET_KEY = "test-jwt-secret-key-with-enough-length"
    SITE_HISTORY_KEEP_COUNT = 3
    BLOB_STORE_BACKEND = "memory"
    BLOB_STORE_TIMEOUT = 2.0
    BLOB_STREAM_CHUNK_SIZE = 4

config_by_name = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
}
