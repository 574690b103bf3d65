import os

from dotenv import load_dotenv

load_dotenv()


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///medibook.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # "sql" keeps records in the relational store, "memory" uses the seeded sample store
    DATA_BACKEND = os.getenv("DATA_BACKEND", "sql")
    SEED_SAMPLE_DATA = os.getenv("SEED_SAMPLE_DATA", "false").lower() in ("1", "true", "yes")

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    BOOKING_WINDOW_DAYS = int(os.getenv("BOOKING_WINDOW_DAYS", "30"))


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret-key"
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    DATA_BACKEND = "sql"
    SEED_SAMPLE_DATA = False
    LOG_LEVEL = "WARNING"
