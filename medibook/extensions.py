from flask import current_app
from flask_sqlalchemy import SQLAlchemy

STORE_KEY = "medibook.store"


class DatabaseSingleton:
    _instance = None

    @staticmethod
    def get_instance():
        if DatabaseSingleton._instance is None:
            DatabaseSingleton._instance = SQLAlchemy()
        return DatabaseSingleton._instance

db = DatabaseSingleton.get_instance()


def get_store():
    """Data store strategy selected for the running app."""
    return current_app.extensions[STORE_KEY]
