from flask import current_app

from models.db_storage import DBStorage


def get_storage() -> DBStorage:
    """The DBStorage bound to the running app by create_app()."""
    return current_app.extensions["storage"]
