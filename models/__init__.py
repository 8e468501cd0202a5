from models.base_model import Base
from models.user import User, ROLES
from models.refresh_token import RefreshToken
from models.invalid_token import InvalidToken
from models.db_storage import DBStorage

__all__ = ["Base", "User", "ROLES", "RefreshToken", "InvalidToken", "DBStorage"]
