from fastapi_users.db import SQLAlchemyBaseUserTableUUID
# GUID is re-exported for the tables keyed by user id; importing the adapter
# package before fastapi_users.db leaves the latter without its SQLAlchemy names.
from fastapi_users_db_sqlalchemy.generics import GUID
from sqlalchemy import Column, String
from .database import Base


class User(SQLAlchemyBaseUserTableUUID, Base):
    __tablename__ = "users"

    # Copied into the provisioned profile after registration
    full_name = Column(String, nullable=True)
