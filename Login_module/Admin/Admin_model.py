from sqlalchemy import Column, Integer, String, DateTime
from database import Base
from Login_module.Utils.datetime_utils import now_utc


class Admin(Base):
    __tablename__ = "admins"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(DateTime, nullable=False, default=now_utc)
