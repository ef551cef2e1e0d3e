from sqlalchemy import Column, Integer, String, DateTime, Float, Text, CheckConstraint
from database import Base
from Login_module.Utils.datetime_utils import now_utc


class Member(Base):
    __tablename__ = "members"
    __table_args__ = (
        CheckConstraint("time_taken >= 0", name="ck_members_time_taken_non_negative"),
    )

    id = Column(Integer, primary_key=True, index=True)

    name = Column(String(200), nullable=False)
    constituency = Column(String(200), nullable=False)
    session_name = Column(String(200), nullable=False, index=True)
    session_date = Column(DateTime, nullable=False, index=True)  # naive UTC
    speech_given = Column(Text, nullable=False)
    time_taken = Column(Float, nullable=False)  # minutes

    party_name = Column(String(200), nullable=False, default="")

    # Relative URLs under the static upload mount, or absolute URLs
    image_url = Column(String(500), nullable=False, default="")
    party_logo_url = Column(String(500), nullable=False, default="")

    created_at = Column(DateTime, nullable=False, default=now_utc, index=True)
    updated_at = Column(DateTime, nullable=False, default=now_utc, onupdate=now_utc)
