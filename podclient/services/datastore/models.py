"""SQLAlchemy models for database integration."""

from datetime import datetime

from sqlalchemy import Column, DateTime, Integer, String, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class DBPodRegistration(Base):
    """Persistence for :class:`domain.PodRegistration`."""

    __tablename__ = 'pod_registration'

    registration_id = Column(Integer, primary_key=True, autoincrement=True)
    host = Column(String(255), unique=True, nullable=False)
    client_id = Column(String(255), nullable=True)
    client_secret = Column(String(255), nullable=True)

    extra = Column(Text, nullable=True)
    """JSON object of any other fields returned by the pod."""

    created = Column(DateTime, default=datetime.now)
    updated = Column(DateTime, default=datetime.now, onupdate=datetime.now)
