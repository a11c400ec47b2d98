"""
Database Models

SQLAlchemy ORM models for users, incidents and evidence records.
"""

from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


def utcnow() -> datetime:
    """Naive UTC timestamp, the form every DateTime column stores"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class UserDB(Base):
    """Officer account"""

    __tablename__ = "users"

    id = Column(String(36), primary_key=True)
    badge_id = Column(String(100), nullable=False, unique=True, index=True)
    name = Column(String(255), nullable=False)
    password = Column(String(255), nullable=False)
    is_admin = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f"<UserDB(id='{self.id}', badge_id='{self.badge_id}')>"


class IncidentDB(Base):
    """Incident record"""

    __tablename__ = "incidents"

    id = Column(String(36), primary_key=True)
    case_number = Column(String(32), nullable=False, unique=True, index=True)
    reported_at = Column(DateTime, nullable=False, default=utcnow, index=True)
    occurred_at = Column(DateTime, nullable=False, index=True)
    location = Column(Text, nullable=False)
    crime_type = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    status = Column(String(50), nullable=False, default="Open", index=True)
    closing_reason = Column(Text, nullable=True)
    reported_by_id = Column(String(36), ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    reported_by = relationship("UserDB", lazy="raise")

    def __repr__(self):
        return f"<IncidentDB(id='{self.id}', case_number='{self.case_number}')>"


class EvidenceDB(Base):
    """Evidence reference attached to an incident"""

    __tablename__ = "evidence"

    id = Column(String(36), primary_key=True)
    description = Column(Text, nullable=False)
    type = Column(String(50), nullable=False)
    storage_reference = Column(Text, nullable=False)
    incident_id = Column(
        String(36), ForeignKey("incidents.id", ondelete="CASCADE"), nullable=False, index=True
    )
    added_by_id = Column(String(36), ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True)
    created_at = Column(DateTime, nullable=False, default=utcnow, index=True)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    added_by = relationship("UserDB", lazy="raise")

    def __repr__(self):
        return f"<EvidenceDB(id='{self.id}', incident_id='{self.incident_id}')>"
