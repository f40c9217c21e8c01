"""SQLAlchemy models for the ledgerlink record store."""

import uuid
from datetime import datetime, UTC
from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Numeric,
    String,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


def _new_id() -> str:
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(UTC)


class User(Base):
    """Auth identity model."""

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=_new_id)
    email = Column(String(255), unique=True, nullable=False)
    password_hash = Column(String, nullable=False)
    created_at = Column(DateTime, default=_now, nullable=False)

    # Relationships
    sessions = relationship("UserSession", back_populates="user", cascade="all, delete-orphan")
    password_resets = relationship("PasswordReset", back_populates="user", cascade="all, delete-orphan")


class UserSession(Base):
    """Session token model."""

    __tablename__ = "sessions"

    token = Column(String, primary_key=True)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime, default=_now, nullable=False)

    # Relationships
    user = relationship("User", back_populates="sessions")


class PasswordReset(Base):
    """One-time password reset token model."""

    __tablename__ = "password_resets"

    token = Column(String, primary_key=True)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False)
    expires_at = Column(DateTime, nullable=False)

    # Relationships
    user = relationship("User", back_populates="password_resets")


class Profile(Base):
    """User profile model, keyed by the auth user ID."""

    __tablename__ = "profiles"

    user_id = Column(String(36), primary_key=True)
    display_name = Column(String(50), nullable=False)
    avatar_path = Column(String, nullable=True)
    created_at = Column(DateTime, default=_now, nullable=False)


class Transaction(Base):
    """Transaction model."""

    __tablename__ = "transactions"

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String(36), nullable=False, index=True)
    type = Column(String(7), nullable=False)
    amount = Column(Numeric(15, 2), nullable=False)
    description = Column(String(200), nullable=False)
    category = Column(String, nullable=False)
    date = Column(Date, nullable=False)
    is_pending = Column(Boolean, default=False, nullable=False)
    linked_income_ids = Column(JSON, default=list, nullable=False)
    created_at = Column(DateTime, default=_now, nullable=False)
    updated_at = Column(DateTime, default=_now, onupdate=_now, nullable=False)


class CustomCategory(Base):
    """User-defined category model."""

    __tablename__ = "custom_categories"

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String(36), nullable=False, index=True)
    name = Column(String(30), nullable=False)
    icon = Column(String, nullable=False)
    type = Column(String(7), nullable=False)
    created_at = Column(DateTime, default=_now, nullable=False)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
