"""Core SQLAlchemy models (2.x style) for mentor profiles.

Only the fields the search path reads are modelled in detail.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Float, ForeignKey, Index, Integer, String, Table, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


mentor_domains = Table(
    "mentor_domains",
    Base.metadata,
    Column("mentor_id", ForeignKey("mentor_profiles.id", ondelete="CASCADE"), primary_key=True),
    Column("domain_id", ForeignKey("domains.id", ondelete="CASCADE"), primary_key=True),
)


class User(Base):
    """Users table. Mentors are users with a profile."""
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    first_name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    last_name: Mapped[str | None] = mapped_column(String(255), index=True)
    email: Mapped[str | None] = mapped_column(String(255), unique=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, nullable=False)

    # Relationships
    mentor_profile: Mapped[MentorProfile | None] = relationship(
        "MentorProfile",
        back_populates="user",
        uselist=False,
    )


class Domain(Base):
    """Expertise domains a mentor can be tagged with."""
    __tablename__ = "domains"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True, index=True)

    mentors: Mapped[list[MentorProfile]] = relationship(
        "MentorProfile",
        secondary=mentor_domains,
        back_populates="domains",
    )


class MentorProfile(Base):
    """Mentor profiles table."""
    __tablename__ = "mentor_profiles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    bio: Mapped[str | None] = mapped_column(Text)
    profile_picture: Mapped[str | None] = mapped_column(String(1024))
    rating: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=_utcnow,
        onupdate=_utcnow,
        nullable=False,
    )

    # Relationships
    user: Mapped[User] = relationship("User", back_populates="mentor_profile")
    domains: Mapped[list[Domain]] = relationship(
        "Domain",
        secondary=mentor_domains,
        back_populates="mentors",
    )
    services: Mapped[list[Service]] = relationship("Service", back_populates="mentor")

    __table_args__ = (
        Index("ix_mentor_profiles_rating", "rating"),
    )


class Service(Base):
    """Services a mentor offers (e.g. "resume review")."""
    __tablename__ = "services"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    mentor_id: Mapped[int] = mapped_column(
        ForeignKey("mentor_profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(Text)

    # Relationship
    mentor: Mapped[MentorProfile] = relationship("MentorProfile", back_populates="services")
