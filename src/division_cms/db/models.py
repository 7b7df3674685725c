"""
division_cms.db.models

Persistence schema for divisions, their programs and program modules.

Responsibilities:
- Define ORM models:
  - Division: organizational unit and top-level authorization scope
  - Admin: division administrator (authoritative division membership)
  - Program: initiative owned by one division
  - ProgramModule: optional publishable feature attached to a program
  - ProgramAnnouncement: announcement content shown on division pages
"""

from __future__ import annotations

import enum
import uuid
from datetime import date, datetime

from sqlalchemy import (
    Boolean,
    Enum,
    ForeignKey,
    Index,
    String,
    Text,
    UniqueConstraint,
    Uuid as SAUuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from division_cms.db.base import Base


def _utcnow() -> datetime:
    # Naive UTC timestamps, consistent across SQLite and Postgres.
    return datetime.utcnow()


class ModuleType(enum.StrEnum):
    # Stored by name; names and values are identical on purpose.
    announcement = "announcement"
    registration = "registration"
    advertisement = "advertisement"


class Division(Base):
    __tablename__ = "divisions"

    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    name: Mapped[str] = mapped_column(String(256), nullable=False)
    # URL key used by public pages, e.g. "farmelife".
    slug: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)

    programs: Mapped[list[Program]] = relationship(back_populates="division")


class Admin(Base):
    __tablename__ = "admins"

    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    user_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    division_id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), ForeignKey("divisions.id"), nullable=False, index=True
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)


class Program(Base):
    __tablename__ = "programs"

    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    division_id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), ForeignKey("divisions.id"), nullable=False, index=True
    )

    name: Mapped[str] = mapped_column(String(256), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    start_date: Mapped[date | None] = mapped_column(nullable=True)
    end_date: Mapped[date | None] = mapped_column(nullable=True)
    all_panchayaths: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)

    division: Mapped[Division] = relationship(back_populates="programs")
    modules: Mapped[list[ProgramModule]] = relationship(
        back_populates="program", cascade="all, delete-orphan"
    )
    announcements: Mapped[list[ProgramAnnouncement]] = relationship(
        back_populates="program", cascade="all, delete-orphan"
    )

    __table_args__ = (Index("ix_programs_division_created", "division_id", "created_at"),)


class ProgramModule(Base):
    __tablename__ = "program_modules"

    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    program_id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), ForeignKey("programs.id"), nullable=False, index=True
    )

    module_type: Mapped[ModuleType] = mapped_column(Enum(ModuleType), nullable=False)
    is_published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow, onupdate=_utcnow)

    program: Mapped[Program] = relationship(back_populates="modules")

    # One module of each type per program.
    __table_args__ = (UniqueConstraint("program_id", "module_type"),)


class ProgramAnnouncement(Base):
    __tablename__ = "program_announcements"

    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    program_id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), ForeignKey("programs.id"), nullable=False, index=True
    )

    title: Mapped[str] = mapped_column(String(256), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    poster_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    is_published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow, index=True)

    program: Mapped[Program] = relationship(back_populates="announcements")


# --- Module Notes -----------------------------------------------------------
# Admin division membership lives only in `admins.division_id`; token payloads
# carry a copy that is never trusted for authorization.
