"""
Project (event) and Partner models.

Both are stored document-style: hashtags live in a flat JSON list and in a
JSON category map, and stats are a free-form JSON object. Shapes are not
trusted on read; see app.services.hashtag_normalizer.
"""

from typing import Any
from uuid import uuid4

from sqlalchemy import JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from app.core.timestamps import utc_now_iso
from app.db.base import Base


class Project(Base):
    """An event with its recorded statistics."""
    __tablename__ = "projects"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    event_name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    event_date: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        comment="ISO-8601 event date",
    )
    hashtags: Mapped[Any] = mapped_column(
        JSON,
        nullable=True,
        default=list,
        comment="Flat hashtag list (legacy rows may hold a comma-separated string)",
    )
    categorized_hashtags: Mapped[Any] = mapped_column(
        JSON,
        nullable=True,
        default=dict,
        comment="Category name -> list of hashtags",
    )
    stats: Mapped[Any] = mapped_column(JSON, nullable=True, default=dict)
    view_slug: Mapped[str | None] = mapped_column(String(36), nullable=True, unique=True)
    edit_slug: Mapped[str | None] = mapped_column(String(36), nullable=True, unique=True)
    created_at: Mapped[str] = mapped_column(String(32), nullable=False, default=utc_now_iso)
    updated_at: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        default=utc_now_iso,
        onupdate=utc_now_iso,
    )

    def __repr__(self) -> str:
        return f"<Project(event_name={self.event_name}, event_date={self.event_date})>"


class Partner(Base):
    """A partner organisation; carries hashtags in the same two shapes."""
    __tablename__ = "partners"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    hashtags: Mapped[Any] = mapped_column(JSON, nullable=True, default=list)
    categorized_hashtags: Mapped[Any] = mapped_column(JSON, nullable=True, default=dict)
    created_at: Mapped[str] = mapped_column(String(32), nullable=False, default=utc_now_iso)
    updated_at: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        default=utc_now_iso,
        onupdate=utc_now_iso,
    )

    def __repr__(self) -> str:
        return f"<Partner(name={self.name})>"
