"""
Hashtag registry models.

Hashtags have no table of their own; they live inside project and partner
documents. The tables here hold what must outlive any single document: the
stable slug of each canonical hashtag, display colors, categories and saved
filter combinations.
"""

from typing import Any
from uuid import uuid4

from sqlalchemy import JSON, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.core.timestamps import utc_now_iso
from app.db.base import Base


class HashtagSlug(Base):
    """
    Slug registry entry: one row per canonical hashtag ever observed.

    Both ``hashtag`` and ``slug`` are unique. A slug is never rewritten once
    assigned, including when the hashtag drops to zero occurrences.
    """
    __tablename__ = "hashtag_slugs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    hashtag: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
        unique=True,
        index=True,
        comment="Canonical hashtag or category:hashtag composite",
    )
    slug: Mapped[str] = mapped_column(
        String(36),
        nullable=False,
        unique=True,
        index=True,
        comment="Random UUID used in shareable report links",
    )
    created_at: Mapped[str] = mapped_column(String(32), nullable=False)
    updated_at: Mapped[str] = mapped_column(String(32), nullable=False)

    def __repr__(self) -> str:
        return f"<HashtagSlug(hashtag={self.hashtag}, slug={self.slug})>"


class HashtagColor(Base):
    """Individual display color of a hashtag."""
    __tablename__ = "hashtag_colors"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False, unique=True, index=True)
    color: Mapped[str] = mapped_column(String(7), nullable=False)
    created_at: Mapped[str] = mapped_column(String(32), nullable=False, default=utc_now_iso)
    updated_at: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        default=utc_now_iso,
        onupdate=utc_now_iso,
    )


class HashtagCategory(Base):
    """A hashtag category such as ``country`` or ``sponsor``."""
    __tablename__ = "hashtag_categories"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    name: Mapped[str] = mapped_column(String(50), nullable=False, unique=True, index=True)
    color: Mapped[str] = mapped_column(String(7), nullable=False)
    order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[str] = mapped_column(String(32), nullable=False, default=utc_now_iso)
    updated_at: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        default=utc_now_iso,
        onupdate=utc_now_iso,
    )


class FilterSlug(Base):
    """A saved multi-hashtag filter, addressable by a random slug."""
    __tablename__ = "filter_slugs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    slug: Mapped[str] = mapped_column(String(36), nullable=False, unique=True, index=True)
    combination: Mapped[str] = mapped_column(
        String(1000),
        nullable=False,
        unique=True,
        comment="Sorted hashtags joined with ',' (lookup key)",
    )
    hashtags: Mapped[Any] = mapped_column(JSON, nullable=False)
    created_at: Mapped[str] = mapped_column(String(32), nullable=False)
    last_accessed: Mapped[str] = mapped_column(String(32), nullable=False)
