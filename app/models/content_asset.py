"""
Content asset model: reusable images and text blocks.

Charts reference assets by slug through ``[MEDIA:slug]`` and ``[TEXT:slug]``
tokens, so a slug must stay unique.
"""

import enum
from typing import Any
from uuid import uuid4

from sqlalchemy import JSON, Boolean, Enum, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.core.timestamps import utc_now_iso
from app.db.base import Base


class ContentAssetType(str, enum.Enum):
    """Asset kinds and the token prefix each is referenced with."""
    IMAGE = "image"   # [MEDIA:slug]
    TEXT = "text"     # [TEXT:slug]


class ContentAsset(Base):
    """Image URL or text block referenced from chart formulas."""
    __tablename__ = "content_assets"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    slug: Mapped[str] = mapped_column(String(100), nullable=False, unique=True, index=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(String(500), nullable=True)
    type: Mapped[ContentAssetType] = mapped_column(Enum(ContentAssetType), nullable=False)
    content: Mapped[Any] = mapped_column(JSON, nullable=True, default=dict)
    category: Mapped[str] = mapped_column(String(100), nullable=False, default="Uncategorized")
    tags: Mapped[Any] = mapped_column(JSON, nullable=True, default=list)
    is_variable: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        comment="Variable definition (filled per project) vs global asset",
    )
    usage_count: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        comment="Charts referencing this asset at the last scan (denormalized)",
    )
    created_at: Mapped[str] = mapped_column(String(32), nullable=False, default=utc_now_iso)
    updated_at: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        default=utc_now_iso,
        onupdate=utc_now_iso,
    )

    def __repr__(self) -> str:
        return f"<ContentAsset(slug={self.slug}, type={self.type})>"
