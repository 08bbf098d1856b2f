"""
Chart configuration model.

A chart holds an ordered list of elements; each element may carry a free-text
``formula`` that embeds content asset tokens such as ``[MEDIA:logo]``.
"""

from typing import Any
from uuid import uuid4

from sqlalchemy import JSON, Boolean, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.core.timestamps import utc_now_iso
from app.db.base import Base


class ChartConfiguration(Base):
    """Report chart definition."""
    __tablename__ = "chart_configurations"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    chart_id: Mapped[str] = mapped_column(String(100), nullable=False, unique=True, index=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    type: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        comment="pie, bar, kpi, text, image",
    )
    order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    elements: Mapped[Any] = mapped_column(
        JSON,
        nullable=True,
        default=list,
        comment="Ordered list of {label, formula, ...}",
    )
    created_at: Mapped[str] = mapped_column(String(32), nullable=False, default=utc_now_iso)
    updated_at: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        default=utc_now_iso,
        onupdate=utc_now_iso,
    )

    def __repr__(self) -> str:
        return f"<ChartConfiguration(chart_id={self.chart_id}, type={self.type})>"
