"""
Hashtag color and category service.

Colors resolve with the priority category color > individual hashtag
color > default.
"""

import re
from typing import Any, Sequence

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ConflictException, NotFoundException, ValidationException
from app.models.hashtag import HashtagCategory, HashtagColor
from app.services.hashtag_normalizer import normalize_hashtag

DEFAULT_HASHTAG_COLOR = "#667eea"
HEX_COLOR_PATTERN = re.compile(r"^#[0-9A-Fa-f]{6}$")
CATEGORY_NAME_MAX_LENGTH = 50
RESERVED_CATEGORY_NAMES = {"all", "none", "general", "uncategorized"}


def is_valid_hex_color(color: Any) -> bool:
    return isinstance(color, str) and bool(HEX_COLOR_PATTERN.match(color))


def resolve_hashtag_color(
    category_color: str | None = None,
    individual_color: str | None = None,
) -> str:
    """Effective display color of a hashtag."""
    if is_valid_hex_color(category_color):
        return category_color
    if is_valid_hex_color(individual_color):
        return individual_color
    return DEFAULT_HASHTAG_COLOR


def normalize_category_name(raw: str) -> str:
    """``" Home Country! "`` -> ``"home-country"``."""
    name = re.sub(r"[^a-z0-9_-]", "-", raw.strip().lower())
    return re.sub(r"-+", "-", name).strip("-")


class HashtagColorService:
    """Service class for individual hashtag colors."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_all(self) -> Sequence[HashtagColor]:
        result = await self.db.execute(select(HashtagColor).order_by(HashtagColor.name.asc()))
        return result.scalars().all()

    async def get_by_name(self, name: str) -> HashtagColor:
        result = await self.db.execute(
            select(HashtagColor).where(HashtagColor.name == normalize_hashtag(name))
        )
        color = result.scalar_one_or_none()
        if color is None:
            raise NotFoundException("Hashtag color not found")
        return color

    async def create(self, name: str, color: str) -> HashtagColor:
        """
        Raises:
            ValidationException: If name is blank or color is not ``#rrggbb``
            ConflictException: If the hashtag already has a color
        """
        hashtag = normalize_hashtag(name)
        if not hashtag or not color:
            raise ValidationException("Name and color are required")
        if not is_valid_hex_color(color):
            raise ValidationException("Color must be a valid hex color code (e.g., #667eea)")

        existing = await self.db.execute(select(HashtagColor.id).where(HashtagColor.name == hashtag))
        if existing.scalar_one_or_none() is not None:
            raise ConflictException("Hashtag with this name already exists")

        record = HashtagColor(name=hashtag, color=color)
        self.db.add(record)
        try:
            await self.db.flush()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictException("Hashtag with this name already exists")
        return record

    async def update(self, name: str, color: str) -> HashtagColor:
        if not is_valid_hex_color(color):
            raise ValidationException("Color must be a valid hex color code (e.g., #667eea)")
        record = await self.get_by_name(name)
        record.color = color
        await self.db.flush()
        return record

    async def delete(self, name: str) -> None:
        record = await self.get_by_name(name)
        await self.db.delete(record)
        await self.db.flush()


class HashtagCategoryService:
    """Service class for hashtag categories."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_all(self) -> Sequence[HashtagCategory]:
        result = await self.db.execute(
            select(HashtagCategory).order_by(HashtagCategory.order.asc(), HashtagCategory.name.asc())
        )
        return result.scalars().all()

    async def create(self, name: str, color: str, order: int | None = None) -> HashtagCategory:
        """
        Create a category; ``order`` defaults to after the last category.

        Raises:
            ValidationException: On invalid name, color or order
            ConflictException: If the category name is taken
        """
        category_name = normalize_category_name(name or "")
        errors = []
        if not category_name:
            errors.append("Category name must be at least 1 character long")
        elif len(category_name) > CATEGORY_NAME_MAX_LENGTH:
            errors.append(
                f"Category name must be no more than {CATEGORY_NAME_MAX_LENGTH} characters long"
            )
        if category_name in RESERVED_CATEGORY_NAMES:
            errors.append(f'"{category_name}" is a reserved name and cannot be used as a category name')
        if not is_valid_hex_color(color):
            errors.append("Category color must be a valid hex color code (e.g., #667eea)")
        if order is not None and order < 0:
            errors.append("Category order must be a non-negative integer")
        if errors:
            raise ValidationException("Invalid category", details={"errors": errors})

        if order is None:
            result = await self.db.execute(select(func.max(HashtagCategory.order)))
            current_max = result.scalar()
            order = 0 if current_max is None else current_max + 1

        existing = await self.db.execute(
            select(HashtagCategory.id).where(HashtagCategory.name == category_name)
        )
        if existing.scalar_one_or_none() is not None:
            raise ConflictException(f'Category "{category_name}" already exists')

        category = HashtagCategory(name=category_name, color=color, order=order)
        self.db.add(category)
        try:
            await self.db.flush()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictException(f'Category "{category_name}" already exists')
        return category
