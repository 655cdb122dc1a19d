"""Schemas for the braid style catalog."""
from __future__ import annotations

import re
from typing import Annotated

from pydantic import AfterValidator, Field

from ..models import DIFFICULTY_LEVELS, STYLE_CATEGORIES
from .common import (ImageUrl, PageQuery, Schema, SearchText, UpdateSchema, choice,
                     fail, trimmed)

STYLE_NAME_RE = re.compile(r"^[A-Za-zÀ-ÖØ-öø-ÿ\s0-9.-]+$")
KNOWN_STYLES = (
    "box braids", "cornrows", "fulani braids", "goddess braids", "knotless braids",
    "dutch braids", "french braids", "twist braids", "micro braids", "jumbo braids",
    "ghana braids", "tree braids", "invisible braids", "senegalese twists",
    "marley twists", "havana twists", "passion twists", "spring twists",
)
STYLE_KEYWORDS = ("braid", "twist", "loc", "dread", "cornrow", "plait")
DESCRIPTION_KEYWORDS = (
    "braid", "hair", "style", "protective", "elegant", "durable", "versatile",
    "natural", "texture", "volume", "twist",
)


def _style_name(value: str) -> str:
    if not STYLE_NAME_RE.match(value):
        raise fail("invalid_string", "Style name contains invalid characters")
    lowered = value.lower()
    if not (
        any(style in lowered for style in KNOWN_STYLES)
        or any(keyword in lowered for keyword in STYLE_KEYWORDS)
        or len(value) > 5
    ):
        raise fail("invalid_style_name", "Name must be a known braid style or mention braids")
    return value


def _style_description(value: str) -> str:
    lowered = value.lower()
    if not any(word in lowered for word in DESCRIPTION_KEYWORDS):
        raise fail("irrelevant_description", "Description must be relevant to braid styles")
    return value


StyleName = Annotated[trimmed(2, 100), AfterValidator(_style_name)]
StyleDescription = Annotated[trimmed(10, 500), AfterValidator(_style_description)]
StyleCategory = choice(STYLE_CATEGORIES, "Category")
DifficultyLevel = choice(DIFFICULTY_LEVELS, "Difficulty level")
EstimatedTime = Annotated[int, Field(ge=15, le=480)]


class CreateStyleSchema(Schema):
    name: StyleName
    photo_url: ImageUrl | None = None
    description: StyleDescription
    category: StyleCategory
    difficulty_level: DifficultyLevel | None = None
    estimated_time: EstimatedTime | None = None


class UpdateStyleSchema(UpdateSchema):
    name: StyleName | None = None
    photo_url: ImageUrl | None = None
    description: StyleDescription | None = None
    category: StyleCategory | None = None
    difficulty_level: DifficultyLevel | None = None
    estimated_time: EstimatedTime | None = None


class StylesQuery(PageQuery):
    category: StyleCategory | None = None
    difficulty_level: DifficultyLevel | None = None
    max_time: int | None = Field(None, ge=1, le=480)
    search: SearchText | None = None
