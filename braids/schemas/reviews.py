"""Schemas for reviews of stylists, products and styles."""
from __future__ import annotations

from typing import Annotated

from pydantic import AfterValidator, Field

from ..models import REVIEWABLE_TYPES
from .common import (Identifier, PageQuery, QueryFlag, Schema, SearchText, SortOrder,
                     UpdateSchema, choice, fail, ordered_range, trimmed)

FORBIDDEN_PHRASES = ("spam", "fake", "bot", "test test test", "asdfgh", "qwerty")


def _comment(value: str) -> str:
    letters = set(value.lower().replace(" ", ""))
    if len(letters) <= 1:
        raise fail("meaningless_comment", "Comment must contain meaningful content")
    lowered = value.lower()
    if any(phrase in lowered for phrase in FORBIDDEN_PHRASES):
        raise fail("forbidden_content", "Comment contains content that is not allowed")
    return value


ReviewableType = choice(REVIEWABLE_TYPES, "Reviewable type")
Rating = Annotated[int, Field(ge=1, le=5)]
Comment = Annotated[trimmed(5, 1000), AfterValidator(_comment)]
Title = trimmed(3, 100)


class CreateReviewSchema(Schema):
    user_id: Identifier
    rating: Rating
    comment: Comment
    reviewable_id: Identifier
    reviewable_type: ReviewableType
    title: Title | None = None


class UpdateReviewSchema(UpdateSchema):
    rating: Rating | None = None
    comment: Comment | None = None
    title: Title | None = None
    is_verified: bool | None = None


class ReviewsQuery(PageQuery):
    user_id: Identifier | None = None
    reviewable_id: Identifier | None = None
    reviewable_type: ReviewableType | None = None
    verified: QueryFlag | None = None
    rating: Rating | None = None
    min_rating: Rating | None = None
    max_rating: Rating | None = None
    search: SearchText | None = None
    sort_by: choice(("rating", "created_at"), "Sort field") = "created_at"
    sort_order: SortOrder = "desc"

    check_ratings = ordered_range(
        "min_rating", "max_rating", "Minimum rating cannot be greater than maximum rating"
    )


class ReviewStatsQuery(Schema):
    reviewable_id: Identifier
    reviewable_type: ReviewableType
