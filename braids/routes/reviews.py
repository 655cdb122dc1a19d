"""Reviews of stylists, products and styles."""
from __future__ import annotations

from flask import Blueprint, current_app, g

from ..auth import ensure_owner_or_admin, is_admin, require_auth
from ..errors import Forbidden, NotFound, success
from ..models import Review
from ..rules import ReviewTarget, ensure_single_review, review_stats
from ..schemas.common import IdParams
from ..schemas.reviews import (CreateReviewSchema, ReviewsQuery, ReviewStatsQuery,
                               UpdateReviewSchema)
from ..store import Repository, ordering
from ..validation import validate

bp = Blueprint("reviews", __name__)
reviews = Repository(Review)


def _get_review(review_id: str) -> Review:
    review = reviews.get(review_id)
    if review is None:
        raise NotFound("Review not found", "REVIEW_NOT_FOUND")
    return review


@bp.get("/reviews")
@validate(query=ReviewsQuery)
def list_reviews() -> tuple[dict[str, object], int]:
    """List reviews.
    ---
    tags:
      - Reviews
    parameters:
      - name: reviewable_type
        in: query
        type: string
        enum: [STYLIST, PRODUCT, STYLE]
      - name: reviewable_id
        in: query
        type: string
      - name: verified
        in: query
        type: boolean
      - name: min_rating
        in: query
        type: integer
      - name: max_rating
        in: query
        type: integer
    responses:
      200:
        description: Reviews with pagination metadata
      400:
        description: Invalid parameters
    """
    query = g.query
    criteria = []
    if query.user_id:
        criteria.append(Review.user_id == query.user_id)
    if query.reviewable_type:
        criteria.append(Review.reviewable_type == query.reviewable_type)
    if query.reviewable_id:
        criteria.append(Review.reviewable_id == query.reviewable_id)
    if query.verified is not None:
        criteria.append(Review.is_verified.is_(query.verified))
    if query.rating is not None:
        criteria.append(Review.rating == query.rating)
    if query.min_rating is not None:
        criteria.append(Review.rating >= query.min_rating)
    if query.max_rating is not None:
        criteria.append(Review.rating <= query.max_rating)
    if query.search:
        criteria.append(Review.comment.ilike(f"%{query.search}%"))

    page = reviews.paginate(
        criteria, [ordering(Review, query.sort_by, query.sort_order)], query.page, query.limit
    )
    return success([review.to_dict() for review in page.items], pagination=page.pagination())


@bp.get("/reviews/stats")
@validate(query=ReviewStatsQuery)
def get_review_stats() -> tuple[dict[str, object], int]:
    """Rating summary for one reviewable item, over verified reviews.
    ---
    tags:
      - Reviews
    parameters:
      - name: reviewable_type
        in: query
        type: string
        required: true
      - name: reviewable_id
        in: query
        type: string
        required: true
    responses:
      200:
        description: total_reviews, average_rating and rating_distribution
    """
    target = ReviewTarget(g.query.reviewable_type, g.query.reviewable_id)
    return success(review_stats(target))


@bp.get("/reviews/<id>")
@validate(params=IdParams)
def get_review(id: str) -> tuple[dict[str, object], int]:
    return success(_get_review(id).to_dict())


@bp.post("/reviews")
@require_auth
@validate(body=CreateReviewSchema)
def create_review() -> tuple[dict[str, object], int]:
    data = g.body
    if data.user_id != g.user.id:
        raise Forbidden("You can only post reviews as yourself")

    target = ReviewTarget(data.reviewable_type, data.reviewable_id)
    target.resolve()
    ensure_single_review(data.user_id, target)

    review = reviews.insert(
        user_id=data.user_id,
        reviewable_type=target.kind,
        reviewable_id=target.id,
        rating=data.rating,
        title=data.title,
        comment=data.comment,
    )
    current_app.logger.info("Review %s posted for %s %s", review.id, target.kind, target.id)
    return success(review.to_dict(), "Review created successfully", 201)


@bp.put("/reviews/<id>")
@require_auth
@validate(params=IdParams, body=UpdateReviewSchema)
def update_review(id: str) -> tuple[dict[str, object], int]:
    review = _get_review(id)
    ensure_owner_or_admin(review.user_id, "You can only edit your own reviews")
    changes = g.body.changes()
    if "is_verified" in changes and not is_admin():
        raise Forbidden("Only administrators can verify reviews")

    reviews.update(review, changes)
    return success(review.to_dict(), "Review updated successfully")


@bp.delete("/reviews/<id>")
@require_auth
@validate(params=IdParams)
def delete_review(id: str):
    review = _get_review(id)
    ensure_owner_or_admin(review.user_id, "You can only delete your own reviews")
    reviews.delete(review)
    return "", 204
