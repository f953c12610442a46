"""Rating statistics derived from reviews.

Nothing here is persisted or cached: statistics are recomputed from the
reviews every time they are needed, and the average keeps full precision.
Rounding only happens in the display helpers.
"""

import typing

from models.review import MAX_RATING, RatingSummary, Review

SortKey = typing.Literal['recent', 'rating']


def summarize(reviews: typing.Iterable[Review]) -> RatingSummary:
    """Average rating and review count. The average of no reviews is 0."""
    ratings = [review.rating for review in reviews]
    if not ratings:
        return RatingSummary(average=0.0, count=0)
    return RatingSummary(average=sum(ratings) / len(ratings), count=len(ratings))


def sort_reviews(reviews: typing.Iterable[Review], by: SortKey = 'recent') -> list[Review]:
    """Order reviews for display: newest first, or highest rating first (newest first among equals)."""
    newest_first = sorted(reviews, key=lambda review: review.created_at, reverse=True)
    if by == 'recent':
        return newest_first
    if by == 'rating':
        return sorted(newest_first, key=lambda review: review.rating, reverse=True)
    raise ValueError(f"Unknown sort order '{by}'")


def format_average(average: float) -> str:
    """One decimal place, e.g. ``4.7``."""
    return f"{average:.1f}"


def star_count(average: float) -> int:
    """Number of filled stars shown for an average rating (half rounds up)."""
    return max(0, min(MAX_RATING, int(average + 0.5)))


def review_count_label(count: int) -> str:
    """Review count with the noun agreeing in number, e.g. ``1 review``, ``3 reviews``."""
    return f"{count} review" if count == 1 else f"{count} reviews"
