"""
Rating summaries for a campsite's review page.

`summarize` is a pure function over already-loaded ratings. It does not filter hidden
reviews itself; callers pass the visible set only.
"""
import math
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable, Mapping, Optional

STAR_VALUES = (1, 2, 3, 4, 5)

# The optional per-aspect ratings, in display order.
RATING_CATEGORIES = ('cleanliness', 'staff', 'facilities', 'value', 'location')

ONE_DECIMAL = Decimal('0.1')
WHOLE = Decimal('1')


def round_half_up(numerator, denominator, places=ONE_DECIMAL) -> Decimal:
    """
    Divides and rounds with exact decimal arithmetic, halves going up
    (4.25 -> 4.3, 12.5 -> 13). Python's `round()` would round halves to even.
    """
    return (Decimal(numerator) / Decimal(denominator)).quantize(places, rounding=ROUND_HALF_UP)


def _empty_buckets() -> dict:
    return {star: 0 for star in STAR_VALUES}


@dataclass(frozen=True)
class ReviewSummary:
    """The aggregated rating figures of one campsite."""
    average_rating: float = 0
    total_count: int = 0
    rating_distribution: dict = field(default_factory=_empty_buckets)
    rating_percentages: dict = field(default_factory=_empty_buckets)
    category_averages: dict = field(default_factory=lambda: {name: None for name in RATING_CATEGORIES})

    @classmethod
    def empty(cls) -> 'ReviewSummary':
        return cls()

    def as_dict(self) -> dict:
        return {
            'average_rating': self.average_rating,
            'total_count': self.total_count,
            'rating_distribution': dict(self.rating_distribution),
            'rating_percentages': dict(self.rating_percentages),
            'category_averages': dict(self.category_averages),
        }


def _rating(review: Any, name: str) -> Optional[Any]:
    if isinstance(review, Mapping):
        return review.get(name)
    return getattr(review, name, None)


def _valid_star(value: Any) -> Optional[int]:
    """Returns the value as an int if it is a whole star rating from 1 to 5, else None."""
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        return None
    # NaN and infinity cannot be converted to int.
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, Decimal) and not value.is_finite():
        return None
    if value != int(value) or int(value) not in STAR_VALUES:
        return None
    return int(value)


def summarize(reviews: Iterable[Any]) -> ReviewSummary:
    """
    Computes the summary of a set of visible reviews.

    Each review is a mapping (or object) with `rating_overall` and the optional
    `rating_<category>` values. Ratings outside 1..5 are skipped instead of raising.

    Args:
        reviews: The visible reviews of one campsite.

    Returns:
        ReviewSummary: Average, distribution, per-bucket percentages and category
        averages. An empty input gives the all-zero summary with every category None.
    """
    reviews = list(reviews)
    total_count = len(reviews)
    if total_count == 0:
        return ReviewSummary.empty()

    distribution = _empty_buckets()
    for review in reviews:
        star = _valid_star(_rating(review, 'rating_overall'))
        if star is not None:
            distribution[star] += 1

    rated = sum(distribution.values())
    rating_sum = sum(star * count for star, count in distribution.items())
    average_rating = float(round_half_up(rating_sum, rated)) if rated else 0

    # Each bucket is rounded on its own, so the percentages may not add up to 100.
    percentages = {
        star: int(round_half_up(100 * count, total_count, places=WHOLE))
        for star, count in distribution.items()
    }

    category_averages = {}
    for name in RATING_CATEGORIES:
        values = [
            value for value in (_valid_star(_rating(review, f'rating_{name}')) for review in reviews)
            if value is not None
        ]
        category_averages[name] = float(round_half_up(sum(values), len(values))) if values else None

    return ReviewSummary(
        average_rating=average_rating,
        total_count=total_count,
        rating_distribution=distribution,
        rating_percentages=percentages,
        category_averages=category_averages,
    )
