"""Display rating computed from review scores."""

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from readcircle.domain.errors import InvalidScoreError

NO_RATING = "no rating"

_ONE_DECIMAL = Decimal("0.1")


@dataclass(frozen=True)
class RatingResult:
    defined: bool
    value: Decimal | None = None

    @property
    def display(self) -> str:
        return f"{self.value:.1f}" if self.defined else NO_RATING

    def as_float(self) -> float | None:
        return float(self.value) if self.defined else None


class RatingAggregator:
    """Mean of integer scores in ``[0, scale]``, rounded half-up to one decimal."""

    def __init__(self, scale: int = 5) -> None:
        self.scale = scale

    def check(self, score: int) -> int:
        if not 0 <= score <= self.scale:
            raise InvalidScoreError(f"rate must be between 0 and {self.scale}")
        return score

    def aggregate(self, scores: Iterable[int]) -> RatingResult:
        values = [self.check(score) for score in scores]
        if not values:
            return RatingResult(defined=False)
        # Integer sum keeps the result independent of input order
        mean = Decimal(sum(values)) / Decimal(len(values))
        return RatingResult(defined=True, value=mean.quantize(_ONE_DECIMAL, rounding=ROUND_HALF_UP))
