"""Display-side rating figures.

The stored ``reputation_avg``/``reputation_count`` of a profile are the
authoritative reputation. ``aggregate`` only describes whatever subset of
ratings was fetched for display and may legitimately differ from them.
"""

from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal

from agrom.core.profiles.schemas import UserProfile
from agrom.core.reputation.schemas import Rating, RatingSummary


def round_half_up(value: float, places: int = 1) -> float:
    exponent = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(exponent, rounding=ROUND_HALF_UP))


def aggregate(ratings: Iterable[Rating]) -> RatingSummary:
    stars = [r.stars for r in ratings]
    if not stars:
        return RatingSummary(average=0, count=0)
    return RatingSummary(average=round_half_up(sum(stars) / len(stars)), count=len(stars))


def stored_reputation(profile: UserProfile) -> RatingSummary:
    if profile.reputation_count <= 0:
        return RatingSummary(average=0, count=0)
    return RatingSummary(
        average=round_half_up(profile.reputation_avg), count=profile.reputation_count
    )
