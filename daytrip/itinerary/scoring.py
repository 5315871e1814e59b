from __future__ import annotations

from ..places.models import Candidate, Category
from .models import CultureType, FoodType

RESTAURANT_BONUS = 0.3
DIVERSITY_BONUS = 0.15

# primary culture pick -> (category it rewards, bonus)
CULTURE_MATCH_BONUS: dict[CultureType, tuple[Category, float]] = {
    CultureType.MOVIE: (Category.MOVIE, 0.6),
    CultureType.EXPERIENCE: (Category.ATTRACTION, 0.6),
    CultureType.FESTIVAL: (Category.FESTIVAL, 0.8),
    CultureType.OTHER: (Category.CULTURE, 0.4),
}


def score(candidate: Candidate, food: FoodType, culture: CultureType) -> float:
    """Rating plus category bonuses; only used to rank fallback pools."""
    total = candidate.rating or 0.0
    if candidate.category is Category.RESTAURANT:
        total += RESTAURANT_BONUS
    match = CULTURE_MATCH_BONUS.get(culture)
    if match and candidate.category is match[0]:
        total += match[1]
    if candidate.category in (Category.CAFE, Category.ATTRACTION):
        total += DIVERSITY_BONUS
    return total


def rank(candidates, food: FoodType, culture: CultureType) -> list[Candidate]:
    # sorted() is stable, so equal scores keep pool order
    return sorted(candidates, key=lambda c: score(c, food, culture), reverse=True)
