"""Domain layer package."""

from .columns import CanonicalField, resolve, resolve_field, to_number
from .models import NormalizedRow, Recommendation
from .recommendation import generate_recommendations

__all__ = [
    "CanonicalField",
    "NormalizedRow",
    "Recommendation",
    "generate_recommendations",
    "resolve",
    "resolve_field",
    "to_number",
]
