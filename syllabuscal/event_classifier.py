"""
Keyword classifier that guesses an EventCategory from the text around a date.
"""

from typing import Sequence, Tuple

from syllabuscal.event_models import EventCategory

# Evaluated top to bottom; the first rule with a keyword in the span wins.
CATEGORY_RULES: Sequence[Tuple[Tuple[str, ...], EventCategory]] = (
    (("exam", "midterm", "final"), EventCategory.EXAM),
    (("project",), EventCategory.PROJECT),
)

DEFAULT_CATEGORY = EventCategory.ASSIGNMENT


def classify(span: str) -> EventCategory:
    """
    Classify a text span by case-insensitive keyword lookup.

    Args:
        span: Matched text, or the clause surrounding it

    Returns:
        The category of the first matching rule, else Assignment
    """
    lowered = (span or "").lower()
    for keywords, category in CATEGORY_RULES:
        if any(keyword in lowered for keyword in keywords):
            return category
    return DEFAULT_CATEGORY
