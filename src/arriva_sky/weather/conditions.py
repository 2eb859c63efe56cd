"""Map provider condition vocabularies onto one closed set."""

from __future__ import annotations

from .models import Condition

# Checked in order; the first rule with a matching keyword wins, so more
# specific phrases ("thunder", "partly") precede their generic neighbours.
_CONDITION_RULES: tuple[tuple[Condition, tuple[str, ...]], ...] = (
    ("thunderstorm", ("thunder", "storm", "lightning")),
    ("snow", ("snow", "sleet", "blizzard", "ice pellets", "hail")),
    ("drizzle", ("drizzle",)),
    ("rain", ("rain", "shower")),
    ("fog", ("fog", "mist", "haze", "smoke", "dust", "sand")),
    ("partly cloudy", ("partly", "few clouds", "scattered clouds")),
    ("cloudy", ("cloud", "overcast")),
    ("clear", ("clear", "sunny", "fair")),
)

RAIN_LIKE: frozenset[str] = frozenset({"rain", "drizzle", "thunderstorm"})
STORM_KEYWORDS = ("thunder", "storm", "lightning")


def normalize_condition(text: str | None) -> Condition:
    """Case-insensitive keyword match; blank input is clear, unknown text is cloudy."""
    if not text or not text.strip():
        return "clear"
    lowered = text.lower().replace("_", " ")
    for condition, keywords in _CONDITION_RULES:
        if any(keyword in lowered for keyword in keywords):
            return condition
    return "cloudy"


def is_rain_like(condition: str) -> bool:
    return normalize_condition(condition) in RAIN_LIKE


def is_stormy(*texts: str | None) -> bool:
    for text in texts:
        if text and any(keyword in text.lower() for keyword in STORM_KEYWORDS):
            return True
    return False
