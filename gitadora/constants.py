"""
gitadora.constants — Shared Constants & Helpers
================================================

Single source of truth for skill slot limits and the skill colour tiers.
Import from here instead of duplicating in engine, services, and routes.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Skill slots
# ---------------------------------------------------------------------------
SLOT_LIMIT = 25  # Scoring slots per pool (hot / other)
HISTORY_LIMIT = 100  # Snapshots returned alongside a skill lookup

DEFAULT_VERSION_NAME = "GITADORA GALAXY WAVE DELTA"


# ---------------------------------------------------------------------------
# Skill colour tiers (highest threshold first)
# ---------------------------------------------------------------------------
SKILL_TIERS: list[tuple[int, str]] = [
    (8500, "RAINBOW"),
    (8000, "GOLD"),
    (7500, "SILVER"),
    (7000, "BRONZE"),
    (6500, "RED_GRADATION"),
    (6000, "RED"),
    (5500, "PURPLE_GRADATION"),
    (5000, "PURPLE"),
    (4500, "BLUE_GRADATION"),
    (4000, "BLUE"),
    (3500, "GREEN_GRADATION"),
    (3000, "GREEN"),
    (2500, "YELLOW_GRADATION"),
    (2000, "YELLOW"),
    (1500, "ORANGE_GRADATION"),
    (1000, "ORANGE"),
]

BASE_TIER = "WHITE"


def skill_tier(total_skill: float) -> str:
    """Colour tier for *total_skill*.

    Thresholds are inclusive lower bounds, so ``skill_tier(8000)`` is
    ``"GOLD"`` and ``skill_tier(7999.99)`` is ``"SILVER"``.
    """
    for threshold, name in SKILL_TIERS:
        if total_skill >= threshold:
            return name
    return BASE_TIER
