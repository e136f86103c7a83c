"""Application-wide constants for the One Page DM adventure engine.

This module defines the fixed numbers of the One Page 5e ruleset and the
in-story strings shown when the narration service misbehaves.
"""

from __future__ import annotations

# =============================================================================
# Ability Scores
# =============================================================================

ABILITY_COUNT = 6
"""Number of ability scores a character holds."""

ABILITY_DICE_ROLLED = 4
"""d6 rolled per ability score (the lowest is dropped)."""

ABILITY_DIE_SIDES = 6

ARCHETYPE_BONUS = 2
"""Ability score increase granted by an archetype."""

DEFAULT_ABILITY_SCORE = 10
"""Score every ability holds before the scores are committed."""

# =============================================================================
# Character Defaults
# =============================================================================

STARTING_LEVEL = 1

STARTING_GOLD_DIE = 100
"""Starting gold is rolled as 1d100."""

DEFAULT_MAX_HP = 10
"""Hit points of a blank character before an archetype is chosen."""

UNARMORED_BASE_AC = 10

WIZARD_STARTING_SPELLS = 2

# =============================================================================
# Proficiency Bonus Tiers (minimum level, bonus), highest first
# =============================================================================

PROFICIENCY_TIERS: tuple[tuple[int, int], ...] = (
    (13, 5),
    (9, 4),
    (5, 3),
)

BASE_PROFICIENCY_BONUS = 2

# =============================================================================
# Adventure
# =============================================================================

RANDOM_EVENT_COUNT = 7

MONSTER_ATTACK_EVENT_ID = 7
"""Random event row that spawns a monster encounter."""

ENCOUNTER_DICE_COUNT = 2
"""Number of dice summed for the size of a monster encounter."""

ENCOUNTER_DIE_SIDES = 4

DICE_TRAY_SIDES: tuple[int, ...] = (4, 6, 8, 10, 12, 20)
"""Dice offered by the dice tray."""

NARRATION_TEMPERATURE = 0.9

OPENING_PROMPT = "Begin the adventure."

DEFAULT_SETTING = "Fantasy World"

DEFAULT_GOAL = "Explore and survive"

# =============================================================================
# In-story Error Messages
# =============================================================================

START_FAILURE_MESSAGE = (
    "The mists of Ravenloft... err, the adventure fails to load. (API Error)"
)

TURN_FAILURE_MESSAGE = "The spirits are silent. (API Error)"

NOT_INITIALIZED_MESSAGE = "Error: Game session not initialized."


__all__ = [
    # Ability scores
    "ABILITY_COUNT",
    "ABILITY_DICE_ROLLED",
    "ABILITY_DIE_SIDES",
    "ARCHETYPE_BONUS",
    "DEFAULT_ABILITY_SCORE",
    # Character defaults
    "STARTING_LEVEL",
    "STARTING_GOLD_DIE",
    "DEFAULT_MAX_HP",
    "UNARMORED_BASE_AC",
    "WIZARD_STARTING_SPELLS",
    # Proficiency
    "PROFICIENCY_TIERS",
    "BASE_PROFICIENCY_BONUS",
    # Adventure
    "RANDOM_EVENT_COUNT",
    "MONSTER_ATTACK_EVENT_ID",
    "ENCOUNTER_DICE_COUNT",
    "ENCOUNTER_DIE_SIDES",
    "DICE_TRAY_SIDES",
    "NARRATION_TEMPERATURE",
    "OPENING_PROMPT",
    "DEFAULT_SETTING",
    "DEFAULT_GOAL",
    # Messages
    "START_FAILURE_MESSAGE",
    "TURN_FAILURE_MESSAGE",
    "NOT_INITIALIZED_MESSAGE",
]
