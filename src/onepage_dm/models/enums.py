"""Enumeration types for the One Page DM adventure engine.

These enums serve as the foundation for type-safe One Page 5e mechanics:
the six abilities, the three archetypes, chat roles and the stages of
the build and adventure state machines.
"""

from __future__ import annotations

from enum import StrEnum


class Ability(StrEnum):
    """The six ability scores.

    Declaration order matches the character sheet (STR, DEX, CON, INT,
    WIS, CHR) and is the order used in prompts and summaries.
    """

    STR = "STR"
    DEX = "DEX"
    CON = "CON"
    INT = "INT"
    WIS = "WIS"
    CHR = "CHR"

    @property
    def full_name(self) -> str:
        """Get the full name of the ability.

        Returns:
            Full ability name (e.g., 'Strength' for STR).
        """
        return _ABILITY_NAMES[self]

    @property
    def abbreviation(self) -> str:
        return self.value


_ABILITY_NAMES: dict[Ability, str] = {
    Ability.STR: "Strength",
    Ability.DEX: "Dexterity",
    Ability.CON: "Constitution",
    Ability.INT: "Intelligence",
    Ability.WIS: "Wisdom",
    Ability.CHR: "Charisma",
}


class Archetype(StrEnum):
    """Character archetypes of the One Page 5e ruleset."""

    FIGHTER = "Fighter"
    RANGER = "Ranger"
    WIZARD = "Wizard"


class MessageRole(StrEnum):
    """Author of a transcript entry."""

    USER = "user"
    MODEL = "model"
    SYSTEM = "system"


class BuildStage(StrEnum):
    """Stages of the character build wizard.

    The wizard shows three numbered steps; COMPLETE is reached once the
    finished character has been handed to the caller.
    """

    ABILITY_SCORES = "ability_scores"
    ARCHETYPE = "archetype"
    EQUIPMENT = "equipment"
    COMPLETE = "complete"

    @property
    def step_number(self) -> int:
        """Get the 1-based wizard step shown to the player.

        Returns:
            1, 2 or 3; COMPLETE reports 3.
        """
        return {
            BuildStage.ABILITY_SCORES: 1,
            BuildStage.ARCHETYPE: 2,
            BuildStage.EQUIPMENT: 3,
            BuildStage.COMPLETE: 3,
        }[self]


class SessionStatus(StrEnum):
    """Lifecycle of an adventure session."""

    UNINITIALIZED = "uninitialized"
    ACTIVE = "active"


__all__ = [
    "Ability",
    "Archetype",
    "MessageRole",
    "BuildStage",
    "SessionStatus",
]
