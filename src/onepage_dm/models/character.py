"""Pydantic V2 schemas for the player character and the adventure transcript.

The Character is the central mutable aggregate. It is created blank when
the build wizard starts, filled in field by field across the three build
steps and handed to the adventure by value. After that only the current
hit points and the portrait change, through the explicit update methods
below, which clamp instead of failing.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from onepage_dm.core.constants import (
    DEFAULT_ABILITY_SCORE,
    DEFAULT_MAX_HP,
    STARTING_LEVEL,
)
from onepage_dm.core.exceptions import ValidationError
from onepage_dm.models.enums import Ability, Archetype, MessageRole
from onepage_dm.models.rules import NO_ARMOR, Armor, Spell, Weapon, get_archetype_info


def default_abilities() -> dict[Ability, int]:
    """Build the ability map of a blank character.

    Returns:
        Every ability at the default score, in sheet order.
    """
    return {ability: DEFAULT_ABILITY_SCORE for ability in Ability}


class Character(BaseModel):
    """A One Page 5e player character.

    Attributes:
        name: Character name; required before the build can finish.
        archetype: Chosen archetype, None until the archetype step and
            fixed once set.
        level: Character level (always 1 in this ruleset's core).
        xp: Experience points.
        abilities: Score for each of the six abilities.
        max_hp: Maximum hit points.
        current_hp: Current hit points, within [0, max_hp].
        gold: Gold balance, never negative.
        weapons: Owned weapons, at most one of each name.
        armor: Equipped armor.
        items: Free-form inventory labels.
        known_spells: Spells in acquisition order (Wizards only).
        portrait_url: Generated portrait reference, if any.
        age: Optional biographical detail.
        gender: Optional biographical detail.
        pronouns: Optional biographical detail.
    """

    model_config = ConfigDict(
        extra="forbid",
        validate_assignment=True,
    )

    name: str = Field(default="", max_length=100, description="Character name")
    archetype: Archetype | None = Field(default=None, description="Chosen archetype")
    level: Annotated[int, Field(ge=1, le=20)] = STARTING_LEVEL
    xp: Annotated[int, Field(ge=0)] = 0
    abilities: dict[Ability, int] = Field(default_factory=default_abilities)
    max_hp: Annotated[int, Field(ge=0)] = DEFAULT_MAX_HP
    current_hp: Annotated[int, Field(ge=0)] = DEFAULT_MAX_HP
    gold: Annotated[int, Field(ge=0)] = 0
    weapons: list[Weapon] = Field(default_factory=list)
    armor: Armor | None = NO_ARMOR
    items: list[str] = Field(default_factory=list)
    known_spells: list[Spell] = Field(default_factory=list)
    portrait_url: str | None = None
    age: str | None = None
    gender: str | None = None
    pronouns: str | None = None

    @field_validator("abilities", mode="after")
    @classmethod
    def validate_abilities(cls, value: dict[Ability, int]) -> dict[Ability, int]:
        """Ensure all six abilities are present.

        Args:
            value: The ability map.

        Returns:
            The map re-ordered to sheet order.
        """
        missing = [ability.value for ability in Ability if ability not in value]
        if missing:
            raise ValidationError(
                "Character must hold a score for every ability",
                field_name="abilities",
                invalid_value=missing,
            )
        return {ability: value[ability] for ability in Ability}

    @field_validator("max_hp", mode="after")
    @classmethod
    def validate_max_hp(cls, value: int, info: ValidationInfo) -> int:
        """Ensure the maximum never drops below the current hit points.

        Raises:
            ValueError: If max_hp < current_hp.
        """
        current_hp = info.data.get("current_hp")
        if current_hp is not None and value < current_hp:
            msg = f"max_hp ({value}) is below current_hp ({current_hp})"
            raise ValueError(msg)
        return value

    @field_validator("current_hp", mode="after")
    @classmethod
    def validate_current_hp(cls, value: int, info: ValidationInfo) -> int:
        """Ensure current hit points never exceed maximum hit points.

        Runs before the value is stored, so a rejected assignment leaves
        the character unchanged.

        Args:
            value: The requested current hit points.
            info: Validation context holding the other fields.

        Returns:
            The validated hit points.

        Raises:
            ValueError: If current_hp > max_hp.
        """
        max_hp = info.data.get("max_hp")
        if max_hp is not None and value > max_hp:
            msg = f"current_hp ({value}) exceeds max_hp ({max_hp})"
            raise ValueError(msg)
        return value

    def __setattr__(self, name: str, value: object) -> None:
        if name == "archetype" and self.archetype is not None and value != self.archetype:
            raise ValidationError(
                "Archetype cannot change once chosen",
                field_name="archetype",
                invalid_value=str(value),
            )
        super().__setattr__(name, value)

    # -------------------------------------------------------------------------
    # Derived properties
    # -------------------------------------------------------------------------

    @property
    def is_conscious(self) -> bool:
        return self.current_hp > 0

    @property
    def portrait_or_default(self) -> str | None:
        """Get the portrait to display.

        Returns:
            The generated portrait, else the archetype's default image,
            else None for a character without an archetype.
        """
        if self.portrait_url:
            return self.portrait_url
        if self.archetype is not None:
            return get_archetype_info(self.archetype).image_url
        return None

    def owns_weapon(self, name: str) -> bool:
        """Check whether a weapon with this name is owned."""
        return any(weapon.name == name for weapon in self.weapons)

    # -------------------------------------------------------------------------
    # Owner-initiated updates
    # -------------------------------------------------------------------------

    def set_hit_points(self, max_hp: int) -> None:
        """Set maximum and current hit points to the same value.

        Args:
            max_hp: New maximum; current hit points are healed to it.
        """
        if max_hp < self.current_hp:
            self.current_hp = max_hp
            self.max_hp = max_hp
        else:
            self.max_hp = max_hp
            self.current_hp = max_hp

    def set_hp(self, value: int) -> int:
        """Set current hit points, clamped to [0, max_hp].

        Args:
            value: Requested hit points.

        Returns:
            The hit points actually set.
        """
        self.current_hp = max(0, min(self.max_hp, value))
        return self.current_hp

    def adjust_hp(self, delta: int) -> int:
        """Apply damage (negative) or healing (positive), clamped to [0, max_hp].

        Args:
            delta: Change in hit points.

        Returns:
            The resulting current hit points.
        """
        return self.set_hp(self.current_hp + delta)

    def update_portrait(self, portrait_url: str | None) -> None:
        self.portrait_url = portrait_url


class ChatMessage(BaseModel):
    """One entry of the adventure transcript.

    Attributes:
        role: Who wrote the entry.
        content: Text of the entry.
        timestamp: When the entry was created.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    role: MessageRole
    content: str
    timestamp: datetime = Field(default_factory=datetime.now)


__all__ = [
    "Character",
    "ChatMessage",
    "default_abilities",
]
