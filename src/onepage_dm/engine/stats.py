"""Stat engine: derived statistics of the One Page 5e ruleset.

Pure functions for ability modifiers, proficiency bonus and armor class,
plus the derived character sheet that the narration prompt and any UI
read from.
"""

from __future__ import annotations

from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict

from onepage_dm.core.constants import BASE_PROFICIENCY_BONUS, PROFICIENCY_TIERS, UNARMORED_BASE_AC
from onepage_dm.models.character import Character
from onepage_dm.models.enums import Ability
from onepage_dm.models.rules import Armor, get_archetype_info


def ability_modifier(score: int) -> int:
    """Calculate the modifier for an ability score.

    Rounds toward negative infinity, so a score of 9 gives -1.

    Args:
        score: The ability score.

    Returns:
        floor((score - 10) / 2).
    """
    return (score - 10) // 2


def proficiency_bonus(level: int) -> int:
    """Calculate the proficiency bonus for a character level.

    Args:
        level: Character level.

    Returns:
        5 from level 13, 4 from level 9, 3 from level 5, otherwise 2.
    """
    for min_level, bonus in PROFICIENCY_TIERS:
        if level >= min_level:
            return bonus
    return BASE_PROFICIENCY_BONUS


def armor_class(armor: Armor | None, dex_mod: int, wis_mod: int) -> int:
    """Evaluate an armor's AC formula.

    The armor's dexterity penalty is not applied.

    Args:
        armor: Equipped armor, or None for no armor at all.
        dex_mod: Dexterity modifier.
        wis_mod: Wisdom modifier.

    Returns:
        The armor class; 10 + dex_mod when nothing is equipped.
    """
    if armor is None:
        return UNARMORED_BASE_AC + dex_mod
    return armor.ac_formula(dex_mod, wis_mod)


def format_modifier(modifier: int) -> str:
    """Format a modifier with an explicit sign ('+2', '-1', '+0')."""
    return f"+{modifier}" if modifier >= 0 else str(modifier)


def ability_modifiers(scores: Mapping[Ability, int]) -> dict[Ability, int]:
    """Calculate the modifier of every ability, in sheet order."""
    return {ability: ability_modifier(scores[ability]) for ability in Ability}


def character_armor_class(character: Character) -> int:
    """Calculate a character's armor class from its equipped armor."""
    return armor_class(
        character.armor,
        ability_modifier(character.abilities[Ability.DEX]),
        ability_modifier(character.abilities[Ability.WIS]),
    )


class AbilityLine(BaseModel):
    """Score and modifier of one ability on the sheet."""

    model_config = ConfigDict(frozen=True)

    ability: Ability
    score: int
    modifier: int

    @property
    def display(self) -> str:
        return f"{self.ability.value}: {self.score} ({format_modifier(self.modifier)})"


class CharacterSheet(BaseModel):
    """Read-only derived view of a character.

    Attributes:
        name: Character name.
        level: Character level.
        archetype: Archetype name, if chosen.
        archetype_label: Archetype display label, if chosen.
        abilities: Score and modifier per ability, in sheet order.
        armor_class: Computed armor class.
        current_hp: Current hit points.
        max_hp: Maximum hit points.
        proficiency_bonus: Proficiency bonus for the level.
        speed: Movement speed, if an archetype is chosen.
        weapons: 'Name (damage)' entries.
        armor: Equipped armor name.
        spells: Known spell names.
        gold: Gold balance.
        xp: Experience points.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    level: int
    archetype: str | None
    archetype_label: str | None
    abilities: tuple[AbilityLine, ...]
    armor_class: int
    current_hp: int
    max_hp: int
    proficiency_bonus: int
    speed: str | None
    weapons: tuple[str, ...]
    armor: str | None
    spells: tuple[str, ...]
    gold: int
    xp: int

    def modifier(self, ability: Ability) -> int:
        """Get the modifier of one ability."""
        for line in self.abilities:
            if line.ability is ability:
                return line.modifier
        raise KeyError(ability)


def derive_sheet(character: Character) -> CharacterSheet:
    """Compute the derived sheet of a character.

    Args:
        character: The character to summarize.

    Returns:
        A frozen CharacterSheet.
    """
    info = get_archetype_info(character.archetype) if character.archetype else None
    return CharacterSheet(
        name=character.name,
        level=character.level,
        archetype=character.archetype.value if character.archetype else None,
        archetype_label=info.label if info else None,
        abilities=tuple(
            AbilityLine(ability=ability, score=character.abilities[ability], modifier=modifier)
            for ability, modifier in ability_modifiers(character.abilities).items()
        ),
        armor_class=character_armor_class(character),
        current_hp=character.current_hp,
        max_hp=character.max_hp,
        proficiency_bonus=proficiency_bonus(character.level),
        speed=info.speed if info else None,
        weapons=tuple(f"{weapon.name} ({weapon.damage})" for weapon in character.weapons),
        armor=character.armor.name if character.armor else None,
        spells=tuple(spell.name for spell in character.known_spells),
        gold=character.gold,
        xp=character.xp,
    )


__all__ = [
    "ability_modifier",
    "proficiency_bonus",
    "armor_class",
    "format_modifier",
    "ability_modifiers",
    "character_armor_class",
    "AbilityLine",
    "CharacterSheet",
    "derive_sheet",
]
