"""DM prompts - instructions and composite turns sent to the narration model."""

from __future__ import annotations

from typing import TYPE_CHECKING

from onepage_dm.core.constants import DEFAULT_GOAL, DEFAULT_SETTING
from onepage_dm.core.exceptions import RulesLookupError
from onepage_dm.engine.stats import derive_sheet, format_modifier
from onepage_dm.models.rules import get_archetype_info


if TYPE_CHECKING:
    from onepage_dm.dm.session import AdventureSetup, Encounter
    from onepage_dm.models.character import Character
    from onepage_dm.models.rules import RandomEvent


# =============================================================================
# DM System Prompt
# =============================================================================


DM_SYSTEM_PROMPT = """You are a Dungeon Master running a minimalist fantasy roleplaying game called "One Page 5e".
Your goal is to guide the player through an adventure based on their input and dice rolls.

**Game Rules:**
- **Rolls:** d20 + Ability Modifier.
- **Difficulty:** Simple (5+), Easy (10+), Difficult (15+), Hard (20+).
- **Combat:** Initiative = Dex Mod. Attack = d20 + Mod. Damage = Weapon Die.
- **Magic:** Wizards roll INT or WIS to cast. Difficulty set by you based on situation.

**The Player Character:**
- **Name:** {name}
- **Level:** {level}
- **Class/Archetype:** {archetype} ({archetype_label})
- **Stats:**
{ability_lines}
- **HP:** {current_hp}/{max_hp}
- **Proficiency Bonus:** +{proficiency_bonus}
- **Equipment:** {equipment}
- **Spells:** {spells}

**Adventure Setup:**
- **Setting:** {setting}
- **Goal:** {goal}
- **Notes/Scenario:** {notes}

**Instructions:**
1. Act as the narrator and DM. Describe surroundings, NPCs, and events.
2. Begin by introducing the player to the setting and their immediate situation relevant to the goal.
3. Ask the player for actions.
4. When the outcome is uncertain, ask the player to roll specific dice (e.g., "Roll a Strength check" or "Roll for Initiative").
5. Interpret the user's dice results.
6. Keep descriptions evocative but concise.
7. Manage combat turns if fighting occurs.
"""


def build_system_prompt(character: Character, setup: AdventureSetup) -> str:
    """Build the one-time session instruction for the narration model.

    Args:
        character: The adventuring character.
        setup: Setting, goal and notes chosen by the player.

    Returns:
        The system instruction embedding the full derived sheet.
    """
    sheet = derive_sheet(character)
    ability_lines = "\n".join(
        f"  - {line.ability.value}: {line.score} ({format_modifier(line.modifier)})"
        for line in sheet.abilities
    )
    equipment = [weapon.name for weapon in character.weapons]
    if sheet.armor:
        equipment.append(sheet.armor)

    return DM_SYSTEM_PROMPT.format(
        name=sheet.name,
        level=sheet.level,
        archetype=sheet.archetype or "None",
        archetype_label=sheet.archetype_label or "Unknown",
        ability_lines=ability_lines,
        current_hp=sheet.current_hp,
        max_hp=sheet.max_hp,
        proficiency_bonus=sheet.proficiency_bonus,
        equipment=", ".join(equipment) or "None",
        spells=", ".join(sheet.spells) or "None",
        setting=setup.setting.strip() or DEFAULT_SETTING,
        goal=setup.goal.strip() or DEFAULT_GOAL,
        notes=setup.notes.strip(),
    )


# =============================================================================
# Travel Turn
# =============================================================================


def build_travel_prompt(event: RandomEvent, encounter: Encounter | None = None) -> str:
    """Compose the player turn sent when travelling to a new area.

    Args:
        event: The rolled random event.
        encounter: Monsters that appear, for the monster attack event.

    Returns:
        The composite narration request.
    """
    lines = [
        "I travel to a new area. ",
        f"**Random Event:** {event.event} ({event.effect}).",
    ]
    if encounter is not None:
        lines += [
            "",
            f"**Encounter:** {encounter.count} {encounter.monster.name}s appear!",
            f"Stats: {encounter.monster.stat_line}",
            "",
            "Begin combat!",
        ]
    else:
        lines += ["", "Describe the new area and how this event manifests."]
    return "\n".join(lines)


# =============================================================================
# Portrait
# =============================================================================


def build_portrait_prompt(character: Character) -> str:
    """Describe the character for the portrait model.

    Args:
        character: A character with an archetype.

    Returns:
        The image prompt.

    Raises:
        RulesLookupError: If the character has no archetype.
    """
    if character.archetype is None:
        raise RulesLookupError("A portrait needs an archetype", kind="archetype")

    info = get_archetype_info(character.archetype)
    details = " ".join(
        part
        for part in (
            character.gender or "",
            f"{character.age} years old" if character.age else "",
        )
        if part
    )
    subject = f"A high quality fantasy portrait of a {info.label} named {character.name or 'Hero'}."
    if details:
        subject += f" {info.description} {details}."
    else:
        subject += f" {info.description}"
    return (
        f"{subject} Digital art style, character concept art, close up, detailed face, "
        "rpg character sheet portrait."
    )


__all__ = [
    "DM_SYSTEM_PROMPT",
    "build_system_prompt",
    "build_travel_prompt",
    "build_portrait_prompt",
]
