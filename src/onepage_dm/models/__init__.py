"""Data models for the One Page DM adventure engine.

Submodules:
    enums: Abilities, archetypes, chat roles and state machine stages.
    rules: Immutable rules tables (archetypes, shop, spells, monsters, events).
    character: The mutable Character aggregate and ChatMessage.
"""

from __future__ import annotations

from onepage_dm.models.character import Character, ChatMessage, default_abilities
from onepage_dm.models.enums import (
    Ability,
    Archetype,
    BuildStage,
    MessageRole,
    SessionStatus,
)
from onepage_dm.models.rules import (
    ARCHETYPES,
    ARMORS,
    MONSTERS,
    NO_ARMOR,
    RANDOM_EVENTS,
    WEAPONS,
    WIZARD_SPELLS,
    Armor,
    ArchetypeInfo,
    BonusMode,
    Monster,
    RandomEvent,
    Spell,
    Weapon,
    get_archetype_info,
    get_armor,
    get_monster,
    get_random_event,
    get_spell,
    get_weapon,
)


__all__ = [
    # Enums
    "Ability",
    "Archetype",
    "BuildStage",
    "MessageRole",
    "SessionStatus",
    # Rules tables
    "ArchetypeInfo",
    "BonusMode",
    "Weapon",
    "Armor",
    "Spell",
    "Monster",
    "RandomEvent",
    "ARCHETYPES",
    "WEAPONS",
    "ARMORS",
    "NO_ARMOR",
    "WIZARD_SPELLS",
    "MONSTERS",
    "RANDOM_EVENTS",
    "get_archetype_info",
    "get_weapon",
    "get_armor",
    "get_spell",
    "get_monster",
    "get_random_event",
    # Entities
    "Character",
    "ChatMessage",
    "default_abilities",
]
