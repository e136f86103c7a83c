"""Rules engine for One Page 5e.

Submodules:
    dice: Dice rolling through an injectable random source
    stats: Ability modifiers, proficiency, armor class and the derived sheet
    builder: Three-step character build state machine

Example:
    >>> from onepage_dm.engine import CharacterBuilder, DiceRoller
    >>>
    >>> builder = CharacterBuilder(DiceRoller(seed=1))
    >>> scores = builder.roll_scores()
"""

from __future__ import annotations

# =============================================================================
# Dice Rolling
# =============================================================================
from onepage_dm.engine.dice import (
    DiceRoller,
    annotate_input,
)

# =============================================================================
# Stat Engine
# =============================================================================
from onepage_dm.engine.stats import (
    AbilityLine,
    CharacterSheet,
    ability_modifier,
    ability_modifiers,
    armor_class,
    character_armor_class,
    derive_sheet,
    format_modifier,
    proficiency_bonus,
)

# =============================================================================
# Character Builder
# =============================================================================
from onepage_dm.engine.builder import (
    CharacterBuilder,
    apply_archetype_bonus,
)


__all__ = [
    # Dice
    "DiceRoller",
    "annotate_input",
    # Stats
    "AbilityLine",
    "CharacterSheet",
    "ability_modifier",
    "ability_modifiers",
    "armor_class",
    "character_armor_class",
    "derive_sheet",
    "format_modifier",
    "proficiency_bonus",
    # Builder
    "CharacterBuilder",
    "apply_archetype_bonus",
]
