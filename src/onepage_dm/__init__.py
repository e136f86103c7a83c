"""One Page DM - an AI dungeon master for the One Page 5e ruleset.

Python owns the rules: dice, ability scores, the character build and the
adventure's random tables. The narration model only tells the story.

Example:
    >>> from onepage_dm import AdventureSession, CharacterBuilder, DiceRoller, OpenRouterNarrator
    >>>
    >>> roller = DiceRoller()
    >>> builder = CharacterBuilder(roller)
    >>> builder.roll_scores()
    >>> ...
    >>> hero = builder.finish()
    >>>
    >>> session = AdventureSession(OpenRouterNarrator(), roller)
    >>> print(session.start_session(hero))
    >>> print(session.travel().reply)

Modules:
    core: Configuration, logging, constants and exceptions.
    models: Enumerations, rules tables and the Character aggregate.
    engine: Dice, stat engine and the character build state machine.
    dm: Prompts, narration collaborators and the adventure session.
"""

from __future__ import annotations

# Core
from onepage_dm.core.config import Settings, get_settings
from onepage_dm.core.exceptions import OnePageError
from onepage_dm.core.logging import configure_logging, get_logger

# Models
from onepage_dm.models import (
    Ability,
    Archetype,
    BuildStage,
    Character,
    ChatMessage,
    MessageRole,
    SessionStatus,
)

# Engine
from onepage_dm.engine import (
    CharacterBuilder,
    CharacterSheet,
    DiceRoller,
    derive_sheet,
)

# Dungeon master
from onepage_dm.dm import (
    AdventureSession,
    AdventureSetup,
    NarrationClient,
    OpenRouterNarrator,
    OpenRouterPortraitRenderer,
    PortraitRenderer,
    TravelResult,
)


__version__ = "0.1.0"

__all__ = [
    # Core
    "Settings",
    "get_settings",
    "OnePageError",
    "configure_logging",
    "get_logger",
    # Models
    "Ability",
    "Archetype",
    "BuildStage",
    "Character",
    "ChatMessage",
    "MessageRole",
    "SessionStatus",
    # Engine
    "CharacterBuilder",
    "CharacterSheet",
    "DiceRoller",
    "derive_sheet",
    # Dungeon master
    "AdventureSession",
    "AdventureSetup",
    "NarrationClient",
    "OpenRouterNarrator",
    "OpenRouterPortraitRenderer",
    "PortraitRenderer",
    "TravelResult",
]
