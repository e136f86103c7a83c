"""Dungeon master: prompts, narration collaborators and the adventure session.

Example:
    >>> from onepage_dm.dm import AdventureSession, AdventureSetup, OpenRouterNarrator
    >>>
    >>> session = AdventureSession(OpenRouterNarrator())
    >>> opening = session.start_session(hero, AdventureSetup(setting="Misty moors"))
"""

from __future__ import annotations

from onepage_dm.dm.narrator import (
    Conversation,
    NarrationClient,
    OpenRouterNarrator,
    OpenRouterPortraitRenderer,
    PortraitRenderer,
)
from onepage_dm.dm.prompts import (
    DM_SYSTEM_PROMPT,
    build_portrait_prompt,
    build_system_prompt,
    build_travel_prompt,
)
from onepage_dm.dm.session import (
    AdventureSession,
    AdventureSetup,
    Encounter,
    TravelResult,
)


__all__ = [
    # Collaborators
    "NarrationClient",
    "PortraitRenderer",
    "Conversation",
    "OpenRouterNarrator",
    "OpenRouterPortraitRenderer",
    # Prompts
    "DM_SYSTEM_PROMPT",
    "build_system_prompt",
    "build_travel_prompt",
    "build_portrait_prompt",
    # Session
    "AdventureSession",
    "AdventureSetup",
    "Encounter",
    "TravelResult",
]
