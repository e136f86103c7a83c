"""Pytest configuration and shared fixtures.

This module provides common fixtures and configuration for all tests
in the One Page DM test suite, including hand-written fakes for the
narration and portrait collaborators.
"""

from __future__ import annotations

import random
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

import pytest


if TYPE_CHECKING:
    from collections.abc import Generator

    from onepage_dm.engine.dice import DiceRoller
    from onepage_dm.models.character import Character


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Reset the settings cache before and after each test."""
    from onepage_dm.core.config import clear_settings_cache

    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def mock_env_vars(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Set up mock environment variables for testing.

    Returns:
        Dictionary of environment variables that were set.
    """
    env_vars = {
        "ONEPAGE_DM_API_KEY": "test-openrouter-key",
        "ONEPAGE_DM_DEBUG": "true",
        "ONEPAGE_DM_LOG_LEVEL": "DEBUG",
        "ONEPAGE_DM_GAME_STARTING_GOLD_DIE": "50",
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    return env_vars


# =============================================================================
# Randomness Fixtures
# =============================================================================


class ScriptedRandom(random.Random):
    """Random source whose integer draws come from a fixed script.

    ``randint`` pops the next scripted value; everything else (such as
    ``sample``) falls back to a seeded generator.
    """

    def __init__(self, values: Iterable[int] = (), seed: int = 0) -> None:
        super().__init__(seed)
        self.values = list(values)

    def push(self, *values: int) -> None:
        self.values.extend(values)

    def randint(self, a: int, b: int) -> int:
        if not self.values:
            raise AssertionError(f"Script exhausted (randint({a}, {b}))")
        value = self.values.pop(0)
        if not a <= value <= b:
            raise AssertionError(f"Scripted value {value} outside {a}..{b}")
        return value


@pytest.fixture
def dice_roller() -> DiceRoller:
    """Create a seeded DiceRoller instance.

    Returns:
        DiceRoller with a fixed seed.
    """
    from onepage_dm.engine.dice import DiceRoller

    return DiceRoller(seed=42)


@pytest.fixture
def scripted_rng() -> ScriptedRandom:
    """Provide an empty scripted random source."""
    return ScriptedRandom()


@pytest.fixture
def scripted_roller(scripted_rng: ScriptedRandom) -> DiceRoller:
    """Create a DiceRoller drawing from ``scripted_rng``."""
    from onepage_dm.engine.dice import DiceRoller

    return DiceRoller(scripted_rng)


# =============================================================================
# Collaborator Fakes
# =============================================================================


class FakeConversation:
    """Conversation handle recorded by FakeNarrator."""

    def __init__(self, system_instruction: str, temperature: float) -> None:
        self.system_instruction = system_instruction
        self.temperature = temperature
        self.turns: list[str] = []


class FakeNarrator:
    """Narration collaborator that replies from a script.

    Attributes:
        replies: Replies returned in order; defaults to numbered replies.
        fail_open: Raise when a conversation is opened.
        fail_converse: Raise on every turn.
        conversations: Every conversation opened.
    """

    def __init__(self, replies: Iterable[str] = ()) -> None:
        self.replies = list(replies)
        self.fail_open = False
        self.fail_converse = False
        self.conversations: list[FakeConversation] = []
        self.sent: list[str] = []
        self.on_converse: Any = None

    def open_session(self, system_instruction: str, temperature: float) -> FakeConversation:
        from onepage_dm.core.exceptions import NarrationConnectionError

        if self.fail_open:
            raise NarrationConnectionError("No API key", provider="fake")
        conversation = FakeConversation(system_instruction, temperature)
        self.conversations.append(conversation)
        return conversation

    def converse(self, conversation: FakeConversation, text: str) -> str:
        from onepage_dm.core.exceptions import NarrationResponseError

        self.sent.append(text)
        if self.on_converse is not None:
            self.on_converse(text)
        if self.fail_converse:
            raise NarrationResponseError("Service unavailable", provider="fake")
        conversation.turns.append(text)
        if self.replies:
            return self.replies.pop(0)
        return f"Narration {len(self.sent)}"


class FakePortraitRenderer:
    """Portrait collaborator returning fixed bytes, None, or raising."""

    def __init__(self, image: bytes | None = b"\x89PNG fake", error: Exception | None = None) -> None:
        self.image = image
        self.error = error
        self.prompts: list[str] = []

    def render_image(self, prompt: str) -> bytes | None:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.image


@pytest.fixture
def fake_narrator() -> FakeNarrator:
    """Provide a scripted narration collaborator."""
    return FakeNarrator()


@pytest.fixture
def fake_renderer() -> FakePortraitRenderer:
    """Provide a portrait collaborator that always succeeds."""
    return FakePortraitRenderer()


@pytest.fixture
def empty_renderer() -> FakePortraitRenderer:
    """Provide a portrait collaborator that renders nothing."""
    return FakePortraitRenderer(image=None)


@pytest.fixture
def failing_renderer() -> FakePortraitRenderer:
    """Provide a portrait collaborator that raises."""
    from onepage_dm.core.exceptions import NarrationConnectionError

    return FakePortraitRenderer(error=NarrationConnectionError("offline", provider="fake"))


# =============================================================================
# Model Fixtures
# =============================================================================


@pytest.fixture
def sample_abilities() -> dict[Any, int]:
    """Provide sample ability scores.

    Returns:
        Dictionary of ability scores.
    """
    from onepage_dm.models.enums import Ability

    return {
        Ability.STR: 16,
        Ability.DEX: 14,
        Ability.CON: 15,
        Ability.INT: 10,
        Ability.WIS: 12,
        Ability.CHR: 8,
    }


@pytest.fixture
def sample_character(sample_abilities: dict[Any, int]) -> Character:
    """Create a finished Dwarf Fighter for testing.

    Args:
        sample_abilities: Character ability scores.

    Returns:
        Character instance.
    """
    from onepage_dm.models.character import Character
    from onepage_dm.models.enums import Archetype
    from onepage_dm.models.rules import get_armor, get_weapon

    return Character(
        name="Brom Ironfist",
        archetype=Archetype.FIGHTER,
        abilities=sample_abilities,
        max_hp=12,
        current_hp=12,
        gold=40,
        weapons=[get_weapon("Axe"), get_weapon("Dagger")],
        armor=get_armor("Leather Armor"),
    )


@pytest.fixture
def sample_wizard() -> Character:
    """Create a finished Human Wizard with two spells."""
    from onepage_dm.models.character import Character
    from onepage_dm.models.enums import Ability, Archetype
    from onepage_dm.models.rules import get_spell, get_weapon

    return Character(
        name="Mira",
        archetype=Archetype.WIZARD,
        abilities={
            Ability.STR: 8,
            Ability.DEX: 13,
            Ability.CON: 12,
            Ability.INT: 17,
            Ability.WIS: 14,
            Ability.CHR: 10,
        },
        max_hp=10,
        current_hp=10,
        weapons=[get_weapon("Staff")],
        known_spells=[get_spell("Flame Bolt"), get_spell("Ease Pain")],
        gender="female",
        age="27",
    )
