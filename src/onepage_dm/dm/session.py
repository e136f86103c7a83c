"""Adventure session engine.

Drives one adventure: a persistent conversation with the narration
collaborator, the transcript shown to the player, and the composite
travel turn that rolls random events and monster encounters.

    UNINITIALIZED --start_session--> ACTIVE --send_turn/travel--> ACTIVE
          ^                                        |
          +----------------- restart --------------+

Failures of the narration collaborator never escape the session; they
become fixed in-story messages and the player can simply try again.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict

from onepage_dm.core.config import GameSettings, get_settings
from onepage_dm.core.constants import (
    NOT_INITIALIZED_MESSAGE,
    OPENING_PROMPT,
    START_FAILURE_MESSAGE,
    TURN_FAILURE_MESSAGE,
)
from onepage_dm.core.logging import bind_context, get_logger, unbind_context
from onepage_dm.dm.narrator import NarrationClient
from onepage_dm.dm.prompts import build_system_prompt, build_travel_prompt
from onepage_dm.engine.dice import DiceRoller
from onepage_dm.models.character import Character, ChatMessage
from onepage_dm.models.enums import MessageRole, SessionStatus
from onepage_dm.models.rules import MONSTERS, RANDOM_EVENTS, Monster, RandomEvent


logger = get_logger(__name__)


class AdventureSetup(BaseModel):
    """Free-text adventure parameters chosen before starting.

    Attributes:
        setting: Where the adventure takes place.
        goal: What the hero is trying to achieve.
        notes: Extra scenario notes for the dungeon master.
    """

    model_config = ConfigDict(frozen=True)

    setting: str = ""
    goal: str = ""
    notes: str = ""


@dataclass(frozen=True)
class Encounter:
    """A group of identical monsters."""

    monster: Monster
    count: int


@dataclass(frozen=True)
class TravelResult:
    """Outcome of a travel action.

    Attributes:
        event: The rolled random event.
        encounter: The monsters that appeared, for a monster attack.
        prompt: The composite turn sent to the narrator.
        reply: The narrated reply, or None if the turn was not sent.
    """

    event: RandomEvent
    encounter: Encounter | None
    prompt: str
    reply: str | None


class AdventureSession:
    """One adventure with the narration collaborator.

    The session does not own the character: the caller passes it in when
    starting and may hand over an updated one with ``update_character``.

    Example:
        >>> session = AdventureSession(narrator, DiceRoller(seed=3))
        >>> opening = session.start_session(hero, AdventureSetup(goal="Find the relic"))
        >>> reply = session.send_turn("I light a torch.")
        >>> result = session.travel()
    """

    def __init__(
        self,
        narrator: NarrationClient,
        roller: DiceRoller | None = None,
        *,
        setup: AdventureSetup | None = None,
        game_settings: GameSettings | None = None,
        temperature: float | None = None,
    ) -> None:
        """Initialize an uninitialized session.

        Args:
            narrator: The narration collaborator.
            roller: Source of all randomness in the session.
            setup: Initial adventure parameters.
            game_settings: Rules settings; defaults to the application settings.
            temperature: Narration temperature; defaults to the provider setting.
        """
        self._narrator = narrator
        self._roller = roller or DiceRoller()
        settings = get_settings()
        self._settings = game_settings or settings.game
        self._temperature = (
            temperature if temperature is not None else settings.ai.narration_temperature
        )
        self._setup = setup or AdventureSetup()
        self._character: Character | None = None
        self._conversation: Any = None
        self._transcript: list[ChatMessage] = []
        self._status = SessionStatus.UNINITIALIZED
        self._busy = False
        self._session_id: str | None = None
        self.highlighted_event_id: int | None = None

    # -------------------------------------------------------------------------
    # Observable state
    # -------------------------------------------------------------------------

    @property
    def status(self) -> SessionStatus:
        return self._status

    @property
    def is_active(self) -> bool:
        return self._status is SessionStatus.ACTIVE

    @property
    def busy(self) -> bool:
        """True while a turn is waiting for the narrator."""
        return self._busy

    @property
    def transcript(self) -> list[ChatMessage]:
        return list(self._transcript)

    @property
    def setup(self) -> AdventureSetup:
        return self._setup

    @setup.setter
    def setup(self, setup: AdventureSetup) -> None:
        self._setup = setup

    @property
    def character(self) -> Character | None:
        return self._character

    @property
    def session_id(self) -> str | None:
        return self._session_id

    def update_character(self, character: Character) -> None:
        """Replace the character reference used for later context."""
        self._character = character

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def start_session(self, character: Character, setup: AdventureSetup | None = None) -> str:
        """Open the conversation and narrate the opening scene.

        Starting an active session discards the previous conversation.

        Args:
            character: The adventuring character.
            setup: Adventure parameters; the current ones are kept if omitted.

        Returns:
            The opening narration, or a fixed in-story error message.
        """
        if self._status is SessionStatus.ACTIVE:
            logger.warning("Starting over an active session", session_id=self._session_id)
            self.restart()

        if setup is not None:
            self._setup = setup
        self._character = character
        self._transcript = []
        self._session_id = uuid4().hex
        bind_context(session_id=self._session_id)

        self._busy = True
        try:
            instruction = build_system_prompt(character, self._setup)
            conversation = self._narrator.open_session(instruction, self._temperature)
            reply = self._narrator.converse(conversation, OPENING_PROMPT)
        except Exception:
            logger.exception("Adventure failed to start")
            self._conversation = None
            self._session_id = None
            unbind_context("session_id")
            self._transcript.append(ChatMessage(role=MessageRole.MODEL, content=START_FAILURE_MESSAGE))
            return START_FAILURE_MESSAGE
        finally:
            self._busy = False

        self._conversation = conversation
        self._transcript.append(ChatMessage(role=MessageRole.MODEL, content=reply))
        self._status = SessionStatus.ACTIVE
        logger.info(
            "Adventure started",
            character=character.name,
            setting=self._setup.setting,
            goal=self._setup.goal,
        )
        return reply

    def restart(self) -> None:
        """Return to the uninitialized state, keeping the adventure setup."""
        self._conversation = None
        self._transcript = []
        self._status = SessionStatus.UNINITIALIZED
        self._busy = False
        self.highlighted_event_id = None
        logger.info("Adventure restarted", session_id=self._session_id)
        self._session_id = None
        unbind_context("session_id")

    # -------------------------------------------------------------------------
    # Turns
    # -------------------------------------------------------------------------

    def send_turn(self, text: str) -> str | None:
        """Send one player action and record the exchange.

        Args:
            text: The player's free-text action.

        Returns:
            The narrated reply or an in-story error message. None when the
            text is blank or another turn is still outstanding, in which
            case nothing changes.
        """
        if self._busy or not text.strip():
            logger.debug("Turn ignored", busy=self._busy)
            return None

        if self._status is not SessionStatus.ACTIVE:
            logger.warning("Turn sent before the adventure started")
            return NOT_INITIALIZED_MESSAGE

        self._transcript.append(ChatMessage(role=MessageRole.USER, content=text))
        self._busy = True
        try:
            reply = self._narrator.converse(self._conversation, text)
        except Exception:
            logger.exception("Narration turn failed")
            reply = TURN_FAILURE_MESSAGE
        finally:
            self._busy = False

        self._transcript.append(ChatMessage(role=MessageRole.MODEL, content=reply))
        logger.debug("Turn completed", transcript_length=len(self._transcript))
        return reply

    def roll_random_event(self) -> RandomEvent:
        """Roll on the random event table and highlight the row."""
        event = self._roller.choice(RANDOM_EVENTS)
        self.highlighted_event_id = event.id
        logger.info("Random event rolled", event_id=event.id, random_event=event.event)
        return event

    def roll_encounter(self) -> Encounter:
        """Pick a monster from the roster and roll how many appear."""
        monster = self._roller.choice(MONSTERS)
        rules = self._settings
        count = sum(self._roller.roll_dice(rules.encounter_dice_count, rules.encounter_die_sides))
        logger.info("Encounter rolled", monster=monster.name, count=count)
        return Encounter(monster=monster, count=count)

    def travel(self) -> TravelResult | None:
        """Travel to a new area.

        Rolls a random event, adds a monster encounter when the event is a
        monster attack, and sends the composed turn like any player action.

        Returns:
            The travel outcome, or None while another turn is outstanding.
        """
        if self._busy:
            logger.debug("Travel ignored, turn outstanding")
            return None

        event = self.roll_random_event()
        encounter = self.roll_encounter() if event.id == self._settings.monster_event_id else None
        prompt = build_travel_prompt(event, encounter)
        reply = self.send_turn(prompt)
        return TravelResult(event=event, encounter=encounter, prompt=prompt, reply=reply)


__all__ = [
    "AdventureSession",
    "AdventureSetup",
    "Encounter",
    "TravelResult",
]
