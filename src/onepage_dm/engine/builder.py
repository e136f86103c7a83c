"""Character build wizard.

An explicit state machine over BuildStage that any UI can observe:

    ABILITY_SCORES --commit_scores--> ARCHETYPE --choose_archetype--> EQUIPMENT
          ^                               |                               |
          +------------- back ------------+                            finish
                                                                          v
                                                                      COMPLETE

Unmet player preconditions (unassigned abilities, empty name, not enough
gold) are reported by returning False/None and through the ``can_*``
predicates, never by raising. Calling an operation outside its stage is a
caller bug and raises InvalidBuildStateError.
"""

from __future__ import annotations

import base64
from typing import TYPE_CHECKING

from onepage_dm.core.config import GameSettings, get_settings
from onepage_dm.core.constants import ARCHETYPE_BONUS
from onepage_dm.core.exceptions import InvalidBuildStateError, ValidationError
from onepage_dm.core.logging import get_logger
from onepage_dm.engine.dice import DiceRoller
from onepage_dm.models.character import Character
from onepage_dm.models.enums import Ability, Archetype, BuildStage
from onepage_dm.models.rules import (
    WIZARD_SPELLS,
    Armor,
    BonusMode,
    Weapon,
    get_archetype_info,
    get_armor,
    get_weapon,
)


if TYPE_CHECKING:
    from onepage_dm.dm.narrator import PortraitRenderer


logger = get_logger(__name__)


def apply_archetype_bonus(
    abilities: dict[Ability, int],
    archetype: Archetype,
) -> dict[Ability, int]:
    """Apply an archetype's ability score increase.

    Fighter raises the higher of STR/CON and Ranger the higher of DEX/CHR,
    ties going to the first; Wizard raises both INT and WIS.

    Args:
        abilities: Pre-bonus scores. Not modified.
        archetype: The chosen archetype.

    Returns:
        A new score map with the bonus applied.
    """
    info = get_archetype_info(archetype)
    boosted = dict(abilities)

    if info.bonus_mode is BonusMode.EACH:
        for ability in info.bonus_abilities:
            boosted[ability] += ARCHETYPE_BONUS
    else:
        first, *others = info.bonus_abilities
        target = first
        for ability in others:
            if boosted[ability] > boosted[target]:
                target = ability
        boosted[target] += ARCHETYPE_BONUS

    return boosted


class CharacterBuilder:
    """Three-step character creation wizard.

    Example:
        >>> builder = CharacterBuilder(DiceRoller(seed=7))
        >>> rolls = builder.roll_scores()
        >>> for index, ability in enumerate(Ability):
        ...     builder.assign_score(ability, index)
        >>> builder.commit_scores()
        True
        >>> builder.choose_archetype(Archetype.FIGHTER)
        >>> builder.set_name("Brom")
        >>> hero = builder.finish()
    """

    def __init__(
        self,
        roller: DiceRoller | None = None,
        *,
        game_settings: GameSettings | None = None,
    ) -> None:
        """Initialize a fresh build.

        Args:
            roller: Source of all randomness in the build.
            game_settings: Rules settings; defaults to the application settings.
        """
        self._roller = roller or DiceRoller()
        self._settings = game_settings or get_settings().game
        self._stage = BuildStage.ABILITY_SCORES
        self._character = Character()
        self._rolled_scores: list[int] = []
        self._assignments: dict[Ability, int | None] = {ability: None for ability in Ability}
        self._base_abilities: dict[Ability, int] | None = None

    # -------------------------------------------------------------------------
    # Observable state
    # -------------------------------------------------------------------------

    @property
    def stage(self) -> BuildStage:
        return self._stage

    @property
    def character(self) -> Character:
        """The character under construction (live reference)."""
        return self._character

    @property
    def rolled_scores(self) -> list[int]:
        return list(self._rolled_scores)

    @property
    def assignments(self) -> dict[Ability, int | None]:
        """Rolled index bound to each ability, or None."""
        return dict(self._assignments)

    @property
    def base_abilities(self) -> dict[Ability, int] | None:
        """Committed scores before the archetype bonus."""
        return dict(self._base_abilities) if self._base_abilities is not None else None

    def _require_stage(self, operation: str, *stages: BuildStage) -> None:
        if self._stage not in stages:
            raise InvalidBuildStateError(
                f"Cannot {operation} during the {self._stage.value} stage",
                current_stage=self._stage.value,
                expected_stages=[stage.value for stage in stages],
            )

    # -------------------------------------------------------------------------
    # Stage 1: Ability scores
    # -------------------------------------------------------------------------

    def roll_scores(self) -> list[int]:
        """Roll six scores (4d6 drop lowest), discarding all assignments.

        Returns:
            The rolled scores, identified by position.
        """
        self._require_stage("roll scores", BuildStage.ABILITY_SCORES)
        self._rolled_scores = self._roller.roll_ability_scores(len(Ability))
        self._assignments = {ability: None for ability in Ability}
        return list(self._rolled_scores)

    def assign_score(self, ability: Ability, rolled_index: int) -> None:
        """Bind a rolled score, by position, to an ability.

        A score already bound to another ability is taken from it first,
        so every rolled score is used at most once.

        Args:
            ability: The ability to bind.
            rolled_index: Position of the score in ``rolled_scores``.

        Raises:
            ValidationError: If no score was rolled at that position.
        """
        self._require_stage("assign scores", BuildStage.ABILITY_SCORES)
        ability = Ability(ability)
        if not 0 <= rolled_index < len(self._rolled_scores):
            raise ValidationError(
                "No rolled score at that position",
                field_name="rolled_index",
                invalid_value=rolled_index,
            )

        for other, index in self._assignments.items():
            if index == rolled_index and other is not ability:
                self._assignments[other] = None
                logger.debug("Score unbound", ability=other.value, rolled_index=rolled_index)

        self._assignments[ability] = rolled_index

    def unassign(self, ability: Ability) -> None:
        self._require_stage("unassign scores", BuildStage.ABILITY_SCORES)
        self._assignments[ability] = None

    def available_indices(self) -> list[int]:
        """Positions of rolled scores not bound to any ability."""
        used = {index for index in self._assignments.values() if index is not None}
        return [index for index in range(len(self._rolled_scores)) if index not in used]

    @property
    def can_commit_scores(self) -> bool:
        return all(index is not None for index in self._assignments.values())

    def commit_scores(self) -> bool:
        """Copy the bound scores to the character and roll starting gold.

        Returns:
            False, with nothing changed, unless all six abilities are bound.
        """
        self._require_stage("commit scores", BuildStage.ABILITY_SCORES)
        if not self.can_commit_scores:
            logger.info(
                "Scores not committed, abilities unassigned",
                unassigned=[a.value for a, i in self._assignments.items() if i is None],
            )
            return False

        committed = {
            ability: self._rolled_scores[index]
            for ability, index in self._assignments.items()
            if index is not None
        }
        self._base_abilities = committed
        self._character.abilities = dict(committed)
        self._character.gold = self._roller.roll_starting_gold(self._settings.starting_gold_die)
        self._stage = BuildStage.ARCHETYPE

        logger.info("Scores committed", gold=self._character.gold)
        return True

    # -------------------------------------------------------------------------
    # Stage 2: Archetype
    # -------------------------------------------------------------------------

    def choose_archetype(self, archetype: Archetype) -> None:
        """Choose an archetype and apply its bonuses.

        The ability bonus is applied to the committed pre-bonus scores, hit
        points are set to the hit die, and a Wizard learns random spells.

        Args:
            archetype: The chosen archetype.
        """
        self._require_stage("choose an archetype", BuildStage.ARCHETYPE)
        if self._base_abilities is None:
            raise InvalidBuildStateError(
                "Scores must be committed before choosing an archetype",
                current_stage=self._stage.value,
            )

        archetype = Archetype(archetype)
        info = get_archetype_info(archetype)
        character = self._character

        character.abilities = apply_archetype_bonus(self._base_abilities, archetype)
        character.archetype = archetype
        character.set_hit_points(info.hit_die)

        if archetype is Archetype.WIZARD:
            character.known_spells = self._roller.sample(
                WIZARD_SPELLS, self._settings.wizard_spell_count
            )
        else:
            character.known_spells = []

        self._stage = BuildStage.EQUIPMENT
        logger.info(
            "Archetype chosen",
            archetype=archetype.value,
            max_hp=character.max_hp,
            spells=[spell.name for spell in character.known_spells],
        )

    def back(self) -> bool:
        """Return from the archetype step to the ability score step.

        Rolls and assignments are kept; the scores must be committed again.

        Returns:
            True if the stage changed.
        """
        if self._stage is not BuildStage.ARCHETYPE:
            return False
        self._stage = BuildStage.ABILITY_SCORES
        logger.debug("Returned to ability scores")
        return True

    # -------------------------------------------------------------------------
    # Stage 3: Equipment and identity
    # -------------------------------------------------------------------------

    def can_afford(self, weapon: Weapon | str) -> bool:
        weapon = get_weapon(weapon) if isinstance(weapon, str) else weapon
        return self._character.gold >= weapon.cost

    def toggle_weapon(self, weapon: Weapon | str) -> bool:
        """Buy an unowned weapon or sell an owned one.

        Args:
            weapon: The weapon, or its name.

        Returns:
            False, with nothing changed, when buying without enough gold.
        """
        self._require_stage("buy weapons", BuildStage.EQUIPMENT)
        weapon = get_weapon(weapon) if isinstance(weapon, str) else weapon
        character = self._character

        if character.owns_weapon(weapon.name):
            character.weapons = [w for w in character.weapons if w.name != weapon.name]
            character.gold += weapon.cost
            logger.info("Weapon sold", weapon=weapon.name, gold=character.gold)
            return True

        if character.gold < weapon.cost:
            logger.debug("Weapon not affordable", weapon=weapon.name, gold=character.gold)
            return False

        character.gold -= weapon.cost
        character.weapons = [*character.weapons, weapon]
        logger.info("Weapon bought", weapon=weapon.name, gold=character.gold)
        return True

    def set_armor(self, armor: Armor | str) -> None:
        """Equip an armor, replacing the current one. No gold is charged."""
        self._require_stage("equip armor", BuildStage.EQUIPMENT)
        armor = get_armor(armor) if isinstance(armor, str) else armor
        self._character.armor = armor
        logger.debug("Armor equipped", armor=armor.name)

    def set_name(self, name: str) -> None:
        self._require_stage("set the name", BuildStage.EQUIPMENT)
        self._character.name = name

    def set_bio(
        self,
        *,
        age: str | None = None,
        gender: str | None = None,
        pronouns: str | None = None,
    ) -> None:
        """Set the optional biographical fields that are given."""
        self._require_stage("set details", BuildStage.EQUIPMENT)
        if age is not None:
            self._character.age = age
        if gender is not None:
            self._character.gender = gender
        if pronouns is not None:
            self._character.pronouns = pronouns

    def set_portrait(self, portrait_url: str | None) -> None:
        self._require_stage("set the portrait", BuildStage.EQUIPMENT)
        self._character.update_portrait(portrait_url)

    def generate_portrait(self, renderer: PortraitRenderer) -> bool:
        """Render a portrait for the character.

        A failed or empty render keeps the current portrait and never
        blocks finishing the build.

        Args:
            renderer: The portrait collaborator.

        Returns:
            True if a new portrait was stored.
        """
        from onepage_dm.dm.prompts import build_portrait_prompt

        self._require_stage("generate a portrait", BuildStage.EQUIPMENT)
        try:
            image = renderer.render_image(build_portrait_prompt(self._character))
        except Exception:
            logger.exception("Portrait generation failed")
            return False

        if not image:
            logger.info("No portrait generated")
            return False

        encoded = base64.b64encode(image).decode("ascii")
        self._character.update_portrait(f"data:image/png;base64,{encoded}")
        logger.info("Portrait generated", size_bytes=len(image))
        return True

    @property
    def can_finish(self) -> bool:
        return self._stage is BuildStage.EQUIPMENT and bool(self._character.name.strip())

    def finish(self) -> Character | None:
        """Complete the build.

        Returns:
            A copy of the finished character, or None if it has no name.
        """
        self._require_stage("finish", BuildStage.EQUIPMENT)
        if not self.can_finish:
            logger.info("Build not finished, character has no name")
            return None

        self._stage = BuildStage.COMPLETE
        logger.info(
            "Character created",
            name=self._character.name,
            archetype=self._character.archetype,
            gold=self._character.gold,
        )
        return self._character.model_copy(deep=True)


__all__ = [
    "CharacterBuilder",
    "apply_archetype_bonus",
]
