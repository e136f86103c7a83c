"""Tests for the character build state machine."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from onepage_dm.core.config import GameSettings
from onepage_dm.core.exceptions import (
    InvalidBuildStateError,
    RulesLookupError,
    ValidationError,
)
from onepage_dm.engine.builder import CharacterBuilder, apply_archetype_bonus
from onepage_dm.engine.dice import DiceRoller
from onepage_dm.models.enums import Ability, Archetype, BuildStage
from onepage_dm.models.rules import WIZARD_SPELLS, get_weapon


if TYPE_CHECKING:
    from tests.conftest import FakePortraitRenderer, ScriptedRandom


ORDER = list(Ability)


def dice_for(score: int) -> list[int]:
    """Four d6 results whose best three sum to ``score``."""
    high = min(6, score - 2)
    middle = min(6, score - high - 1)
    return [high, middle, score - high - middle, 1]


def script_scores(rng: ScriptedRandom, scores: list[int]) -> None:
    for score in scores:
        rng.push(*dice_for(score))


@pytest.fixture
def builder(scripted_roller: DiceRoller) -> CharacterBuilder:
    """Create a builder drawing from the scripted roller."""
    return CharacterBuilder(scripted_roller, game_settings=GameSettings())


def commit(builder: CharacterBuilder, rng: ScriptedRandom, scores: list[int], gold: int = 60) -> None:
    """Roll ``scores``, bind them in sheet order and commit."""
    script_scores(rng, scores)
    builder.roll_scores()
    for index, ability in enumerate(ORDER):
        builder.assign_score(ability, index)
    rng.push(gold)
    assert builder.commit_scores() is True


class TestApplyArchetypeBonus:
    """Tests for the archetype ability bonus."""

    @staticmethod
    def scores(**overrides: int) -> dict[Ability, int]:
        base = {ability: 10 for ability in Ability}
        base.update({Ability(key): value for key, value in overrides.items()})
        return base

    def test_fighter_raises_higher_constitution(self) -> None:
        """Test Fighter boosts CON when it is higher."""
        result = apply_archetype_bonus(self.scores(STR=12, CON=14), Archetype.FIGHTER)

        assert result[Ability.CON] == 16
        assert result[Ability.STR] == 12

    def test_fighter_raises_higher_strength(self) -> None:
        """Test Fighter boosts STR when it is higher."""
        result = apply_archetype_bonus(self.scores(STR=14, CON=12), Archetype.FIGHTER)

        assert result[Ability.STR] == 16
        assert result[Ability.CON] == 12

    def test_fighter_tie_favors_strength(self) -> None:
        """Test a tie goes to the first ability."""
        result = apply_archetype_bonus(self.scores(STR=13, CON=13), Archetype.FIGHTER)

        assert result[Ability.STR] == 15
        assert result[Ability.CON] == 13

    def test_ranger_dex_or_charisma(self) -> None:
        """Test Ranger boosts the higher of DEX and CHR."""
        result = apply_archetype_bonus(self.scores(DEX=11, CHR=15), Archetype.RANGER)

        assert result[Ability.CHR] == 17
        assert result[Ability.DEX] == 11

    def test_wizard_raises_both(self) -> None:
        """Test Wizard boosts INT and WIS."""
        result = apply_archetype_bonus(self.scores(INT=15, WIS=9), Archetype.WIZARD)

        assert result[Ability.INT] == 17
        assert result[Ability.WIS] == 11

    def test_input_not_modified(self) -> None:
        """Test the original scores are left alone."""
        original = self.scores(STR=14)

        apply_archetype_bonus(original, Archetype.FIGHTER)

        assert original[Ability.STR] == 14


class TestAbilityScoreStage:
    """Tests for rolling and assigning ability scores."""

    def test_initial_state(self, builder: CharacterBuilder) -> None:
        """Test a fresh builder starts on step one."""
        assert builder.stage is BuildStage.ABILITY_SCORES
        assert builder.stage.step_number == 1
        assert builder.rolled_scores == []
        assert builder.can_commit_scores is False

    def test_roll_scores(self, builder: CharacterBuilder, scripted_rng: ScriptedRandom) -> None:
        """Test six scores are rolled with 4d6 drop lowest."""
        script_scores(scripted_rng, [15, 14, 13, 12, 10, 8])

        assert builder.roll_scores() == [15, 14, 13, 12, 10, 8]

    def test_reroll_discards_assignments(self, dice_roller: DiceRoller) -> None:
        """Test rolling again clears every binding."""
        builder = CharacterBuilder(dice_roller)
        builder.roll_scores()
        builder.assign_score(Ability.STR, 0)

        builder.roll_scores()

        assert all(index is None for index in builder.assignments.values())

    def test_assignment_is_a_bijection(self, dice_roller: DiceRoller) -> None:
        """Test rebinding a used score frees its previous ability."""
        builder = CharacterBuilder(dice_roller)
        builder.roll_scores()

        builder.assign_score(Ability.STR, 0)
        builder.assign_score(Ability.DEX, 0)

        assert builder.assignments[Ability.STR] is None
        assert builder.assignments[Ability.DEX] == 0
        assert 0 not in builder.available_indices()

    def test_reassign_same_ability(self, dice_roller: DiceRoller) -> None:
        """Test moving an ability to another score frees the old one."""
        builder = CharacterBuilder(dice_roller)
        builder.roll_scores()
        builder.assign_score(Ability.STR, 0)

        builder.assign_score(Ability.STR, 3)

        assert builder.available_indices() == [0, 1, 2, 4, 5]

    def test_assign_by_value(self, dice_roller: DiceRoller) -> None:
        """Test abilities may be given by their value."""
        builder = CharacterBuilder(dice_roller)
        builder.roll_scores()

        builder.assign_score("WIS", 2)  # type: ignore[arg-type]

        assert builder.assignments[Ability.WIS] == 2

    def test_assign_invalid_index(self, dice_roller: DiceRoller) -> None:
        """Test binding a position that was never rolled."""
        builder = CharacterBuilder(dice_roller)
        builder.roll_scores()

        with pytest.raises(ValidationError):
            builder.assign_score(Ability.STR, 6)

    def test_unassign(self, dice_roller: DiceRoller) -> None:
        """Test an ability can be unbound."""
        builder = CharacterBuilder(dice_roller)
        builder.roll_scores()
        builder.assign_score(Ability.CON, 1)

        builder.unassign(Ability.CON)

        assert 1 in builder.available_indices()

    def test_commit_requires_all_abilities(self, builder: CharacterBuilder, scripted_rng: ScriptedRandom) -> None:
        """Test committing with an unassigned ability changes nothing."""
        script_scores(scripted_rng, [15, 14, 13, 12, 10, 8])
        builder.roll_scores()
        for index, ability in enumerate(ORDER[:5]):
            builder.assign_score(ability, index)

        assert builder.commit_scores() is False
        assert builder.stage is BuildStage.ABILITY_SCORES
        assert builder.character.gold == 0
        assert builder.base_abilities is None

    def test_commit_copies_scores_and_rolls_gold(
        self,
        builder: CharacterBuilder,
        scripted_rng: ScriptedRandom,
    ) -> None:
        """Test a full commit advances to the archetype step."""
        commit(builder, scripted_rng, [8, 10, 12, 13, 14, 15], gold=73)

        assert builder.stage is BuildStage.ARCHETYPE
        assert builder.character.gold == 73
        assert builder.character.abilities == dict(zip(ORDER, [8, 10, 12, 13, 14, 15]))
        assert builder.base_abilities == builder.character.abilities

    def test_commit_gold_range(self, dice_roller: DiceRoller) -> None:
        """Test starting gold always lands in 1..100."""
        for _ in range(25):
            builder = CharacterBuilder(dice_roller)
            builder.roll_scores()
            for index, ability in enumerate(ORDER):
                builder.assign_score(ability, index)
            builder.commit_scores()
            assert 1 <= builder.character.gold <= 100


class TestArchetypeStage:
    """Tests for choosing an archetype."""

    def test_fighter(self, builder: CharacterBuilder, scripted_rng: ScriptedRandom) -> None:
        """Test a Fighter gets its bonus, hit die and no spells."""
        commit(builder, scripted_rng, [12, 10, 14, 10, 10, 10])

        builder.choose_archetype(Archetype.FIGHTER)

        character = builder.character
        assert builder.stage is BuildStage.EQUIPMENT
        assert character.archetype is Archetype.FIGHTER
        assert character.abilities[Ability.CON] == 16
        assert character.abilities[Ability.STR] == 12
        assert character.max_hp == 12
        assert character.current_hp == 12
        assert character.known_spells == []

    def test_ranger_hit_points(self, builder: CharacterBuilder, scripted_rng: ScriptedRandom) -> None:
        """Test a Ranger gets a d10 hit die."""
        commit(builder, scripted_rng, [10, 15, 10, 10, 10, 12])

        builder.choose_archetype(Archetype.RANGER)

        assert builder.character.max_hp == 10
        assert builder.character.abilities[Ability.DEX] == 17

    def test_wizard_learns_two_distinct_spells(self, dice_roller: DiceRoller) -> None:
        """Test a Wizard learns two different catalog spells."""
        for _ in range(20):
            builder = CharacterBuilder(dice_roller)
            builder.roll_scores()
            for index, ability in enumerate(ORDER):
                builder.assign_score(ability, index)
            builder.commit_scores()

            builder.choose_archetype(Archetype.WIZARD)

            spells = builder.character.known_spells
            assert len(spells) == 2
            assert spells[0] != spells[1]
            assert all(spell in WIZARD_SPELLS for spell in spells)

    def test_choose_requires_archetype_stage(self, builder: CharacterBuilder) -> None:
        """Test choosing an archetype before committing scores."""
        with pytest.raises(InvalidBuildStateError) as exc_info:
            builder.choose_archetype(Archetype.FIGHTER)

        assert exc_info.value.details["current_stage"] == "ability_scores"

    def test_back_returns_to_scores(self, builder: CharacterBuilder, scripted_rng: ScriptedRandom) -> None:
        """Test going back keeps rolls and assignments."""
        commit(builder, scripted_rng, [15, 14, 13, 12, 10, 8])

        assert builder.back() is True
        assert builder.stage is BuildStage.ABILITY_SCORES
        assert builder.rolled_scores == [15, 14, 13, 12, 10, 8]
        assert builder.can_commit_scores is True

    def test_back_elsewhere_is_ignored(self, builder: CharacterBuilder, scripted_rng: ScriptedRandom) -> None:
        """Test back only works on the archetype step."""
        assert builder.back() is False

        commit(builder, scripted_rng, [15, 14, 13, 12, 10, 8])
        builder.choose_archetype(Archetype.FIGHTER)

        assert builder.back() is False
        assert builder.stage is BuildStage.EQUIPMENT

    def test_bonus_applied_once_after_back(self, builder: CharacterBuilder, scripted_rng: ScriptedRandom) -> None:
        """Test repeated forward navigation never stacks the bonus."""
        commit(builder, scripted_rng, [14, 10, 12, 10, 10, 10])
        builder.back()
        scripted_rng.push(40)
        builder.commit_scores()
        builder.back()
        scripted_rng.push(41)
        builder.commit_scores()

        builder.choose_archetype(Archetype.FIGHTER)

        assert builder.character.abilities[Ability.STR] == 16
        assert builder.character.abilities[Ability.CON] == 12


class TestEquipmentStage:
    """Tests for the shop and identity step."""

    @pytest.fixture
    def equipping(self, builder: CharacterBuilder, scripted_rng: ScriptedRandom) -> CharacterBuilder:
        """A builder on the equipment step with 60 gold."""
        commit(builder, scripted_rng, [15, 14, 13, 12, 10, 8], gold=60)
        builder.choose_archetype(Archetype.FIGHTER)
        return builder

    def test_buy_weapon(self, equipping: CharacterBuilder) -> None:
        """Test buying deducts the exact cost."""
        assert equipping.toggle_weapon("Bow") is True

        assert equipping.character.gold == 10
        assert equipping.character.owns_weapon("Bow")

    def test_sell_weapon_refunds(self, equipping: CharacterBuilder) -> None:
        """Test toggling an owned weapon refunds it."""
        equipping.toggle_weapon("Bow")

        assert equipping.toggle_weapon(get_weapon("Bow")) is True

        assert equipping.character.gold == 60
        assert equipping.character.weapons == []

    def test_cannot_afford(self, equipping: CharacterBuilder) -> None:
        """Test buying without enough gold leaves state unchanged."""
        assert equipping.can_afford("Crossbow") is False

        assert equipping.toggle_weapon("Crossbow") is False

        assert equipping.character.gold == 60
        assert equipping.character.weapons == []

    def test_exact_gold_is_enough(self, equipping: CharacterBuilder) -> None:
        """Test gold equal to the cost buys the weapon."""
        equipping.toggle_weapon("Sword")
        equipping.toggle_weapon("Staff")

        assert equipping.character.gold == 0
        assert [w.name for w in equipping.character.weapons] == ["Sword", "Staff"]

    def test_unknown_weapon(self, equipping: CharacterBuilder) -> None:
        """Test the shop only sells catalog weapons."""
        with pytest.raises(RulesLookupError):
            equipping.toggle_weapon("Lance")

    def test_set_armor_is_free(self, equipping: CharacterBuilder) -> None:
        """Test equipping armor replaces it without charging gold."""
        equipping.set_armor("Chainmail Armor")
        equipping.set_armor("Leather Armor")

        assert equipping.character.armor is not None
        assert equipping.character.armor.name == "Leather Armor"
        assert equipping.character.gold == 60

    def test_set_bio(self, equipping: CharacterBuilder) -> None:
        """Test only the given bio fields change."""
        equipping.set_bio(age="120", pronouns="he/him")
        equipping.set_bio(gender="male")

        character = equipping.character
        assert (character.age, character.gender, character.pronouns) == ("120", "male", "he/him")

    @pytest.mark.parametrize("name", ["", "   "])
    def test_finish_requires_name(self, equipping: CharacterBuilder, name: str) -> None:
        """Test a nameless character cannot be finished."""
        equipping.set_name(name)

        assert equipping.can_finish is False
        assert equipping.finish() is None
        assert equipping.stage is BuildStage.EQUIPMENT

    def test_finish_returns_copy(self, equipping: CharacterBuilder) -> None:
        """Test the finished character is handed over by value."""
        equipping.set_name("Brom")

        hero = equipping.finish()

        assert hero is not None
        assert hero.name == "Brom"
        assert equipping.stage is BuildStage.COMPLETE
        hero.adjust_hp(-5)
        assert equipping.character.current_hp == 12

    def test_no_changes_after_finish(self, equipping: CharacterBuilder) -> None:
        """Test the build is closed once complete."""
        equipping.set_name("Brom")
        equipping.finish()

        with pytest.raises(InvalidBuildStateError):
            equipping.toggle_weapon("Dagger")

    def test_shop_requires_equipment_stage(self, builder: CharacterBuilder) -> None:
        """Test the shop is closed on step one."""
        with pytest.raises(InvalidBuildStateError):
            builder.toggle_weapon("Dagger")


class TestPortrait:
    """Tests for portrait generation during the build."""

    @pytest.fixture
    def named(self, builder: CharacterBuilder, scripted_rng: ScriptedRandom) -> CharacterBuilder:
        commit(builder, scripted_rng, [15, 14, 13, 12, 10, 8])
        builder.choose_archetype(Archetype.RANGER)
        builder.set_name("Aelar")
        return builder

    def test_portrait_stored(self, named: CharacterBuilder, fake_renderer: FakePortraitRenderer) -> None:
        """Test a rendered image becomes a data URL."""
        assert named.generate_portrait(fake_renderer) is True

        assert named.character.portrait_url is not None
        assert named.character.portrait_url.startswith("data:image/png;base64,")
        assert "Elf Ranger named Aelar" in fake_renderer.prompts[0]

    def test_empty_render_keeps_default(
        self,
        named: CharacterBuilder,
        empty_renderer: FakePortraitRenderer,
    ) -> None:
        """Test no image means no portrait, and the build can still finish."""
        assert named.generate_portrait(empty_renderer) is False

        assert named.character.portrait_url is None
        assert named.character.portrait_or_default == "https://picsum.photos/seed/elf/200/200"
        assert named.finish() is not None

    def test_failed_render(
        self,
        named: CharacterBuilder,
        failing_renderer: FakePortraitRenderer,
    ) -> None:
        """Test a failing portrait collaborator does not block the build."""
        assert named.generate_portrait(failing_renderer) is False
        assert named.can_finish is True

    def test_unexpected_renderer_error(
        self,
        named: CharacterBuilder,
        fake_renderer: FakePortraitRenderer,
    ) -> None:
        """Test any renderer exception is contained and the portrait is kept."""
        named.set_portrait("https://example.org/aelar.png")
        fake_renderer.error = RuntimeError("renderer crashed")

        assert named.generate_portrait(fake_renderer) is False

        assert named.character.portrait_url == "https://example.org/aelar.png"
        assert named.finish().name == "Aelar"

    def test_set_portrait(self, named: CharacterBuilder) -> None:
        """Test a portrait reference can be set and cleared."""
        named.set_portrait("https://example.org/aelar.png")
        assert named.character.portrait_or_default == "https://example.org/aelar.png"

        named.set_portrait(None)
        assert named.character.portrait_url is None
