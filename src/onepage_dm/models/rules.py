"""One Page 5e rules tables.

Immutable reference data loaded once at import: archetypes, the weapon
and armor shop, the wizard spell list, the monster roster and the random
event table. Entries are frozen Pydantic models; lookups by name raise
RulesLookupError for unknown entries.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

from onepage_dm.core.constants import UNARMORED_BASE_AC
from onepage_dm.core.exceptions import RulesLookupError
from onepage_dm.models.enums import Ability, Archetype


class BonusMode(StrEnum):
    """How an archetype distributes its ability bonus."""

    HIGHER_OF = "higher_of"
    """+bonus to the higher of the listed abilities; ties favor the first."""

    EACH = "each"
    """+bonus to every listed ability."""


# =============================================================================
# Archetypes
# =============================================================================


class ArchetypeInfo(BaseModel):
    """Reference data for one archetype.

    Attributes:
        archetype: The archetype this entry describes.
        label: Display label (race and class).
        hit_die: Hit die size; also the level 1 hit points.
        speed_ft: Movement speed in feet.
        bonus_abilities: Abilities the score increase applies to.
        bonus_mode: Whether the increase goes to the higher or to each.
        bonuses: Rules text shown on the archetype card.
        description: Flavor text.
        image_url: Default portrait.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    archetype: Archetype
    label: str
    hit_die: Annotated[int, Field(ge=4, le=12)]
    speed_ft: Annotated[int, Field(ge=0)]
    bonus_abilities: tuple[Ability, ...]
    bonus_mode: BonusMode
    bonuses: str
    description: str
    image_url: str

    @property
    def speed(self) -> str:
        return f"{self.speed_ft}ft"


ARCHETYPES: dict[Archetype, ArchetypeInfo] = {
    Archetype.FIGHTER: ArchetypeInfo(
        archetype=Archetype.FIGHTER,
        label="Dwarf Fighter",
        hit_die=12,
        speed_ft=25,
        bonus_abilities=(Ability.STR, Ability.CON),
        bonus_mode=BonusMode.HIGHER_OF,
        bonuses="Score Increase: +2 Str or Con. Proficiency: Str & Dex.",
        description="Resilient warriors of the mountains.",
        image_url="https://picsum.photos/seed/dwarf/200/200",
    ),
    Archetype.RANGER: ArchetypeInfo(
        archetype=Archetype.RANGER,
        label="Elf Ranger",
        hit_die=10,
        speed_ft=35,
        bonus_abilities=(Ability.DEX, Ability.CHR),
        bonus_mode=BonusMode.HIGHER_OF,
        bonuses="Score Increase: +2 Dex or Chr. Proficiency: Dex & Wis.",
        description="Swift guardians of the forests.",
        image_url="https://picsum.photos/seed/elf/200/200",
    ),
    Archetype.WIZARD: ArchetypeInfo(
        archetype=Archetype.WIZARD,
        label="Human Wizard",
        hit_die=10,
        speed_ft=30,
        bonus_abilities=(Ability.INT, Ability.WIS),
        bonus_mode=BonusMode.EACH,
        bonuses="Score Increase: +2 to any 2. Proficiency: Int & Wis.",
        description="Versatile masters of the arcane.",
        image_url="https://picsum.photos/seed/wizard/200/200",
    ),
}


# =============================================================================
# Weapons
# =============================================================================


class Weapon(BaseModel):
    """A weapon sold in the shop. Weapons are identified by name."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(min_length=1)
    damage: str = Field(description="Damage dice, e.g. '1d8'")
    cost: Annotated[int, Field(ge=0, description="Price in gold")]


WEAPONS: tuple[Weapon, ...] = (
    Weapon(name="Wand", damage="1d4", cost=3),
    Weapon(name="Sling", damage="1d4", cost=2),
    Weapon(name="Dagger", damage="1d4", cost=2),
    Weapon(name="Staff", damage="1d6", cost=10),
    Weapon(name="Mace", damage="1d6", cost=5),
    Weapon(name="Axe", damage="1d8", cost=10),
    Weapon(name="Hammer", damage="1d8", cost=25),
    Weapon(name="Bow", damage="1d8", cost=50),
    Weapon(name="Crossbow", damage="1d10", cost=75),
    Weapon(name="Sword", damage="2d6", cost=50),
)


# =============================================================================
# Armor
# =============================================================================


class Armor(BaseModel):
    """An armor entry.

    The armor class formula is ``base_ac`` plus the modifier of
    ``ac_ability`` (DEX or WIS), or a flat ``base_ac`` when the armor
    keys to no ability. ``dex_penalty`` is carried for display only and
    is never applied to the computed AC.

    Attributes:
        name: Armor name.
        cost: Listed price in gold (not charged when equipping).
        base_ac: Flat part of the formula.
        ac_ability: Ability whose modifier is added, if any.
        dex_penalty: Listed dexterity penalty (display only).
        description: Formula text shown in the shop.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(min_length=1)
    cost: Annotated[int, Field(ge=0)]
    base_ac: Annotated[int, Field(ge=0)]
    ac_ability: Ability | None = None
    dex_penalty: Annotated[int, Field(le=0)] = 0
    description: str = ""

    def ac_formula(self, dex_mod: int, wis_mod: int) -> int:
        """Evaluate this armor's AC formula.

        Args:
            dex_mod: The wearer's dexterity modifier.
            wis_mod: The wearer's wisdom modifier.

        Returns:
            The resulting armor class.
        """
        if self.ac_ability is Ability.DEX:
            return self.base_ac + dex_mod
        if self.ac_ability is Ability.WIS:
            return self.base_ac + wis_mod
        return self.base_ac


NO_ARMOR = Armor(
    name="No Armor",
    cost=0,
    base_ac=UNARMORED_BASE_AC,
    ac_ability=Ability.DEX,
    description="Just your clothes",
)

ARMORS: tuple[Armor, ...] = (
    NO_ARMOR,
    Armor(
        name="Moon Cloak",
        cost=10,
        base_ac=11,
        ac_ability=Ability.WIS,
        description="11 + Wis Mod",
    ),
    Armor(
        name="Burlap Tunic",
        cost=25,
        base_ac=11,
        ac_ability=Ability.DEX,
        description="11 + Dex Mod",
    ),
    Armor(
        name="Leather Armor",
        cost=50,
        base_ac=12,
        ac_ability=Ability.DEX,
        description="12 + Dex Mod",
    ),
    Armor(
        name="Chainmail Armor",
        cost=75,
        base_ac=14,
        dex_penalty=-1,
        description="AC 14, -1 Dex Penalty",
    ),
    Armor(
        name="Platemail Armor",
        cost=50,
        base_ac=15,
        dex_penalty=-2,
        description="AC 15, -2 Dex Penalty",
    ),
)


# =============================================================================
# Spells
# =============================================================================


class Spell(BaseModel):
    """A wizard spell."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: Annotated[int, Field(ge=1)]
    name: str
    range: str
    effect: str


WIZARD_SPELLS: tuple[Spell, ...] = (
    Spell(id=1, name="Acid Orb", range="60 Feet", effect="1d4 DMG per Lvl"),
    Spell(id=2, name="Necrotic Chill", range="Touch", effect="1d6 DMG per Lvl"),
    Spell(id=3, name="Flame Bolt", range="120 Feet", effect="1d8 DMG per Lvl"),
    Spell(id=4, name="Light as Air", range="Touch", effect="Float 5ft in air per Lvl"),
    Spell(id=5, name="Create Light", range="Touch", effect="Illuminate 10ft per Lvl"),
    Spell(id=6, name="Ease Pain", range="Touch", effect="Heal 1d4 HP per Lvl"),
)


# =============================================================================
# Monsters and Random Events
# =============================================================================


class Monster(BaseModel):
    """A roster monster with its combat line."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str
    attack: str
    ac: Annotated[int, Field(ge=0)]
    hp: Annotated[int, Field(ge=1)]

    @property
    def stat_line(self) -> str:
        return f"AC {self.ac}, HP {self.hp}, Attack {self.attack}"


MONSTERS: tuple[Monster, ...] = (
    Monster(name="Goblin", attack="Dagger +2/1d4", ac=15, hp=7),
    Monster(name="Skeleton", attack="Sword +4/1d6", ac=13, hp=13),
    Monster(name="Zombie", attack="Necro Bite +3/1d6+1", ac=8, hp=22),
    Monster(name="Vampire Bat", attack="Drain +4/2d4", ac=12, hp=22),
    Monster(name="Dire Wolf", attack="Bite +5/2d6", ac=14, hp=37),
    Monster(name="Little Dragon", attack="Fire Blast +4/3d6", ac=17, hp=38),
)


class RandomEvent(BaseModel):
    """A row of the travel random event table."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: Annotated[int, Field(ge=1)]
    event: str
    effect: str


RANDOM_EVENTS: tuple[RandomEvent, ...] = (
    RandomEvent(id=1, event="Sudden Storm", effect="Visibility reduced, ranged attacks disadvantage"),
    RandomEvent(id=2, event="Ambush", effect="Enemies get surprise round"),
    RandomEvent(id=3, event="Trap Triggered", effect="Dex save or take damage"),
    RandomEvent(id=4, event="Mysterious Stranger", effect="Offers aid or trade"),
    RandomEvent(id=5, event="Cave In / Obstacle", effect="Path blocked, must find detour"),
    RandomEvent(id=6, event="Magical Anomaly", effect="Wild magic surge or gravity shift"),
    RandomEvent(id=7, event="Monster Attack", effect="2d4 random monsters appear"),
)


# =============================================================================
# Lookups
# =============================================================================


def get_archetype_info(archetype: Archetype | str) -> ArchetypeInfo:
    """Get reference data for an archetype.

    Args:
        archetype: Archetype enum member or its value ('Fighter').

    Returns:
        The archetype's ArchetypeInfo.

    Raises:
        RulesLookupError: If no such archetype exists.
    """
    try:
        return ARCHETYPES[Archetype(archetype)]
    except ValueError as exc:
        raise RulesLookupError(
            f"Unknown archetype: {archetype}", kind="archetype", name=str(archetype)
        ) from exc


def get_weapon(name: str) -> Weapon:
    """Find a weapon by name (case-insensitive)."""
    for weapon in WEAPONS:
        if weapon.name.lower() == name.lower():
            return weapon
    raise RulesLookupError(f"Unknown weapon: {name}", kind="weapon", name=name)


def get_armor(name: str) -> Armor:
    """Find an armor by name (case-insensitive)."""
    for armor in ARMORS:
        if armor.name.lower() == name.lower():
            return armor
    raise RulesLookupError(f"Unknown armor: {name}", kind="armor", name=name)


def get_spell(key: int | str) -> Spell:
    """Find a spell by id or by name."""
    for spell in WIZARD_SPELLS:
        if spell.id == key or (isinstance(key, str) and spell.name.lower() == key.lower()):
            return spell
    raise RulesLookupError(f"Unknown spell: {key}", kind="spell", name=key)


def get_monster(name: str) -> Monster:
    """Find a monster by name (case-insensitive)."""
    for monster in MONSTERS:
        if monster.name.lower() == name.lower():
            return monster
    raise RulesLookupError(f"Unknown monster: {name}", kind="monster", name=name)


def get_random_event(event_id: int) -> RandomEvent:
    """Find a random event row by id."""
    for event in RANDOM_EVENTS:
        if event.id == event_id:
            return event
    raise RulesLookupError(f"Unknown random event: {event_id}", kind="random_event", name=event_id)


__all__ = [
    "BonusMode",
    "ArchetypeInfo",
    "ARCHETYPES",
    "Weapon",
    "WEAPONS",
    "Armor",
    "NO_ARMOR",
    "ARMORS",
    "Spell",
    "WIZARD_SPELLS",
    "Monster",
    "MONSTERS",
    "RandomEvent",
    "RANDOM_EVENTS",
    "get_archetype_info",
    "get_weapon",
    "get_armor",
    "get_spell",
    "get_monster",
    "get_random_event",
]
