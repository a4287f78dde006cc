"""Zone and subzone definitions."""
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True, slots=True)
class Subzone:
    """One area inside a zone, guarded by a boss."""
    id: int
    name: str
    boss_name: str
    is_zone_boss: bool = False


@dataclass(frozen=True, slots=True)
class Zone:
    """A named zone and its ordered subzones.

    Attributes:
        id: 1-based zone number
        name: Display name
        subzones: Subzones in play order; the last one holds the zone boss
        enemy_prefixes: Name fragments for regular enemies
        enemy_suffixes: Name fragments for regular enemies
    """
    id: int
    name: str
    subzones: tuple[Subzone, ...]
    enemy_prefixes: tuple[str, ...]
    enemy_suffixes: tuple[str, ...]

    @property
    def subzone_count(self) -> int:
        return len(self.subzones)

    def get_subzone(self, subzone_id: int) -> Optional[Subzone]:
        for subzone in self.subzones:
            if subzone.id == subzone_id:
                return subzone
        return None


def _subzones(*entries: tuple[str, str]) -> tuple[Subzone, ...]:
    last = len(entries)
    return tuple(
        Subzone(id=i, name=name, boss_name=boss, is_zone_boss=(i == last))
        for i, (name, boss) in enumerate(entries, start=1)
    )


ZONES: tuple[Zone, ...] = (
    Zone(
        1, "Meadow",
        _subzones(
            ("Sunny Fields", "Field Guardian"),
            ("Overgrown Thicket", "Thicket Horror"),
            ("Mushroom Caves", "Sporeling Queen"),
        ),
        ("Meadow", "Field", "Flower", "Grass", "Sunny"),
        ("Beetle", "Rabbit", "Wasp", "Boar", "Serpent"),
    ),
    Zone(
        2, "Dark Forest",
        _subzones(
            ("Forest Edge", "Alpha Wolf"),
            ("Twisted Woods", "Corrupted Treant"),
            ("Spider's Hollow", "Broodmother Arachne"),
        ),
        ("Forest", "Shadow", "Dark", "Thorn", "Wild"),
        ("Wolf", "Spider", "Bat", "Treant", "Wisp"),
    ),
    Zone(
        3, "Mountain Pass",
        _subzones(
            ("Rocky Foothills", "Bandit King"),
            ("Frozen Peaks", "Ice Giant"),
            ("Dragon's Perch", "Frost Wyrm"),
        ),
        ("Mountain", "Rock", "Stone", "Peak", "Cliff"),
        ("Goat", "Eagle", "Golem", "Yeti", "Harpy"),
    ),
    Zone(
        4, "Ancient Ruins",
        _subzones(
            ("Outer Sanctum", "Skeleton Lord"),
            ("Sunken Temple", "Spectral Guardian"),
            ("Sealed Catacombs", "Lich King's Shade"),
        ),
        ("Ancient", "Ruin", "Temple", "Cursed", "Forgotten"),
        ("Skeleton", "Mummy", "Spirit", "Gargoyle", "Specter"),
    ),
    Zone(
        5, "Volcanic Wastes",
        _subzones(
            ("Scorched Badlands", "Ash Walker Chief"),
            ("Lava Rivers", "Magma Serpent"),
            ("Obsidian Fortress", "Fire Giant Warlord"),
            ("Magma Core", "Infernal Titan"),
        ),
        ("Volcanic", "Flame", "Ash", "Molten", "Ember"),
        ("Salamander", "Phoenix", "Imp", "Drake", "Elemental"),
    ),
    Zone(
        6, "Frozen Tundra",
        _subzones(
            ("Snowbound Plains", "Dire Wolf Alpha"),
            ("Glacier Maze", "Ice Wraith Lord"),
            ("Frozen Lake", "Lake Horror"),
            ("Permafrost Tomb", "The Frozen One"),
        ),
        ("Frozen", "Ice", "Frost", "Snow", "Glacial"),
        ("Mammoth", "Wendigo", "Wraith", "Bear", "Wyrm"),
    ),
    Zone(
        7, "Crystal Caverns",
        _subzones(
            ("Glittering Tunnels", "Gem Golem"),
            ("Prismatic Halls", "Prism Elemental"),
            ("Resonance Depths", "Echo Wraith"),
            ("Heart Crystal", "Crystal Colossus"),
        ),
        ("Crystal", "Gem", "Prismatic", "Shard", "Luminous"),
        ("Construct", "Guardian", "Sprite", "Watcher", "Golem"),
    ),
    Zone(
        8, "Sunken Kingdom",
        _subzones(
            ("Coral Gardens", "Merfolk Warlord"),
            ("Drowned Streets", "Drowned Admiral"),
            ("Abyssal Palace", "Pressure Beast"),
            ("Throne of Tides", "The Drowned King"),
        ),
        ("Sunken", "Deep", "Coral", "Tidal", "Abyssal"),
        ("Kraken", "Shark", "Naga", "Leviathan", "Siren"),
    ),
    Zone(
        9, "Floating Isles",
        _subzones(
            ("Cloud Docks", "Harpy Matriarch"),
            ("Sky Bridges", "Wind Elemental Lord"),
            ("Stormfront", "Storm Drake"),
            ("Eye of the Storm", "Tempest Lord"),
        ),
        ("Sky", "Cloud", "Wind", "Storm", "Floating"),
        ("Griffin", "Djinn", "Sylph", "Roc", "Wyvern"),
    ),
    Zone(
        10, "Storm Citadel",
        _subzones(
            ("Lightning Fields", "Spark Colossus"),
            ("Thunder Halls", "Storm Knight Commander"),
            ("Generator Core", "Core Warden"),
            ("Apex Spire", "The Undying Storm"),
        ),
        ("Thunder", "Lightning", "Tempest", "Storm", "Eternal"),
        ("Titan", "Colossus", "Lord", "King", "Champion"),
    ),
)

_ZONES_BY_ID: dict[int, Zone] = {zone.id: zone for zone in ZONES}


def get_zone(zone_id: int) -> Optional[Zone]:
    return _ZONES_BY_ID.get(zone_id)


def zone_or_last(zone_id: int) -> Zone:
    """Look up a zone, clamping out-of-range ids into the table."""
    zone_id = min(max(zone_id, 1), len(ZONES))
    return _ZONES_BY_ID[zone_id]


# =============================================================================
# Boss defeat outcomes
# =============================================================================

@dataclass(frozen=True, slots=True)
class SubzoneComplete:
    """Advanced to the next subzone of the same zone."""
    new_subzone: int


@dataclass(frozen=True, slots=True)
class ZoneComplete:
    """Cleared a zone and moved into the next one."""
    old_zone: int
    new_zone: int


@dataclass(frozen=True, slots=True)
class ZoneCompleteButGated:
    """Cleared a zone but the next one needs a higher prestige rank."""
    zone_name: str
    required_prestige: int


@dataclass(frozen=True, slots=True)
class StormsEnd:
    """Defeated the final boss; the character stays for endgame farming."""


BossDefeatResult = SubzoneComplete | ZoneComplete | ZoneCompleteButGated | StormsEnd
