"""Read-only zone reference screen."""

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import ScrollableContainer
from textual.screen import Screen
from textual.widgets import DataTable, Footer, Header, Rule, Static

from ..config import ZONE_ENEMY_STATS
from ..core.progression import prestige_required_for_zone
from ..core.zones import ZONES


def zone_rows() -> list[tuple[str, ...]]:
    """One row per subzone: zone, subzone, boss, prestige gate, base enemy stats."""
    rows = []
    for zone in ZONES:
        required = prestige_required_for_zone(zone.id)
        hp, _, damage, _, defense, _ = ZONE_ENEMY_STATS.get(zone.id, (0,) * 6)
        for subzone in zone.subzones:
            boss = f"{subzone.boss_name} *" if subzone.is_zone_boss else subzone.boss_name
            rows.append((
                f"{zone.id}. {zone.name}" if subzone.id == 1 else "",
                f"{zone.id}-{subzone.id} {subzone.name}",
                boss,
                f"P{required}" if subzone.id == 1 else "",
                f"{hp}/{damage}/{defense}" if subzone.id == 1 else "",
            ))
    return rows


class ZoneTableScreen(Screen):
    """Zones, subzones, bosses and the prestige rank each zone needs."""

    CSS = """
    ZoneTableScreen {
        layout: vertical;
    }

    #zones-container {
        padding: 1 2;
        height: 1fr;
    }

    #title {
        text-align: center;
        text-style: bold;
        color: $accent;
        padding: 1;
    }

    .hint {
        color: $text-muted;
    }
    """

    BINDINGS = [
        Binding("escape", "back", "Back"),
    ]

    def compose(self) -> ComposeResult:
        yield Header()

        with ScrollableContainer(id="zones-container"):
            yield Static("Zones & Prestige Gates", id="title")
            yield Rule()
            yield DataTable(id="zone-table", zebra_stripes=True)
            yield Static("* zone boss   HP/DMG/DEF = base enemy stats", classes="hint")

        yield Footer()

    def on_mount(self) -> None:
        table = self.query_one("#zone-table", DataTable)
        table.add_columns("Zone", "Subzone", "Boss", "Prestige", "HP/DMG/DEF")
        table.add_rows(zone_rows())

    def action_back(self) -> None:
        self.app.pop_screen()
