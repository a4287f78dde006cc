"""TUI for the idle RPG simulator using Textual."""
import asyncio
import logging
from pathlib import Path
from typing import Optional

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, ScrollableContainer
from textual.screen import Screen
from textual.timer import Timer
from textual.widgets import (
    Button,
    Checkbox,
    Footer,
    Header,
    Input,
    Label,
    RichLog,
    Rule,
    Select,
    Static,
)

from .core.events import (
    BossDefeated,
    ChallengeDiscovered,
    DungeonDiscovered,
    EnemyAttack,
    EnemyDied,
    EnemySpawned,
    FishingSpotDiscovered,
    HavenDiscovered,
    ItemDropped,
    LeveledUp,
    PlayerAttack,
    PlayerDied,
    PlayerRecovered,
    PrestigePerformed,
    SubzoneBossDefeated,
    TickEvent,
    ZoneAdvanced,
)
from .core.prestige import required_level_for_rank, tier_name
from .core.tick import Engine
from .core.zones import StormsEnd, ZoneCompleteButGated, zone_or_last
from .models import Rarity
from .screens import PresetSelectScreen, ZoneTableScreen
from .simulator.config import SimConfig
from .simulator.report import SimReport
from .simulator.runner import run_single
from .snapshot import save_snapshot

logger = logging.getLogger(__name__)

RARITY_COLORS = {
    Rarity.COMMON: "white",
    Rarity.MAGIC: "blue",
    Rarity.RARE: "yellow",
    Rarity.EPIC: "magenta",
    Rarity.LEGENDARY: "bold orange1",
}


def format_event(event: TickEvent) -> Optional[str]:
    """Markup line for the live log, or None for events not worth a line."""
    if isinstance(event, EnemySpawned):
        if event.is_boss:
            return f"[bold red]Boss appears: {event.enemy_name}[/bold red]"
        return f"[dim]A {event.enemy_name} appears ({event.zone}-{event.subzone})[/dim]"
    if isinstance(event, PlayerAttack):
        if event.was_crit:
            return f"  You hit for [bold yellow]{event.damage:.0f} (crit!)[/bold yellow]"
        return f"  You hit for {event.damage:.0f}"
    if isinstance(event, EnemyAttack):
        return f"  [red]Enemy hits for {event.damage:.0f}[/red]"
    if isinstance(event, EnemyDied):
        return f"[green]{event.enemy_name} defeated[/green] (+{event.xp_gained} XP)"
    if isinstance(event, SubzoneBossDefeated):
        return f"[green bold]{event.boss_name} defeated![/green bold] (+{event.xp_gained} XP)"
    if isinstance(event, BossDefeated):
        line = f"[green bold]Zone boss {event.boss_name} defeated![/green bold] (+{event.xp_gained} XP)"
        if isinstance(event.result, ZoneCompleteButGated):
            line += (f" [yellow]{event.result.zone_name} needs prestige "
                     f"P{event.result.required_prestige}[/yellow]")
        elif isinstance(event.result, StormsEnd):
            line += " [cyan]The storm is over. Keep farming.[/cyan]"
        return line
    if isinstance(event, PlayerDied):
        source = "boss " if event.was_boss else ""
        return f"[red bold]Slain by {source}{event.enemy_name}[/red bold]"
    if isinstance(event, PlayerRecovered):
        return f"[blue]Recovered to {event.hp:.0f} HP[/blue]"
    if isinstance(event, LeveledUp):
        return f"[green bold]Level up! Now level {event.new_level}[/green bold]"
    if isinstance(event, ItemDropped):
        color = RARITY_COLORS.get(event.item.rarity, "white")
        suffix = " [green](equipped)[/green]" if event.equipped else ""
        return f"Loot: [{color}]{event.item.display_name}[/{color}]{suffix}"
    if isinstance(event, ZoneAdvanced):
        zone = zone_or_last(event.new_zone)
        return f"[cyan bold]Entered zone {event.new_zone}: {zone.name}[/cyan bold]"
    if isinstance(event, PrestigePerformed):
        return f"[magenta bold]Prestiged to P{event.new_rank} ({event.tier_name})[/magenta bold]"
    if isinstance(event, DungeonDiscovered):
        return "[yellow]You discovered a dungeon entrance![/yellow]"
    if isinstance(event, FishingSpotDiscovered):
        return "[yellow]You found a quiet fishing spot[/yellow]"
    if isinstance(event, ChallengeDiscovered):
        return f"[yellow]A challenger appears ({event.pending} waiting)[/yellow]"
    if isinstance(event, HavenDiscovered):
        return "[yellow bold]You discovered the Haven![/yellow bold]"
    return None


class ConfigScreen(Screen):
    """Configuration screen for a watch session or a batch."""

    CSS = """
    ConfigScreen {
        layout: vertical;
    }

    #config-container {
        padding: 1 2;
        height: auto;
    }

    .config-row {
        height: 3;
        margin-bottom: 1;
    }

    .config-label {
        width: 30;
        content-align: left middle;
    }

    .config-select {
        width: 20;
    }

    .config-input-small {
        width: 18;
    }

    #watch-button, #batch-button {
        margin-top: 1;
        width: 100%;
    }

    #title {
        text-align: center;
        text-style: bold;
        color: $accent;
        padding: 1;
    }

    .section-title {
        text-style: bold;
        color: $primary;
        margin-top: 1;
    }
    """

    BINDINGS = [
        Binding("escape", "back", "Back"),
        Binding("w", "watch", "Watch"),
        Binding("b", "batch", "Run Batch"),
        Binding("z", "zones", "Zones"),
    ]

    def __init__(self, config: Optional[SimConfig] = None):
        super().__init__()
        self.config = config or SimConfig()

    def compose(self) -> ComposeResult:
        config = self.config
        yield Header()

        with ScrollableContainer(id="config-container"):
            yield Static("Idle RPG Balance Simulator", id="title")
            yield Rule()

            yield Static("Target Settings", classes="section-title")
            with Horizontal(classes="config-row"):
                yield Label("Target zone:", classes="config-label")
                yield Select(
                    [(f"{i}. {zone_or_last(i).name}", i) for i in range(1, 11)],
                    value=config.target_zone,
                    id="target-zone",
                    classes="config-select",
                    allow_blank=False,
                )
            with Horizontal(classes="config-row"):
                yield Label("Starting prestige:", classes="config-label")
                yield Input(
                    value=str(config.starting_prestige),
                    id="starting-prestige",
                    classes="config-input-small",
                    type="integer",
                )
            with Horizontal(classes="config-row"):
                yield Checkbox("Simulate prestige", value=config.simulate_prestige,
                               id="simulate-prestige")
            with Horizontal(classes="config-row"):
                yield Label("Target prestige:", classes="config-label")
                yield Input(
                    value=str(config.target_prestige),
                    id="target-prestige",
                    classes="config-input-small",
                    type="integer",
                )

            yield Rule()

            yield Static("Batch Settings", classes="section-title")
            with Horizontal(classes="config-row"):
                yield Label("Runs:", classes="config-label")
                yield Input(
                    value=str(config.num_runs),
                    id="num-runs",
                    classes="config-input-small",
                    type="integer",
                )
            with Horizontal(classes="config-row"):
                yield Label("Seed (blank = random):", classes="config-label")
                yield Input(
                    value="" if config.seed is None else str(config.seed),
                    placeholder="random",
                    id="seed",
                    classes="config-input-small",
                    type="integer",
                )
            with Horizontal(classes="config-row"):
                yield Label("Tick limit per run:", classes="config-label")
                yield Input(
                    value=str(config.max_ticks_per_run),
                    id="max-ticks",
                    classes="config-input-small",
                    type="integer",
                )
            with Horizontal(classes="config-row"):
                yield Checkbox("Simulate loot", value=config.simulate_loot, id="simulate-loot")
            with Horizontal(classes="config-row"):
                yield Checkbox("Heal after every kill", value=config.balance.regen_after_kill,
                               id="regen-after-kill")

            yield Rule()

            yield Button("Watch One Character", id="watch-button", variant="success")
            yield Button("Run Batch", id="batch-button", variant="primary")

        yield Footer()

    def _parse_int(self, input_id: str, default: Optional[int]) -> Optional[int]:
        """Parse an integer input, falling back to ``default`` when blank."""
        value = self.query_one(f"#{input_id}", Input).value.strip()
        if not value:
            return default
        return int(value)

    def _collect_config(self) -> Optional[SimConfig]:
        try:
            balance = self.config.balance.with_overrides(
                regen_after_kill=self.query_one("#regen-after-kill", Checkbox).value,
            )
            config = self.config.with_overrides(
                target_zone=self.query_one("#target-zone", Select).value,
                starting_prestige=self._parse_int("starting-prestige", 0),
                simulate_prestige=self.query_one("#simulate-prestige", Checkbox).value,
                target_prestige=self._parse_int("target-prestige", 0),
                num_runs=self._parse_int("num-runs", self.config.num_runs),
                seed=self._parse_int("seed", None),
                max_ticks_per_run=self._parse_int("max-ticks", self.config.max_ticks_per_run),
                simulate_loot=self.query_one("#simulate-loot", Checkbox).value,
                balance=balance,
            )
        except ValueError:
            self.notify("Invalid number", severity="error")
            return None
        return config.validated()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "watch-button":
            self.action_watch()
        elif event.button.id == "batch-button":
            self.action_batch()

    def action_watch(self) -> None:
        config = self._collect_config()
        if config is not None:
            self.app.push_screen(WatchScreen(config))

    def action_batch(self) -> None:
        config = self._collect_config()
        if config is not None:
            self.app.push_screen(BatchScreen(config))

    def action_zones(self) -> None:
        self.app.push_screen(ZoneTableScreen())

    def action_back(self) -> None:
        self.app.pop_screen()


class WatchScreen(Screen):
    """Live view of one character, stepping one tick every 100 ms."""

    CSS = """
    WatchScreen {
        layout: vertical;
    }

    #status-caption {
        height: 3;
        padding: 0 1;
        background: $surface;
        border-bottom: solid $primary;
    }

    .caption-field {
        width: 1fr;
    }

    #log-container {
        height: 1fr;
        border: solid $primary;
        margin: 0 1;
    }

    #controls {
        height: 3;
        padding: 0 1;
        background: $surface;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("space", "pause", "Pause"),
        Binding("p", "prestige", "Prestige"),
        Binding("s", "save", "Save"),
        Binding("r", "restart", "Restart"),
        Binding("escape", "back", "Back to Config"),
    ]

    def __init__(self, config: SimConfig, save_dir: Path = Path("saves")):
        super().__init__()
        self.config = config
        self.save_dir = save_dir
        self.engine = Engine(seed=config.seed, balance=config.balance)
        self.engine.state.progression.prestige_rank = config.starting_prestige
        self.engine.subscribe(self._on_event)
        self.timer: Optional[Timer] = None
        self.paused = False

    def compose(self) -> ComposeResult:
        yield Header()

        with Horizontal(id="status-caption"):
            yield Static("Level 1", id="level-display", classes="caption-field")
            yield Static("Zone 1-1", id="zone-display", classes="caption-field")
            yield Static("P0", id="prestige-display", classes="caption-field")
            yield Static("HP", id="hp-display", classes="caption-field")
            yield Static("Kills 0", id="kills-display", classes="caption-field")

        yield RichLog(id="log-container", highlight=False, markup=True, max_lines=2000)

        with Horizontal(id="controls"):
            yield Button("Back", id="back-button", variant="default")
            yield Button("Pause", id="pause-button", variant="default")
            yield Button("Prestige", id="prestige-button", variant="warning")

        yield Footer()

    def on_mount(self) -> None:
        log = self.query_one("#log-container", RichLog)
        log.write(f"[bold]{self.engine.state.character_name} sets out...[/bold]\n")
        self.timer = self.set_interval(self.config.balance.tick_seconds, self._advance)
        self._update_caption()

    def _advance(self) -> None:
        if self.paused:
            return
        self.engine.step()
        self._update_caption()

    def _on_event(self, event: TickEvent) -> None:
        line = format_event(event)
        if line is not None:
            self.query_one("#log-container", RichLog).write(line)

    def _update_caption(self) -> None:
        state = self.engine.state
        progression = state.progression
        combat = state.combat
        self.query_one("#level-display", Static).update(
            f"Level {progression.character_level} "
            f"({progression.character_xp}/{progression.xp_to_next_level(self.engine.balance)} XP)"
        )
        zone = zone_or_last(progression.current_zone)
        self.query_one("#zone-display", Static).update(
            f"Zone {progression.current_zone}-{progression.current_subzone} {zone.name}"
        )
        self.query_one("#prestige-display", Static).update(
            f"P{progression.prestige_rank} {tier_name(progression.prestige_rank)}"
        )
        hp_text = f"HP {combat.player_current_hp:.0f}/{combat.player_max_hp:.0f}"
        if combat.is_regenerating:
            hp_text += " (recovering)"
        self.query_one("#hp-display", Static).update(hp_text)
        self.query_one("#kills-display", Static).update(
            f"Kills {progression.total_kills} ({progression.kills_in_subzone}/"
            f"{self.engine.balance.kills_for_boss})"
        )

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "back-button":
            self.action_back()
        elif event.button.id == "pause-button":
            self.action_pause()
        elif event.button.id == "prestige-button":
            self.action_prestige()

    def action_pause(self) -> None:
        self.paused = not self.paused
        self.query_one("#pause-button", Button).label = "Resume" if self.paused else "Pause"

    def action_prestige(self) -> None:
        if not self.engine.can_prestige():
            rank = self.engine.state.progression.prestige_rank
            self.notify(
                f"Reach level {required_level_for_rank(rank)} to prestige",
                title="Not yet",
                severity="warning",
            )
            return
        self.engine.prestige()
        self._update_caption()

    def action_save(self) -> None:
        path = self.save_dir / f"{self.engine.state.character_name.lower()}.json"
        try:
            save_snapshot(self.engine.state, path)
        except OSError as exc:
            logger.error("Could not save snapshot: %s", exc)
            self.notify(str(exc), title="Save failed", severity="error")
            return
        self.notify(f"Saved to {path}", timeout=2)

    def action_restart(self) -> None:
        self.engine.reset()
        self.engine.state.progression.prestige_rank = self.config.starting_prestige
        log = self.query_one("#log-container", RichLog)
        log.clear()
        log.write("[bold]Starting over...[/bold]\n")
        self._update_caption()

    def _stop(self) -> None:
        if self.timer is not None:
            self.timer.stop()
            self.timer = None

    def action_back(self) -> None:
        """Go back to config screen."""
        self._stop()
        self.app.pop_screen()

    def action_quit(self) -> None:
        self._stop()
        self.app.exit()


class BatchScreen(Screen):
    """Runs a Monte Carlo batch in the background and shows the report."""

    CSS = """
    BatchScreen {
        layout: vertical;
    }

    #status {
        height: 1;
        padding: 0 1;
    }

    #results-container {
        height: 1fr;
        border: solid $primary;
        margin: 0 1;
    }

    #batch-controls {
        height: 3;
        padding: 0 1;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("j", "save_json", "Save JSON"),
        Binding("escape", "back", "Back to Config"),
    ]

    def __init__(self, config: SimConfig):
        super().__init__()
        self.config = config
        self.running = False
        self.report: Optional[SimReport] = None
        self._task: Optional[asyncio.Task] = None

    def compose(self) -> ComposeResult:
        yield Header()
        yield Static("Status: Starting...", id="status")
        yield RichLog(id="results-container", highlight=False, markup=True)

        with Horizontal(id="batch-controls"):
            yield Button("Back", id="back-button", variant="default")
            yield Button("Save JSON", id="save-button", variant="primary", disabled=True)

        yield Footer()

    async def on_mount(self) -> None:
        """Start the batch when screen is mounted."""
        self.running = True
        self._task = asyncio.create_task(self._run_batch())

    async def _run_batch(self) -> None:
        log = self.query_one("#results-container", RichLog)
        status = self.query_one("#status", Static)
        config = self.config
        total = config.num_runs

        log.write("[bold]Monte Carlo Balance Simulation[/bold]")
        log.write(f"Runs: {total}, target zone: {config.target_zone}, seed: {config.seed}\n")
        await asyncio.sleep(0.01)

        runs = []
        for i in range(total):
            if not self.running:
                break
            runs.append(await asyncio.to_thread(run_single, config, i))
            status.update(f"Status: {i + 1}/{total} runs ({(i + 1) / total:.0%})")
            await asyncio.sleep(0.001)

        if not self.running:
            return
        self.report = SimReport.from_runs(runs, config)
        log.clear()
        for line in self.report.to_text().splitlines():
            if line.lstrip().startswith("!"):
                log.write(f"[yellow]{line}[/yellow]")
            else:
                log.write(line)

        status.update("Status: Complete!")
        self.query_one("#save-button", Button).disabled = False
        self.running = False

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "back-button":
            self.action_back()
        elif event.button.id == "save-button":
            self.action_save_json()

    def action_save_json(self) -> None:
        if self.report is None:
            return
        try:
            path = self.report.save_json(Path("."))
        except OSError as exc:
            self.notify(str(exc), title="Save failed", severity="error")
            return
        self.notify(f"Report saved to {path}", timeout=2)

    def action_back(self) -> None:
        self.running = False
        self.app.pop_screen()

    def action_quit(self) -> None:
        self.running = False
        self.app.exit()


class IdleRPGApp(App):
    """Main TUI application."""

    TITLE = "Idle RPG Simulator"
    CSS = """
    Screen {
        background: $surface;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit", show=True),
    ]

    def on_mount(self) -> None:
        self.push_screen(PresetSelectScreen())

    def show_config(self, config: SimConfig) -> None:
        self.push_screen(ConfigScreen(config))


def main():
    """Entry point for the TUI."""
    app = IdleRPGApp()
    app.run()


if __name__ == "__main__":
    main()
