"""Preset selection screen, the TUI's starting point."""

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container
from textual.screen import Screen
from textual.widgets import Button, Footer, Header, Rule, Static

from ..simulator.config import SimConfig
from ..simulator.presets import PresetInfo, PresetRegistry
from .zone_table import ZoneTableScreen


class PresetButton(Button):
    """Button representing a registered simulation preset."""

    def __init__(self, preset_info: PresetInfo, index: int):
        self.preset_info = preset_info
        label = f"[{index}] {preset_info.name}"
        super().__init__(label, id=f"preset-btn-{preset_info.id}")


class PresetSelectScreen(Screen):
    """Starting screen listing every registered preset plus a custom setup."""

    CSS = """
    PresetSelectScreen {
        layout: vertical;
    }

    #preset-list-container {
        height: 1fr;
        padding: 1 2;
    }

    #preset-title {
        text-align: center;
        text-style: bold;
        margin-bottom: 1;
    }

    PresetButton {
        width: 100%;
        margin: 1 0;
    }

    .preset-description {
        color: $text-muted;
        margin-left: 4;
        margin-bottom: 1;
    }

    #custom-button, #zones-button {
        width: 100%;
        margin-top: 1;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("c", "custom", "Custom"),
        Binding("z", "zones", "Zones"),
        Binding("1", "select_1", "Select 1", show=False),
        Binding("2", "select_2", "Select 2", show=False),
        Binding("3", "select_3", "Select 3", show=False),
    ]

    def __init__(self):
        super().__init__()
        self.presets = PresetRegistry.get_all_info()

    def compose(self) -> ComposeResult:
        yield Header()

        with Container(id="preset-list-container"):
            yield Static("Select Simulation Preset:", id="preset-title")

            for i, preset_info in enumerate(self.presets, 1):
                yield PresetButton(preset_info, i)
                yield Static(preset_info.description, classes="preset-description")

            yield Rule()
            yield Button("Custom Setup", id="custom-button", variant="primary")
            yield Button("Zone Table", id="zones-button", variant="default")

        yield Footer()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if isinstance(event.button, PresetButton):
            self._select_preset(event.button.preset_info)
        elif event.button.id == "custom-button":
            self.action_custom()
        elif event.button.id == "zones-button":
            self.action_zones()

    def _select_preset(self, preset_info: PresetInfo) -> None:
        self.app.show_config(PresetRegistry.build(preset_info.id))

    def _select_by_index(self, index: int) -> None:
        """Select a preset by its index (1-based)."""
        if 0 < index <= len(self.presets):
            self._select_preset(self.presets[index - 1])

    def action_select_1(self) -> None:
        self._select_by_index(1)

    def action_select_2(self) -> None:
        self._select_by_index(2)

    def action_select_3(self) -> None:
        self._select_by_index(3)

    def action_custom(self) -> None:
        self.app.show_config(SimConfig())

    def action_zones(self) -> None:
        self.app.push_screen(ZoneTableScreen())

    def action_quit(self) -> None:
        self.app.exit()
