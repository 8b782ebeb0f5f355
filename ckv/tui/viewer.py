"""CKV TUI Viewer - Main Textual app with 3-panel layout."""

from __future__ import annotations

import sys
from pathlib import Path

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.widgets import Footer, Header, Input

from ckv.errors import CKVError
from ckv.reader import CKVReader, first_wins
from ckv.tui.widgets import FileInfoPanel, KeyList, ValuePanel


class CKVViewerApp(App):
    """TUI viewer for .ckv files. Info, keys and value side by side."""

    TITLE = "CKV Viewer"
    CSS = """
    Screen {
        layout: vertical;
    }
    #main-area {
        height: 1fr;
    }
    #search-bar {
        dock: bottom;
        display: none;
        height: 3;
        padding: 0 1;
    }
    #search-bar.visible {
        display: block;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit", show=True),
        Binding("slash", "toggle_search", "Search", show=True),
        Binding("escape", "close_search", "Close search", show=False),
        Binding("j", "next_key", "Next", show=True),
        Binding("k", "prev_key", "Prev", show=True),
    ]

    def __init__(self, ckv_path: str | Path, **kwargs) -> None:
        super().__init__(**kwargs)
        self._ckv_path = Path(ckv_path)
        self._table: dict[str, str] = {}
        self._keys: list[str] = []
        self._all_keys: list[str] = []

    def compose(self) -> ComposeResult:
        # Parse the whole file once; a broken file is shown, not raised
        error = ""
        entries: list[tuple[str, str]] = []
        try:
            with CKVReader.open(self._ckv_path) as reader:
                entries = reader.entries()
        except CKVError as e:
            error = str(e)
        self._table = first_wins(entries)
        self._keys = list(self._table)
        self._all_keys = list(self._keys)

        self.title = f"CKV Viewer - {self._ckv_path.name}"

        yield Header()

        with Horizontal(id="main-area"):
            yield FileInfoPanel(
                file_name=self._ckv_path.name,
                key_count=len(self._table),
                duplicates=len(entries) - len(self._table),
                error=error,
                id="info",
            )
            yield KeyList(keys=self._keys, id="keys")
            yield ValuePanel(id="value")

        yield Input(placeholder="Search keys... (Enter searches values too)", id="search-bar")
        yield Footer()

    def on_mount(self) -> None:
        """Auto-select first key on mount."""
        if self._keys:
            self._show(self._keys[0])
            self.query_one("#keys", KeyList).focus()

    def _show(self, key: str) -> None:
        panel = self.query_one("#value", ValuePanel)
        panel.show_value(key, self._table.get(key, ""))

    def on_key_list_key_selected(self, event: KeyList.KeySelected) -> None:
        self._show(event.key)

    def action_next_key(self) -> None:
        self.query_one("#keys", KeyList).action_cursor_down()

    def action_prev_key(self) -> None:
        self.query_one("#keys", KeyList).action_cursor_up()

    def action_toggle_search(self) -> None:
        """Show/hide the search bar."""
        search = self.query_one("#search-bar", Input)
        search.toggle_class("visible")
        if search.has_class("visible"):
            search.focus()
        else:
            search.value = ""
            self._restore_keys()
            self.query_one("#keys", KeyList).focus()

    def action_close_search(self) -> None:
        search = self.query_one("#search-bar", Input)
        search.remove_class("visible")
        search.value = ""
        self._restore_keys()
        self.query_one("#keys", KeyList).focus()

    def on_input_changed(self, event: Input.Changed) -> None:
        """Filter keys as user types in search bar."""
        if event.input.id != "search-bar":
            return
        query = event.value.lower().strip()
        if not query:
            self._restore_keys()
            return
        self._update_key_list([k for k in self._all_keys if query in k.lower()])

    def on_input_submitted(self, event: Input.Submitted) -> None:
        """Search both key names and values."""
        if event.input.id != "search-bar":
            return
        query = event.value.lower().strip()
        if not query:
            return
        matches = [
            k for k in self._all_keys
            if query in k.lower() or query in self._table[k].lower()
        ]
        self._update_key_list(matches)

    def _update_key_list(self, keys: list[str]) -> None:
        old = self.query_one("#keys", KeyList)
        new_list = KeyList(keys=keys, id="keys")
        old.remove()
        self.query_one("#main-area", Horizontal).mount(new_list, before="#value")
        self._keys = keys
        if keys:
            self._show(keys[0])

    def _restore_keys(self) -> None:
        self._update_key_list(self._all_keys)


def run_viewer(path: str | Path) -> None:
    """Launch the CKV TUI viewer."""
    path = Path(path)
    if not path.is_file():
        print(f"Error: File not found: {path}", file=sys.stderr)
        sys.exit(1)

    app = CKVViewerApp(path)
    app.run()
