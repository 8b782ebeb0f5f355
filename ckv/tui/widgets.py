"""CKV TUI Widgets - Custom panels for the CKV viewer."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.message import Message
from textual.reactive import reactive
from textual.widgets import Label, ListItem, ListView, Static


class FileInfoPanel(Static):
    """Sidebar panel showing file facts and parse status."""

    DEFAULT_CSS = """
    FileInfoPanel {
        width: 32;
        border: solid $accent;
        padding: 1;
        overflow-y: auto;
    }
    FileInfoPanel .info-title {
        text-style: bold;
        color: $text;
        margin-bottom: 1;
    }
    FileInfoPanel .info-key {
        color: $text-muted;
    }
    FileInfoPanel .info-val {
        color: $text;
    }
    FileInfoPanel .status-valid {
        color: $success;
        text-style: bold;
    }
    FileInfoPanel .status-invalid {
        color: $error;
        text-style: bold;
    }
    """

    def __init__(
        self,
        file_name: str,
        key_count: int,
        duplicates: int,
        error: str = "",
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self._file_name = file_name
        self._key_count = key_count
        self._duplicates = duplicates
        self._error = error

    def compose(self) -> ComposeResult:
        name = self._file_name
        display = name if len(name) <= 28 else "..." + name[-25:]
        yield Label(display, classes="info-title")

        if self._error:
            yield Label("Parse: INVALID", classes="status-invalid")
            yield Label("")
            yield Label(self._error, classes="info-val")
            return

        yield Label("Parse: VALID", classes="status-valid")
        yield Label("")  # spacer
        yield Label("keys:", classes="info-key")
        yield Label(f"  {self._key_count}", classes="info-val")
        yield Label("duplicates ignored:", classes="info-key")
        yield Label(f"  {self._duplicates}", classes="info-val")


class KeyList(ListView):
    """List of keys in the CKV file. Supports keyboard navigation."""

    DEFAULT_CSS = """
    KeyList {
        width: 28;
        border: solid $accent;
    }
    KeyList > ListItem {
        padding: 0 1;
    }
    KeyList > ListItem.--highlight {
        background: $accent;
    }
    """

    class KeySelected(Message):
        """Fired when a key is selected."""

        def __init__(self, key: str, key_index: int) -> None:
            self.key = key
            self.key_index = key_index
            super().__init__()

    def __init__(self, keys: list[str], **kwargs) -> None:
        self._keys = keys
        super().__init__(**kwargs)

    def compose(self) -> ComposeResult:
        for key in self._keys:
            yield ListItem(Label(key))

    def _post_current(self) -> None:
        idx = self.index or 0
        if 0 <= idx < len(self._keys):
            self.post_message(self.KeySelected(self._keys[idx], idx))

    def on_list_view_selected(self, event: ListView.Selected) -> None:
        self._post_current()

    def on_list_view_highlighted(self, event: ListView.Highlighted) -> None:
        self._post_current()


class ValuePanel(Static):
    """Shows one value the way it reads after folding."""

    DEFAULT_CSS = """
    ValuePanel {
        border: solid $accent;
        padding: 1;
        overflow: auto;
    }
    ValuePanel .value-title {
        text-style: bold;
        color: $accent;
        margin-bottom: 1;
    }
    ValuePanel .value-body {
        color: $text;
    }
    ValuePanel .value-lines {
        color: $text-muted;
        margin-top: 1;
    }
    """

    current_key = reactive("")

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._title_widget: Label | None = None
        self._body_widget: Static | None = None
        self._lines_widget: Label | None = None

    def compose(self) -> ComposeResult:
        self._title_widget = Label("Select a key", classes="value-title")
        self._body_widget = Static("", classes="value-body", markup=False)
        self._lines_widget = Label("", classes="value-lines")
        yield self._title_widget
        yield self._body_widget
        yield self._lines_widget

    def show_value(self, key: str, value: str) -> None:
        self.current_key = key
        if self._title_widget:
            self._title_widget.update(f"--- {key} ---")
        if self._body_widget:
            self._body_widget.update(value if value else "(empty)")
        if self._lines_widget:
            count = value.count("\n") + 1
            self._lines_widget.update(f"{count} line{'s' if count != 1 else ''}")
        self.scroll_home()
