"""Executable Textual app that remembers where you left each file."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Dict, List, Optional, Sequence

try:  # pragma: no cover - imported only when demo is run
    from textual.app import App, ComposeResult
    from textual.widgets import ContentSwitcher, Footer, Header, Static, TextArea
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' package to use cursor_tracker.adapters.textual.app"
    ) from exc

from cursor_tracker.errors import PersistenceError
from cursor_tracker.persistence import JsonFileStore
from cursor_tracker.runtime import telemetry
from cursor_tracker.runtime.config import TrackerConfig

from .controller import TextualCursorAdapter, TextualUIHooks


class CursorTrackerApp(App[None]):
    """Small multi-file editor that restores each file's caret on reopen."""

    CSS = """
	Screen {
		layout: vertical;
	}

	#editors {
		height: 1fr;
	}

	#editors TextArea {
		height: 1fr;
	}

	#status-line {
		height: 1;
		background: $surface-darken-1;
		padding: 0 1;
	}
	"""

    BINDINGS = [
        ("ctrl+n", "next_file", "Next file"),
        ("ctrl+p", "previous_file", "Previous file"),
        ("ctrl+s", "save_file", "Save"),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, paths: Sequence[Path], *, config: TrackerConfig) -> None:
        super().__init__()
        self.paths: List[Path] = [path.resolve() for path in paths]
        self.config = config
        self.adapter: TextualCursorAdapter | None = None
        self._index = 0
        self._switcher: ContentSwitcher | None = None
        self._editors: Dict[str, TextArea] = {}
        self._status_widget: Static | None = None

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        self._switcher = ContentSwitcher(id="editors")
        yield self._switcher
        self._status_widget = Static("", id="status-line")
        yield self._status_widget
        yield Footer()

    async def on_mount(self) -> None:
        hooks = TextualUIHooks(update_status=self._update_status)
        self.adapter = TextualCursorAdapter(
            JsonFileStore(self.config.store_path), hooks
        )
        try:
            self.adapter.start()
        except PersistenceError as exc:
            self._update_status(f"cursor store unreadable: {exc}")
        await self._open(self._index)
        self.call_after_refresh(self.adapter.layout_ready)
        self.set_interval(self.config.tick_interval, self.adapter.tick)

    async def on_unmount(self) -> None:
        if self.adapter is None:
            return
        try:
            self.adapter.close()
        except PersistenceError as exc:
            telemetry.record_event(
                "persistence.error",
                level="error",
                data={"reason": str(exc), "stage": "shutdown"},
            )

    def on_text_area_selection_changed(self, event: TextArea.SelectionChanged) -> None:
        if self.adapter is None:
            return
        # each document has its own TextArea, so the sender names the document
        key = self.adapter.widget_selection_changed(
            event.text_area, event.selection.end
        )
        if key is not None:
            row, col = event.selection.end
            self._update_status(f"{Path(key).name}  {row + 1}:{col + 1}")

    async def action_next_file(self) -> None:
        await self._open((self._index + 1) % max(len(self.paths), 1))

    async def action_previous_file(self) -> None:
        await self._open((self._index - 1) % max(len(self.paths), 1))

    def action_save_file(self) -> None:
        key = self._current_key()
        editor = self._editors.get(key) if key is not None else None
        if editor is None:
            return
        path = self.paths[self._index]
        path.write_text(editor.text, encoding="utf-8")
        self._update_status(f"wrote {path.name}")

    def _current_key(self) -> Optional[str]:
        if not self.paths:
            return None
        return str(self.paths[self._index])

    async def _open(self, index: int) -> None:
        if self.adapter is None or self._switcher is None or not self.paths:
            return
        self._index = index
        path = self.paths[index]
        key = str(path)
        editor = self._editors.get(key)
        if editor is None:
            try:
                text = path.read_text(encoding="utf-8")
            except FileNotFoundError:
                text = ""
            editor = TextArea(text, id=f"editor-{index}")
            self._editors[key] = editor
            await self._switcher.mount(editor)
        self._switcher.current = editor.id
        self.sub_title = path.name
        self.adapter.open_document(key, editor)
        editor.focus()

    def _update_status(self, status: str) -> None:
        if self._status_widget:
            self._status_widget.update(status)


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Edit files and have each caret restored on reopen."
    )
    parser.add_argument("files", nargs="+", type=Path, help="Files to open")
    parser.add_argument(
        "--store",
        type=Path,
        default=None,
        help="Cursor store file (default: CURSOR_TRACKER_STORE or the user config dir)",
    )
    parser.add_argument(
        "--log-preset",
        choices=("development", "quiet"),
        default="quiet",
        help="telelog preset; 'quiet' keeps the terminal free for Textual",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    telemetry.configure(preset=args.log_preset)
    config = TrackerConfig.from_env()
    if args.store is not None:
        config.store_path = args.store.expanduser()
    CursorTrackerApp(args.files, config=config).run()


if __name__ == "__main__":  # pragma: no cover - manual demo
    main()
