"""Interactive jq-style explorer for a JSON document."""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path

from textual.app import App, ComposeResult
from textual.logging import TextualHandler
from textual.widgets import Header, Static

from jqi.config import DEFAULT_PROMPT, DEFAULT_VISIBLE_HEIGHT, SessionConfig
from jqi.errors import IoError, JqiError, JsonParseError
from jqi.query import Document
from jqi.session import Session
from jqi.view import QueryView

logger = logging.getLogger(__name__)


class JqiApp(App):
    """TUI app that hosts one QueryView."""

    CSS = """
    Screen {
        layout: vertical;
    }
    #view {
        height: 1fr;
        border: solid $accent;
    }
    #help-bar {
        height: auto;
        padding: 0 1;
        color: $text-muted;
        background: $surface;
    }
    """

    TITLE = "jqi"
    BINDINGS = []
    ENABLE_COMMAND_PALETTE = False

    def __init__(self, session: Session, source: str = "", **kwargs) -> None:
        super().__init__(**kwargs)
        self.session = session
        self.source = source

    def compose(self) -> ComposeResult:
        yield Header()
        yield QueryView(self.session, id="view")
        yield Static(
            "[b]Enter[/b] commit  [b]Tab[/b] complete  "
            "[b]↑↓[/b] scroll  [b]Esc[/b] quit",
            id="help-bar",
        )

    def on_mount(self) -> None:
        self.sub_title = self.source or "[stdin]"
        self.query_one("#view").focus()

    def on_query_view_quit(self, event: QueryView.Quit) -> None:
        self.exit()


def load_document(file_path: str | None, stdin_text: str = "") -> Document:
    """Load the session document from a file, else from stdin text.

    No file and blank stdin gives a null document.
    """
    if file_path:
        try:
            text = Path(file_path).read_text(encoding="utf-8")
        except OSError as e:
            raise IoError(f"{file_path}: {e.strerror or e}") from e
        source = file_path
    elif stdin_text.strip():
        text = stdin_text
        source = "<stdin>"
    else:
        return Document(None)

    try:
        return Document(json.loads(text))
    except json.JSONDecodeError as e:
        raise JsonParseError(f"{source}: {e}") from e


def _reattach_terminal() -> None:
    """Point fd 0 back at the terminal after reading piped JSON."""
    try:
        fd = os.open("/dev/tty", os.O_RDONLY)
    except OSError as e:
        raise IoError(f"cannot open terminal: {e.strerror or e}") from e
    os.dup2(fd, 0)
    os.close(fd)


def configure_logging() -> logging.Handler:
    """Route jqi debug records through Textual's log.

    Records show up in `textual console` while the app owns the screen and
    never write over it.
    """
    handler = TextualHandler()
    handler.setFormatter(logging.Formatter("%(name)s %(levelname)s %(message)s"))
    package_logger = logging.getLogger("jqi")
    package_logger.setLevel(logging.DEBUG)
    package_logger.addHandler(handler)
    return handler


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jqi",
        description="Explore a JSON document with jq-style filters",
    )
    parser.add_argument(
        "file",
        nargs="?",
        default="",
        help="JSON file to read (default: stdin)",
    )
    parser.add_argument(
        "-p", "--prompt",
        default=DEFAULT_PROMPT,
        help="prompt string",
    )
    parser.add_argument(
        "-H", "--height",
        type=int,
        default=DEFAULT_VISIBLE_HEIGHT,
        help="visible height used when the terminal size is unknown",
    )
    parser.add_argument(
        "--no-cache",
        action="store_true",
        default=False,
        help="re-run every query instead of memoizing results",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        default=False,
        help="send debug logs to the Textual devtools console",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)

    if args.verbose:
        configure_logging()

    try:
        config = SessionConfig(
            prompt=args.prompt,
            visible_height=args.height,
            use_cache=not args.no_cache,
        )
    except ValueError as exc:
        print(f"jqi: {exc}", file=sys.stderr)
        sys.exit(2)

    try:
        stdin_text = ""
        if not args.file and not sys.stdin.isatty():
            stdin_text = sys.stdin.read()
            _reattach_terminal()
        document = load_document(args.file, stdin_text)
    except JqiError as exc:
        print(f"jqi: {exc}", file=sys.stderr)
        sys.exit(1)

    logger.debug("loaded document from %s", args.file or "stdin")
    app = JqiApp(Session(document, config), source=args.file)
    app.run()


if __name__ == "__main__":
    main()
