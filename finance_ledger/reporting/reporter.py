"""
Stats Output

Stats go either to the console or are appended to a file. Only stats
output is redirected; command responses always go to the console.

If the stats file cannot be written, the block is printed to the
console instead and the user is told why. A report is never lost.
"""

import sys
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional, TextIO, Union

from finance_ledger.logs import get_logger


logger = get_logger(__name__)

RULE_HEAVY = "=" * 32
RULE_LIGHT = "-" * 32


class StatsReporter:
    """
    Owns the stats destination and frames every stats block.

    Each block is: heavy rule, "Stats at <timestamp>", light rule, body
    lines, blank line.
    """

    def __init__(
        self,
        console: Optional[TextIO] = None,
        default_file: Union[str, Path] = "stats.txt",
        to_file: bool = False,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._console = console or sys.stdout
        self._default_file = Path(default_file)
        self._file_path = self._default_file
        self._to_file = to_file
        self._clock = clock

    @property
    def to_file(self) -> bool:
        return self._to_file

    @property
    def default_file(self) -> Path:
        return self._default_file

    @property
    def file_path(self) -> Path:
        return self._file_path

    def describe(self) -> str:
        """Current destination, as shown by `statsout`."""
        if self._to_file:
            return f"file {self._file_path}"
        return "console"

    def use_console(self) -> None:
        self._to_file = False

    def use_file(self, path: Optional[Union[str, Path]] = None) -> None:
        """Switch to appending to ``path`` (the default file when omitted)."""
        self._to_file = True
        self._file_path = Path(path) if path else self._default_file

    def _frame(self, body: list[str]) -> str:
        lines = [
            RULE_HEAVY,
            f"Stats at {self._clock().isoformat()}",
            RULE_LIGHT,
            *body,
            "",
        ]
        return "\n".join(lines) + "\n"

    def emit(self, body: list[str]) -> None:
        """Write one framed stats block to the current destination."""
        block = self._frame(body)

        if not self._to_file:
            self._console.write(block)
            return

        try:
            with open(self._file_path, "a", encoding="utf-8") as handle:
                handle.write(block)
        except OSError as e:
            logger.warning("stats_file_unwritable", path=str(self._file_path), error=str(e))
            self._console.write(f"ERROR: cannot write stats to file: {self._file_path}\n")
            self._console.write(f"Reason: {type(e).__name__}: {e}\n")
            self._console.write("Stats will be printed to console instead.\n")
            self._console.write(block)
