# Copyright 2026 Pramod Kumar Voola
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

# -----------------------------------------------------------------------------
# BUILD LOGGER - CONSOLE + DEBUG FILE
# -----------------------------------------------------------------------------
# Responsibility: The default logging collaborator handed to every stage and
# external tool wrapper.
#
# - Terminal: rich console, warnings/errors only unless verbose
# - Debug file: every message, timestamped, kept when a build fails
# -----------------------------------------------------------------------------

from datetime import datetime, timezone
from pathlib import Path

from rich.console import Console
from rich.markup import escape

console = Console(stderr=True)

DEBUG_FILE_NAME = "arc-components-builder.log"

# Capabilities a custom logger must provide to be used instead of BuildLogger.
REQUIRED_LOGGER_METHODS = ("log", "info", "warn", "error")


def missing_logger_methods(logger: object) -> list[str]:
    """Return the required capabilities the given logger does not provide."""
    return [name for name in REQUIRED_LOGGER_METHODS if not callable(getattr(logger, name, None))]


class BuildLogger:
    """
    Default logger used when the options carry no (usable) custom logger.

    Args:
        debug_file: Where every message is appended. None disables the file.
        verbose: Print info/log/debug messages to the terminal too.
    """

    def __init__(self, debug_file: Path | None = None, verbose: bool = False) -> None:
        self.debug_file = debug_file
        self.verbose = verbose

    def _write(self, level: str, message: str) -> None:
        if self.debug_file is None:
            return
        stamp = datetime.now(timezone.utc).isoformat()
        try:
            self.debug_file.parent.mkdir(parents=True, exist_ok=True)
            with open(self.debug_file, "a", encoding="utf-8") as f:
                f.write(f"{stamp} {level.upper():5} {message}\n")
        except OSError as e:
            # The terminal still gets the message; a broken log never hides it.
            console.print(f"[yellow][LOGGER] Cannot write {self.debug_file}: {escape(str(e))}[/yellow]")

    def _emit(self, level: str, style: str | None, message: str, always: bool = False) -> None:
        self._write(level, message)
        if not (always or self.verbose):
            return
        text = escape(message)
        console.print(f"[{style}]{text}[/{style}]" if style else text)

    def debug(self, *parts: object) -> None:
        self._emit("debug", "dim", _join(parts))

    def log(self, *parts: object) -> None:
        self._emit("log", None, _join(parts))

    def info(self, *parts: object) -> None:
        self._emit("info", "cyan", _join(parts))

    def warn(self, *parts: object) -> None:
        self._emit("warn", "yellow", _join(parts), always=True)

    def error(self, *parts: object) -> None:
        self._emit("error", "red", _join(parts), always=True)


def _join(parts: tuple) -> str:
    return " ".join(str(p) for p in parts)
