"""Streaming console output: progress glyphs and the end-of-run summary."""

import os
import re
import sys
from pathlib import Path
from typing import IO, Iterable, Mapping, Optional

from rich.console import Console

from suiterun.core.models import Errored, Failed, OutcomeStatus, RunSummary

MAX_ERROR_FRAMES = 5

PROGRESS_GLYPHS = {
    OutcomeStatus.PASSED: (".", "green"),
    OutcomeStatus.FAILED: ("F", "red"),
    OutcomeStatus.ERROR: ("E", "yellow"),
}

COLOR_TERMS = ("xterm", "color", "ansi", "screen", "tmux", "linux", "vt100", "rxvt", "konsole")

LOCATION_PATTERN = re.compile(r'(?P<path>[^\s"]+\.py)"?(?:, line |:)(?P<line>\d+)')
FRAME_PATTERN = re.compile(r'File "(?P<path>[^"]+)", line (?P<line>\d+)(?:, in (?P<func>\S+))?')
TRACE_HEADER = "Traceback (most recent call last)"


def detect_color(env: Optional[Mapping[str, str]] = None, stream: Optional[IO] = None) -> bool:
    """Decide whether ANSI colour should be used.

    ``NO_COLOR`` and ``TERM=dumb`` switch colour off; ``FORCE_COLOR`` and a
    ``CI`` indicator switch it on; otherwise a colour-capable ``TERM`` or an
    interactive stream is enough.
    """
    env = os.environ if env is None else env

    if "NO_COLOR" in env:
        return False
    term = env.get("TERM", "").lower()
    if term == "dumb":
        return False
    if env.get("FORCE_COLOR") or env.get("CI"):
        return True
    if any(hint in term for hint in COLOR_TERMS):
        return True
    if env.get("COLORTERM"):
        return True

    isatty = getattr(stream, "isatty", None)
    try:
        return bool(isatty and isatty())
    except ValueError:
        return False


def extract_location(trace: str) -> str:
    """Best-effort ``file:line`` of the innermost frame in a trace.

    Falls back to the first non-empty line after any traceback header, or
    an empty string.
    """
    if not trace:
        return ""
    matches = list(LOCATION_PATTERN.finditer(trace))
    if matches:
        last = matches[-1]
        return f"{last.group('path')}:{last.group('line')}"
    for line in trace.splitlines():
        line = line.strip()
        if line and not line.startswith(TRACE_HEADER):
            return line
    return ""


def _short_path(path: str) -> str:
    try:
        return str(Path(path).relative_to(Path.cwd()))
    except ValueError:
        return path


def extract_frames(trace: str, limit: int = MAX_ERROR_FRAMES) -> list[str]:
    """Abbreviated ``path:line in func`` frames, innermost first."""
    frames = []
    for match in FRAME_PATTERN.finditer(trace or ""):
        frame = f"{_short_path(match.group('path'))}:{match.group('line')}"
        if match.group("func"):
            frame += f" in {match.group('func')}"
        frames.append(frame)
    return list(reversed(frames))[:limit]


def _plural(count: int, word: str) -> str:
    return f"{count} {word}" if count == 1 else f"{count} {word}s"


class ConsoleReporter:
    """Writes progress glyphs as tests finish and a summary at the end."""

    def __init__(
        self,
        stream: Optional[IO[str]] = None,
        color: Optional[bool] = None,
        env: Optional[Mapping[str, str]] = None,
    ):
        """Initialize the reporter.

        Args:
            stream: Output stream (default: stdout)
            color: Force colour on or off; detected from the environment when None
            env: Environment used for colour detection (default: os.environ)
        """
        self.stream = stream if stream is not None else sys.stdout
        self.color = detect_color(env, self.stream) if color is None else color
        self.console = Console(
            file=self.stream,
            force_terminal=self.color,
            color_system="standard" if self.color else None,
            no_color=not self.color,
            highlight=False,
            emoji=False,
            markup=False,
            soft_wrap=True,
        )

    def _write(self, text: str = "", style: Optional[str] = None, end: str = "\n") -> None:
        self.console.print(text, style=style if self.color else None, end=end)

    def report_progress(self, status: OutcomeStatus | str) -> None:
        """Write one glyph, without a newline, for a finished test."""
        try:
            status = OutcomeStatus(status)
        except ValueError:
            glyph, style = ".", None
        else:
            glyph, style = PROGRESS_GLYPHS[status]
        self._write(glyph, style=style, end="")
        self.stream.flush()

    def report_warnings(self, warnings: Iterable[object]) -> None:
        """Write discovery warnings, one per line."""
        for warning in warnings:
            self._write(f"Warning: {warning}", style="yellow")

    def report_summary(self, summary: RunSummary) -> None:
        """Write failure and error details followed by run statistics."""
        self._write()
        self._write()

        if summary.failures:
            self._write("Failures:", style="bold red")
            self._write()
            for index, failure in enumerate(summary.failures, start=1):
                self._write_failure(index, failure)

        if summary.errors:
            self._write("Errors:", style="bold yellow")
            self._write()
            for index, error in enumerate(summary.errors, start=1):
                self._write_error(index, error)

        self._write(self.statistics_line(summary), style="green" if summary.successful else "red")
        self._write(f"Finished in {summary.total_wall_seconds:.2f} seconds")
        self.stream.flush()

    def _write_failure(self, index: int, failure: Failed) -> None:
        self._write(f"{index}) {failure.name}", style="red")
        self._write_indented(failure.detail or failure.message)
        location = extract_location(failure.trace)
        if location:
            self._write(f"   at {location}", style="dim")
        self._write()

    def _write_error(self, index: int, error: Errored) -> None:
        self._write(f"{index}) {error.name}", style="yellow")
        self._write_indented(error.message)
        if error.detail:
            self._write_indented(error.detail)
        location = extract_location(error.trace)
        if location:
            self._write(f"   at {location}", style="dim")
        for frame in extract_frames(error.trace):
            self._write(f"     {frame}", style="dim")
        self._write()

    def _write_indented(self, text: str) -> None:
        for line in str(text).splitlines() or [""]:
            self._write(f"   {line}")

    @staticmethod
    def statistics_line(summary: RunSummary) -> str:
        """``"<N> tests, <P> passed[, <F> failures][, <E> errors]"``."""
        parts = [_plural(summary.total, "test"), f"{len(summary.passes)} passed"]
        if summary.failures:
            parts.append(_plural(len(summary.failures), "failure"))
        if summary.errors:
            parts.append(_plural(len(summary.errors), "error"))
        return ", ".join(parts)
