"""
Assemble matched files into one text blob and deliver it.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from enum import Enum
from typing import IO, List, Optional, Tuple

import pyperclip
from colorama import Fore, Style

from .errors import FileReadError, OutputError
from .models import MatchedFile

logger = logging.getLogger(__name__)

FORMAT = """[file name]: {file_name}
[file content begin]
{file_content}
[file content end]
"""


class Destination(str, Enum):
    STDOUT = "stdout"
    CLIPBOARD = "clipboard"


def count_lines(text: str) -> int:
    """Count lines; a trailing newline does not open an extra empty line."""
    if not text:
        return 0
    return text.count("\n") + (0 if text.endswith("\n") else 1)


@dataclass
class Report:
    files: List[MatchedFile]
    text: str
    failed: List[FileReadError] = field(default_factory=list)

    @property
    def file_count(self) -> int:
        return len(self.files)

    @property
    def lines(self) -> int:
        return count_lines(self.text)

    @property
    def words(self) -> int:
        return len(self.text.split())

    @property
    def characters(self) -> int:
        return len(self.text)

    def summary(self, destination: Destination = Destination.CLIPBOARD) -> str:
        verb = "Copied" if destination is Destination.CLIPBOARD else "Wrote"
        return (
            f"{verb} {self.file_count} files to {destination.value} totalling "
            f"{self.lines} lines, {self.words} words and {self.characters} characters."
        )


def render_file(matched: MatchedFile) -> Tuple[str, Optional[FileReadError]]:
    """Render one file block; unreadable files get empty content and an error."""
    logger.debug("Reading file: %s", matched.path)
    error: Optional[FileReadError] = None
    try:
        content = matched.read_bytes().decode("utf-8", errors="replace")
    except OSError as e:
        error = FileReadError(matched.absolute, e)
        logger.warning("%s", error)
        content = ""
    return FORMAT.format(file_name=matched.path, file_content=content), error


def assemble_report(files: List[MatchedFile]) -> Report:
    blocks: List[str] = []
    failed: List[FileReadError] = []
    for matched in files:
        block, error = render_file(matched)
        blocks.append(block)
        if error is not None:
            failed.append(error)
    return Report(files=list(files), text="\n".join(blocks), failed=failed)


def _paint(text: str, style: str, color: bool) -> str:
    return f"{style}{text}{Style.RESET_ALL}" if color else text


def print_summary(
    report: Report,
    destination: Destination = Destination.CLIPBOARD,
    stream: Optional[IO[str]] = None,
    color: Optional[bool] = None,
) -> None:
    """Print the matched file list followed by the totals line."""
    out = stream if stream is not None else sys.stdout
    if color is None:
        color = out.isatty()

    print(_paint("Files matched", Fore.BLUE + Style.BRIGHT, color), file=out)
    if not report.files:
        print(_paint("No files matched.", Fore.RED, color), file=out)
        return
    for matched in report.files:
        marker = "!" if any(err.path == matched.absolute for err in report.failed) else "+"
        print(f"{_paint(marker, Fore.RED, color)} {matched.path}", file=out)

    print(file=out)
    print(_paint(report.summary(destination), Style.BRIGHT, color), file=out)


def write_stdout(text: str, stream: Optional[IO[str]] = None) -> bool:
    out = stream if stream is not None else sys.stdout
    try:
        print(text, file=out)
        out.flush()
    except OSError as e:
        logger.error("Could not write to stdout: %s", e)
        return False
    return True


def write_clipboard(text: str) -> bool:
    try:
        pyperclip.copy(text)
    except pyperclip.PyperclipException as e:
        logger.error("Clipboard error: %s", e)
        return False
    return True


def deliver(report: Report, destination: Destination, stream: Optional[IO[str]] = None) -> None:
    """Send the report text to *destination*; raise OutputError on failure."""
    if destination is Destination.STDOUT:
        if not write_stdout(report.text, stream):
            raise OutputError("Failed to write output to stdout")
        logger.info("%s", report.summary(destination))
        return

    print_summary(report, destination, stream)
    if not write_clipboard(report.text):
        raise OutputError("Failed to set clipboard text")
    logger.debug("Output copied to clipboard.")
