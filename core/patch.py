"""Unified-diff parsing and application for text manifests."""

import re
from dataclasses import dataclass, field

from .errors import PatchError

HUNK_HEADER = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@")


@dataclass
class Hunk:
    """A single hunk of a unified diff."""

    old_start: int
    old_count: int
    new_start: int
    new_count: int
    lines: list[tuple[str, str]] = field(default_factory=list)  # (tag, text), tag in " -+"

    @property
    def old_lines(self) -> list[str]:
        return [text for tag, text in self.lines if tag in " -"]

    @property
    def new_lines(self) -> list[str]:
        return [text for tag, text in self.lines if tag in " +"]

    @property
    def complete(self) -> bool:
        return len(self.old_lines) >= self.old_count and len(self.new_lines) >= self.new_count

    @property
    def start_index(self) -> int:
        """0-based index of the first original line the hunk replaces."""
        # With an empty old range, old_start names the line after which to insert
        if self.old_count == 0:
            return self.old_start
        return self.old_start - 1


def parse_patch(patch: str) -> list[Hunk]:
    """Parse the hunks of a unified diff.

    File headers (--- / +++) outside hunks are skipped.

    Raises:
        PatchError: If a hunk is malformed or truncated
    """
    hunks: list[Hunk] = []
    current: Hunk | None = None

    for line in patch.split("\n"):
        match = HUNK_HEADER.match(line)
        if match:
            if current is not None and not current.complete:
                raise PatchError(f"Truncated hunk at line {current.old_start}")
            old_start, old_count, new_start, new_count = match.groups()
            current = Hunk(
                old_start=int(old_start),
                old_count=1 if old_count is None else int(old_count),
                new_start=int(new_start),
                new_count=1 if new_count is None else int(new_count),
            )
            hunks.append(current)
            continue

        if current is None or current.complete:
            # file headers, trailing blank line, or noise between hunks
            continue

        if line.startswith("\\"):
            continue  # "\ No newline at end of file"
        if not line:
            current.lines.append((" ", ""))
        elif line[0] in " -+":
            current.lines.append((line[0], line[1:]))
        else:
            raise PatchError(f"Unexpected line in hunk: {line!r}")

    if current is not None and not current.complete:
        raise PatchError(f"Truncated hunk at line {current.old_start}")
    for hunk in hunks:
        if len(hunk.old_lines) != hunk.old_count or len(hunk.new_lines) != hunk.new_count:
            raise PatchError(f"Hunk at line {hunk.old_start} does not match its header")
    return hunks


def apply_patch(content: str, patch: str) -> str:
    """Apply a unified diff to text.

    Hunks are located by their original line numbers and may appear in any
    order in the patch. Removed and context lines must match, ignoring a
    trailing carriage return on either side.

    Args:
        content: Original text
        patch: Unified diff

    Returns:
        Patched text, keeping the original line endings and trailing newline

    Raises:
        PatchError: If the patch is malformed or does not apply
    """
    hunks = parse_patch(patch)
    if not hunks:
        raise PatchError("Patch contains no hunks")

    # split on "\n" only; a CRLF line keeps its "\r"
    lines = content.split("\n") if content else []
    if content.endswith("\n"):
        lines.pop()
    # an empty file takes the usual newline-terminated form
    trailing_newline = content.endswith("\n") or not content
    eol = "\r" if lines and lines[0].endswith("\r") else ""

    ordered = sorted(hunks, key=lambda h: h.start_index)
    previous_end = 0
    for hunk in ordered:
        start = hunk.start_index
        end = start + hunk.old_count
        if start < previous_end:
            raise PatchError(f"Overlapping hunks at line {hunk.old_start}")
        if end > len(lines):
            raise PatchError(f"Hunk at line {hunk.old_start} is past the end of the file")
        expected = [_strip_cr(line) for line in hunk.old_lines]
        if [_strip_cr(line) for line in lines[start:end]] != expected:
            raise PatchError(f"Hunk at line {hunk.old_start} does not match the file content")
        previous_end = end

    # bottom-up so earlier indexes stay valid
    for hunk in reversed(ordered):
        start = hunk.start_index
        end = start + hunk.old_count
        lines[start:end] = _replacement(hunk, lines[start:end], eol)

    patched = "\n".join(lines)
    if trailing_newline and lines:
        patched += "\n"
    return patched


def _strip_cr(line: str) -> str:
    return line[:-1] if line.endswith("\r") else line


def _replacement(hunk: Hunk, old: list[str], eol: str) -> list[str]:
    """New lines of a hunk; context lines keep their original ending."""
    result = []
    position = 0
    for tag, text in hunk.lines:
        if tag == " ":
            result.append(old[position])
            position += 1
        elif tag == "-":
            position += 1
        else:
            result.append(_strip_cr(text) + eol)
    return result
