"""Python requirements.txt parsing."""

import re

from packaging.requirements import InvalidRequirement, Requirement

from .models import Manifest, ManifestEntry


class RequirementsParser:
    """Parser for Python requirements.txt files."""

    def __init__(self):
        # Lines that never carry a registry requirement
        self.skip_patterns = [
            r"^\s*#",  # Comment lines
            r"^\s*$",  # Empty lines
            r"^-e\s+",  # Editable installs
            r"^(git|hg|svn|bzr)\+",  # VCS URLs
            r"^https?://",  # Direct URLs
            r"^file://",  # File URLs
            r"^\./",  # Local paths
            r"^-[rcf]\s+",  # Includes, constraints, find links
            r"^--",  # Other pip options
        ]

    def _should_skip_line(self, line: str) -> bool:
        stripped = line.strip()
        if not stripped:
            return True

        return any(re.match(pattern, stripped) for pattern in self.skip_patterns)

    def _parse_requirement_line(self, line: str, line_no: int) -> ManifestEntry | None:
        """Parse a single requirement line using packaging library."""
        line_for_parsing = requirement_part(line).strip()
        if not line_for_parsing:
            return None

        try:
            req = Requirement(line_for_parsing)
        except InvalidRequirement:
            return None

        return ManifestEntry(
            name=req.name,
            line_no=line_no,
            spec=str(req.specifier) if req.specifier else None,
            markers=str(req.marker) if req.marker else None,
            extras=sorted(req.extras) if req.extras else None,
        )

    def parse(self, content: str) -> Manifest:
        """Parse requirements.txt content into Manifest."""
        entries: list[ManifestEntry] = []

        for line_no, line in enumerate(content.splitlines()):
            if self._should_skip_line(line):
                continue

            entry = self._parse_requirement_line(line, line_no)
            if entry:
                entries.append(entry)

        return Manifest(raw=content, entries=entries)


def requirement_part(line: str) -> str:
    """Return a requirement line without its inline comment."""
    return line.split("#", 1)[0]


def parse_requirements(content: str) -> Manifest:
    """Parse requirements.txt content into Manifest.

    Args:
        content: The requirements.txt file content

    Returns:
        Parsed Manifest object
    """
    parser = RequirementsParser()
    return parser.parse(content)
