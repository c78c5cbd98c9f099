"""Domain models for unified diff parsing.

Parse-once pattern: Raw diff text is parsed into type-safe models at the boundary.
Each file section of a unified diff becomes a FileDiff whose lines carry
absolute left-hand and right-hand line numbers, reconstructed from the hunk
headers using only the running cursor state.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from reviewlens.errors import MalformedDiffHeaderError


# ============================================================
# Constants
# ============================================================

FILE_SECTION_SEPARATOR = "\ndiff --git "

# Cursor value before the first hunk of a file
FIRST_LINE_NUMBER = 1


# ============================================================
# Domain Models
# ============================================================


class DiffLineStatus(Enum):
    """Status of a line in a file diff."""

    CONTEXT = "context"
    ADDED = "added"
    REMOVED = "removed"
    OMITTED = "omitted"


@dataclass(frozen=True)
class DiffLine:
    """A single displayable line of a file diff.

    Attributes:
        lhs_number: Line number in the old file. For added lines this is the
            number before the insertion point (not advanced).
        rhs_number: Line number in the new file. For removed lines this is the
            number before the removal point (not advanced).
        status: Whether this is a context, added, removed or omitted line
        text: Line content without the diff prefix, or a gap description for
            omitted lines
    """

    lhs_number: int
    rhs_number: int
    status: DiffLineStatus
    text: str

    @property
    def is_changed(self) -> bool:
        """Check if this line represents a change (added or removed)."""
        return self.status in (DiffLineStatus.ADDED, DiffLineStatus.REMOVED)

    def to_dict(self) -> dict:
        """Convert line to dictionary for JSON serialization."""
        return {
            "lhsNumber": self.lhs_number,
            "rhsNumber": self.rhs_number,
            "status": self.status.value,
            "text": self.text,
        }


@dataclass(frozen=True)
class HunkHeader:
    """The line ranges from a ``@@ -L,C +L2,C2 @@`` hunk header."""

    old_start: int
    old_length: int
    new_start: int
    new_length: int

    # --------------------------------------------------------
    # Factory Methods
    # --------------------------------------------------------

    @classmethod
    def from_line(cls, line: str) -> HunkHeader:
        """Parse a hunk header line.

        Args:
            line: Header line, e.g. "@@ -33,7 +33,8 @@ class Foo:"

        Returns:
            Parsed HunkHeader

        Raises:
            MalformedDiffHeaderError: If either range cannot be parsed
        """
        body = line[3:] if line.startswith("@@ ") else line
        end = body.find(" @@")
        if end < 0:
            raise MalformedDiffHeaderError(line, "missing closing '@@'")

        ranges = body[:end].split()
        if len(ranges) != 2:
            raise MalformedDiffHeaderError(line, "expected '-start,count +start,count'")

        old_range, new_range = ranges
        if not old_range.startswith("-"):
            raise MalformedDiffHeaderError(line, "missing '-' range")
        if not new_range.startswith("+"):
            raise MalformedDiffHeaderError(line, "missing '+' range")

        old_start, old_length = cls._parse_range(line, old_range[1:])
        new_start, new_length = cls._parse_range(line, new_range[1:])
        return cls(
            old_start=old_start,
            old_length=old_length,
            new_start=new_start,
            new_length=new_length,
        )

    @staticmethod
    def _parse_range(line: str, value: str) -> tuple[int, int]:
        if "," not in value:
            raise MalformedDiffHeaderError(line, f"missing comma in range {value!r}")
        start, length = value.split(",", 1)
        if not start.isdigit():
            raise MalformedDiffHeaderError(line, f"non-numeric start {start!r}")
        if not length.isdigit():
            raise MalformedDiffHeaderError(line, f"non-numeric count {length!r}")
        return int(start), int(length)


@dataclass
class FileDiff:
    """The parsed diff of a single file.

    A FileDiff with ``error`` set could not be parsed; it carries no lines and
    is shown as an error indicator for that file only.
    """

    description: str
    id: str
    lines: list[DiffLine] = field(default_factory=list)
    display: bool = True
    error: str | None = None

    # --------------------------------------------------------
    # Factory Methods
    # --------------------------------------------------------

    @classmethod
    def from_section(cls, section: str, ordinal: int, strict: bool = True) -> FileDiff:
        """Parse one ``diff --git`` section into a FileDiff.

        Args:
            section: Text of a single file section
            ordinal: Position of the section in the diff, used for the id
            strict: Raise on a malformed hunk header. When False, return a
                    FileDiff with ``error`` set and no lines instead.

        Returns:
            Parsed FileDiff

        Raises:
            MalformedDiffHeaderError: If strict and a hunk header cannot be parsed
        """
        parser = _SectionParser(section)
        try:
            parser.run()
        except MalformedDiffHeaderError as e:
            if strict:
                raise
            # Names seen before the failing header still describe the file
            return cls(description=parser.description, id=file_id(ordinal), error=str(e))
        return cls(description=parser.description, id=file_id(ordinal), lines=parser.lines)

    def to_dict(self) -> dict:
        """Convert file diff to dictionary for JSON serialization."""
        data = {
            "description": self.description,
            "id": self.id,
            "diffLines": [line.to_dict() for line in self.lines],
            "display": self.display,
        }
        if self.error is not None:
            data["error"] = self.error
        return data

    # --------------------------------------------------------
    # Public API
    # --------------------------------------------------------

    @property
    def is_valid(self) -> bool:
        """Whether the section parsed without errors."""
        return self.error is None

    def lines_with_status(self, status: DiffLineStatus) -> list[DiffLine]:
        """Get the lines with the given status, in order."""
        return [line for line in self.lines if line.status == status]

    def old_text(self) -> list[str]:
        """Get the left-hand file content visible in this diff."""
        return [
            line.text
            for line in self.lines
            if line.status in (DiffLineStatus.CONTEXT, DiffLineStatus.REMOVED)
        ]

    def new_text(self) -> list[str]:
        """Get the right-hand file content visible in this diff."""
        return [
            line.text
            for line in self.lines
            if line.status in (DiffLineStatus.CONTEXT, DiffLineStatus.ADDED)
        ]


@dataclass
class UnifiedDiff:
    """A complete unified diff split into per-file views.

    Use from_diff_content() to parse raw diff output.
    """

    raw_content: str
    files: list[FileDiff] = field(default_factory=list)

    @classmethod
    def from_diff_content(cls, diff_content: str) -> UnifiedDiff:
        """Parse raw diff content into per-file views."""
        return cls(raw_content=diff_content, files=parse_unified_diff(diff_content))

    def to_dict(self) -> dict:
        """Convert diff to dictionary for JSON serialization."""
        return {"files": [f.to_dict() for f in self.files]}

    @property
    def is_empty(self) -> bool:
        """Check if the diff contains no files."""
        return not self.files

    @property
    def errors(self) -> list[FileDiff]:
        """Get the file sections that failed to parse."""
        return [f for f in self.files if not f.is_valid]

    def get_file(self, file_id: str) -> FileDiff | None:
        """Look up a file view by its id."""
        for file_diff in self.files:
            if file_diff.id == file_id:
                return file_diff
        return None


# ============================================================
# Parsing
# ============================================================


class _SectionParser:
    """Cursor state for scanning the lines of one file section."""

    def __init__(self, section: str):
        self.section_lines = section.split("\n")
        names = self.section_lines[0].split()
        self.rhs_name = names[-1] if names else ""
        self.lhs_name = names[-2] if len(names) > 1 else ""
        self.lhs_number = FIRST_LINE_NUMBER
        self.rhs_number = FIRST_LINE_NUMBER
        self.lines: list[DiffLine] = []

    @property
    def description(self) -> str:
        return describe_file_change(self.lhs_name, self.rhs_name)

    def run(self) -> None:
        for text in self.section_lines:
            if text.startswith("--- "):
                self.lhs_name = text[4:]
            elif text.startswith("+++ "):
                self.rhs_name = text[4:]
            elif text.startswith("@@ "):
                self._start_hunk(HunkHeader.from_line(text))
            elif text.startswith("-"):
                self._emit(DiffLineStatus.REMOVED, text[1:])
                self.lhs_number += 1
            elif text.startswith("+"):
                self._emit(DiffLineStatus.ADDED, text[1:])
                self.rhs_number += 1
            elif text.startswith(" "):
                self._emit(DiffLineStatus.CONTEXT, text[1:])
                self.lhs_number += 1
                self.rhs_number += 1

    def _start_hunk(self, header: HunkHeader) -> None:
        omitted_count = header.old_start - self.lhs_number
        self.lhs_number = header.old_start
        self.rhs_number = header.new_start
        if omitted_count > 0:
            self._emit(DiffLineStatus.OMITTED, f"Skipped {omitted_count} unchanged lines")

    def _emit(self, status: DiffLineStatus, text: str) -> None:
        self.lines.append(DiffLine(self.lhs_number, self.rhs_number, status, text))


def parse_unified_diff(diff_content: str) -> list[FileDiff]:
    """Parse unified diff text into an ordered list of file views.

    A section with a malformed hunk header is returned as a FileDiff with
    ``error`` set; the remaining sections are parsed normally.

    Args:
        diff_content: Raw output from git diff

    Returns:
        One FileDiff per ``diff --git`` section, in order
    """
    if not diff_content.strip():
        return []

    return [
        FileDiff.from_section(section, ordinal, strict=False)
        for ordinal, section in enumerate(diff_content.split(FILE_SECTION_SEPARATOR))
    ]


def parse_file_diff(section: str, ordinal: int = 0) -> FileDiff:
    """Parse a single file section, raising on malformed hunk headers."""
    return FileDiff.from_section(section, ordinal)


def describe_file_change(lhs_name: str, rhs_name: str) -> str:
    """Describe a file change from its left and right file names.

    Args:
        lhs_name: Left-hand name, e.g. "a/src/app.py" or "/dev/null"
        rhs_name: Right-hand name, e.g. "b/src/app.py" or "/dev/null"

    Returns:
        "Modified x", "Renamed x to y", "Deleted x" or "Added y"
    """
    if lhs_name.startswith("a/") and rhs_name.startswith("b/"):
        lhs_path = lhs_name[2:]
        rhs_path = rhs_name[2:]
        if lhs_path == rhs_path:
            return f"Modified {lhs_path}"
        return f"Renamed {lhs_path} to {rhs_path}"
    elif lhs_name.startswith("a/"):
        return f"Deleted {lhs_name[2:]}"
    else:
        return f"Added {_strip_prefix(rhs_name, 'b/')}"


def file_id(ordinal: int) -> str:
    """Build the id of the file view at the given parse position."""
    return f"file{ordinal}"


def _strip_prefix(value: str, prefix: str) -> str:
    return value[len(prefix):] if value.startswith(prefix) else value
