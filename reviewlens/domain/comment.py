"""Domain models for review comment threads.

Parse-once pattern: The comment forest returned by the review backend is parsed
into frozen, type-safe models at the boundary. Derived display state lives in
a separate ThreadOverlay (see snippet.py) so fetched threads are never mutated.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum


# ============================================================
# Enums
# ============================================================


class ThreadStatus(Enum):
    """Review status of a comment thread.

    Attributes:
        RESOLVED: The thread was marked resolved (LGTM)
        NEEDS_WORK: The thread was marked unresolved (needs more work)
        INFORMATIONAL: The thread carries no resolution (FYI)
    """

    RESOLVED = "lgtm"
    NEEDS_WORK = "nmw"
    INFORMATIONAL = "fyi"

    @classmethod
    def from_resolved(cls, resolved: bool | None) -> ThreadStatus:
        """Derive the status from the optional ``resolved`` flag."""
        if resolved is None:
            return cls.INFORMATIONAL
        return cls.RESOLVED if resolved else cls.NEEDS_WORK


class TraversalMode(Enum):
    """How walk_threads descends into a comment forest."""

    RECURSIVE = "recursive"
    ROOTS_ONLY = "roots_only"


# ============================================================
# Domain Models
# ============================================================


@dataclass(frozen=True)
class CommentRange:
    """Line range a comment refers to."""

    start_line: int | None = None

    @classmethod
    def from_dict(cls, data: dict | None) -> CommentRange | None:
        if data is None:
            return None
        start_line = data.get("startLine")
        if isinstance(start_line, bool) or not isinstance(start_line, int):
            start_line = None
        return cls(start_line=start_line)


@dataclass(frozen=True)
class CommentLocation:
    """Where in the source a comment is anchored."""

    commit: str | None = None
    path: str | None = None
    range: CommentRange | None = None

    @classmethod
    def from_dict(cls, data: dict | None) -> CommentLocation | None:
        if data is None:
            return None
        return cls(
            commit=data.get("commit"),
            path=data.get("path"),
            range=CommentRange.from_dict(data.get("range")),
        )

    @property
    def start_line(self) -> int | None:
        return self.range.start_line if self.range else None

    @property
    def is_anchored(self) -> bool:
        """Whether commit, path and start line are all present."""
        return bool(self.commit) and bool(self.path) and self.start_line is not None


@dataclass(frozen=True)
class Comment:
    """A single review comment."""

    description: str = ""
    timestamp: str = ""
    author: str = ""
    location: CommentLocation | None = None

    @classmethod
    def from_dict(cls, data: dict) -> Comment:
        return cls(
            description=data.get("description", ""),
            timestamp=str(data.get("timestamp", "")),
            author=data.get("author", ""),
            location=CommentLocation.from_dict(data.get("location")),
        )


@dataclass(frozen=True)
class CommentThread:
    """A comment and its replies.

    Use from_dict() to parse raw JSON. ``status`` is computed once at load
    time from the optional ``resolved`` flag. A thread without a hash has no
    identity: it is never indexed and gets no overlay entry.
    """

    hash: str
    comment: Comment
    resolved: bool | None = None
    status: ThreadStatus = ThreadStatus.INFORMATIONAL
    children: tuple[CommentThread, ...] = field(default_factory=tuple)

    # --------------------------------------------------------
    # Factory Methods
    # --------------------------------------------------------

    @classmethod
    def from_dict(cls, data: dict) -> CommentThread:
        """Parse a comment thread and its replies from JSON.

        Args:
            data: Raw thread dictionary with hash, comment, resolved, children

        Returns:
            Typed CommentThread instance
        """
        resolved = data.get("resolved")
        return cls(
            hash=data.get("hash", ""),
            comment=Comment.from_dict(data.get("comment") or {}),
            resolved=resolved,
            status=ThreadStatus.from_resolved(resolved),
            children=tuple(cls.from_dict(child) for child in data.get("children") or []),
        )

    @classmethod
    def list_from_dicts(cls, data: list[dict] | None) -> list[CommentThread]:
        """Parse a comment forest from a JSON list."""
        return [cls.from_dict(item) for item in data or []]

    # --------------------------------------------------------
    # Public API
    # --------------------------------------------------------

    @property
    def location(self) -> CommentLocation | None:
        return self.comment.location

    @property
    def is_anchored(self) -> bool:
        """Whether the thread has a hash and a full (commit, path, line) anchor."""
        return bool(self.hash) and self.location is not None and self.location.is_anchored


@dataclass(frozen=True)
class ReviewDetails:
    """A review revision together with its comment forest."""

    revision: str
    description: str = ""
    comments: tuple[CommentThread, ...] = field(default_factory=tuple)

    @classmethod
    def from_dict(cls, data: dict) -> ReviewDetails:
        """Parse review details as returned by the review backend."""
        request = data.get("request") or {}
        return cls(
            revision=data.get("revision", ""),
            description=request.get("description", ""),
            comments=tuple(CommentThread.list_from_dicts(data.get("comments"))),
        )


# ============================================================
# Traversal
# ============================================================


def walk_threads(
    threads: Iterable[CommentThread],
    mode: TraversalMode = TraversalMode.RECURSIVE,
) -> Iterator[CommentThread]:
    """Yield the threads of a comment forest.

    Args:
        threads: Top-level threads
        mode: RECURSIVE visits every reply in pre-order; ROOTS_ONLY yields
              only the supplied top-level threads

    Yields:
        CommentThread instances in traversal order
    """
    for thread in threads:
        yield thread
        if mode == TraversalMode.RECURSIVE:
            yield from walk_threads(thread.children, mode)
