"""Domain models for source snippets attached to comment threads.

Snippets are immutable and shared by reference between every thread anchored
at the same (commit, path, line). Per-thread derived state is kept in a
ThreadOverlay keyed by thread hash.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace


# ============================================================
# Domain Models
# ============================================================


@dataclass(frozen=True)
class Anchor:
    """A (commit, path, line) location in source text."""

    commit: str
    path: str
    line: int


@dataclass(frozen=True)
class SnippetLine:
    """One numbered line of source text."""

    line_number: int
    contents: str

    def to_dict(self) -> dict:
        return {"lineNumber": self.line_number, "contents": self.contents}


@dataclass(frozen=True)
class Snippet:
    """A short run of source lines ending at a comment's anchor line."""

    commit: str
    path: str
    lines: tuple[SnippetLine, ...] = field(default_factory=tuple)

    # --------------------------------------------------------
    # Factory Methods
    # --------------------------------------------------------

    @classmethod
    def from_content_lines(
        cls,
        commit: str,
        path: str,
        content_lines: list[str],
        start_line: int,
        context_lines: int,
    ) -> Snippet | None:
        """Build the context window for a 1-based anchor line.

        The window holds up to ``context_lines`` lines ending at the anchor
        line, clipped at the start of the file.

        Args:
            commit: Revision the content was read at
            path: File path within the repository
            content_lines: File content split on newlines
            start_line: 1-based anchor line
            context_lines: Maximum number of lines in the window

        Returns:
            Snippet, or None if the line is outside the file
        """
        if start_line < 1 or start_line > len(content_lines):
            return None

        start = max(0, start_line - context_lines)
        end = max(0, start_line - 1)
        return cls(
            commit=commit,
            path=path,
            lines=tuple(
                SnippetLine(line_number=i + 1, contents=content_lines[i])
                for i in range(start, end + 1)
            ),
        )

    def to_dict(self) -> dict:
        return {
            "commit": self.commit,
            "path": self.path,
            "lines": [line.to_dict() for line in self.lines],
        }

    @property
    def line_numbers(self) -> list[int]:
        return [line.line_number for line in self.lines]


@dataclass(frozen=True)
class ThreadAnnotations:
    """Derived, display-only state for one comment thread."""

    display: bool = True
    snippet: Snippet | None = None


class ThreadOverlay:
    """Derived per-thread state keyed by thread hash.

    The overlay is the only place the resolver and annotator write to; the
    fetched CommentThread objects stay untouched.
    """

    def __init__(self):
        self._annotations: dict[str, ThreadAnnotations] = {}

    def __contains__(self, thread_hash: str) -> bool:
        return thread_hash in self._annotations

    def __len__(self) -> int:
        return len(self._annotations)

    def get(self, thread_hash: str) -> ThreadAnnotations:
        """Get the annotations for a thread, or the defaults if none recorded."""
        return self._annotations.get(thread_hash, ThreadAnnotations())

    def snippet_for(self, thread_hash: str) -> Snippet | None:
        return self.get(thread_hash).snippet

    def set_display(self, thread_hash: str, display: bool) -> None:
        self._annotations[thread_hash] = replace(self.get(thread_hash), display=display)

    def attach_snippet(self, thread_hash: str, snippet: Snippet) -> None:
        self._annotations[thread_hash] = replace(self.get(thread_hash), snippet=snippet)

    def hashes(self) -> list[str]:
        return list(self._annotations)

    def to_dict(self) -> dict:
        """Convert overlay to dictionary for JSON serialization."""
        result = {}
        for thread_hash, annotations in self._annotations.items():
            entry: dict = {"display": annotations.display}
            if annotations.snippet is not None:
                entry["snippet"] = annotations.snippet.to_dict()
            result[thread_hash] = entry
        return result
