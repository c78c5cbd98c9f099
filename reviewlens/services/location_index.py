"""Comment location index.

Groups the anchored top-level comment threads of a review by
commit → path → start line, so that snippet resolution can fetch each
(commit, path) exactly once regardless of how many threads refer to it.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from reviewlens.domain.comment import CommentThread, TraversalMode, walk_threads
from reviewlens.domain.snippet import Anchor


class CommentLocationIndex:
    """Read-only mapping of commit → path → start line → thread hashes.

    Use build() to construct an index from a comment forest. Only top-level
    threads are indexed; threads without a full (commit, path, line) anchor
    are skipped.
    """

    def __init__(self, entries: dict[str, dict[str, dict[int, set[str]]]] | None = None):
        self._entries: dict[str, dict[str, dict[int, frozenset[str]]]] = {
            commit: {
                path: {line: frozenset(hashes) for line, hashes in lines.items()}
                for path, lines in paths.items()
            }
            for commit, paths in (entries or {}).items()
        }

    # --------------------------------------------------------
    # Factory Methods
    # --------------------------------------------------------

    @classmethod
    def build(cls, threads: Iterable[CommentThread]) -> CommentLocationIndex:
        """Index the anchored top-level threads of a comment forest.

        Args:
            threads: Top-level comment threads of a review

        Returns:
            Index of thread hashes by commit, path and start line
        """
        entries: dict[str, dict[str, dict[int, set[str]]]] = {}
        for thread in walk_threads(threads, TraversalMode.ROOTS_ONLY):
            if not thread.is_anchored:
                continue
            location = thread.location
            lines = entries.setdefault(location.commit, {}).setdefault(location.path, {})
            lines.setdefault(location.start_line, set()).add(thread.hash)
        return cls(entries)

    # --------------------------------------------------------
    # Public API
    # --------------------------------------------------------

    def __len__(self) -> int:
        """Number of distinct anchors in the index."""
        return sum(len(lines) for paths in self._entries.values() for lines in paths.values())

    def __iter__(self) -> Iterator[Anchor]:
        for commit, paths in self._entries.items():
            for path, lines in paths.items():
                for line in lines:
                    yield Anchor(commit=commit, path=path, line=line)

    @property
    def is_empty(self) -> bool:
        return not self._entries

    def commits(self) -> list[str]:
        return list(self._entries)

    def paths(self, commit: str) -> list[str]:
        return list(self._entries.get(commit, {}))

    def pairs(self) -> list[tuple[str, str]]:
        """Distinct (commit, path) pairs, in first-seen order."""
        return [(commit, path) for commit, paths in self._entries.items() for path in paths]

    def lines(self, commit: str, path: str) -> list[int]:
        """Indexed start lines for a (commit, path) pair."""
        return list(self._entries.get(commit, {}).get(path, {}))

    def hashes_at(self, commit: str, path: str, line: int) -> frozenset[str]:
        """Hashes of the threads anchored at a location."""
        return self._entries.get(commit, {}).get(path, {}).get(line, frozenset())

    def to_dict(self) -> dict:
        """Convert index to dictionary for JSON serialization."""
        return {
            commit: {
                path: {str(line): sorted(hashes) for line, hashes in lines.items()}
                for path, lines in paths.items()
            }
            for commit, paths in self._entries.items()
        }
