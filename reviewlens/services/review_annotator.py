"""Review annotator service.

Builds the ThreadOverlay for a freshly loaded comment forest. Every thread,
replies included, starts out visible; the snippet resolver later adds snippets
to the same overlay.
"""

from __future__ import annotations

from collections.abc import Iterable

from reviewlens.domain.comment import CommentThread, ThreadStatus, TraversalMode, walk_threads
from reviewlens.domain.snippet import ThreadOverlay


class ReviewAnnotator:
    """Creates and updates display annotations for comment threads."""

    def __init__(self, overlay: ThreadOverlay | None = None):
        self.overlay = overlay if overlay is not None else ThreadOverlay()

    def annotate(self, threads: Iterable[CommentThread]) -> ThreadOverlay:
        """Mark every thread in the forest as displayed.

        Threads without a hash cannot be keyed and are skipped.

        Args:
            threads: Top-level comment threads

        Returns:
            The overlay, with one entry per thread hash
        """
        for thread in walk_threads(threads, TraversalMode.RECURSIVE):
            if thread.hash:
                self.overlay.set_display(thread.hash, True)
        return self.overlay

    def set_display(self, thread_hash: str, display: bool) -> None:
        """Show or hide a thread without touching the thread itself."""
        self.overlay.set_display(thread_hash, display)

    @staticmethod
    def count_by_status(threads: Iterable[CommentThread]) -> dict[ThreadStatus, int]:
        """Count threads of every status across the whole forest."""
        counts = {status: 0 for status in ThreadStatus}
        for thread in walk_threads(threads, TraversalMode.RECURSIVE):
            counts[thread.status] += 1
        return counts
