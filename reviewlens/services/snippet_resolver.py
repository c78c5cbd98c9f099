"""Snippet resolution service.

Attaches a short window of source text to every anchored comment thread of a
review. Content is fetched once per distinct (commit, path) in the location
index; fetches run concurrently and a failed fetch only affects the threads
anchored in that file.

Used by presentation layers after loading a review's comment forest:

    resolution = await resolve_snippets(threads, fetch_content)
    snippet = resolution.overlay.snippet_for(thread.hash)
"""

from __future__ import annotations

import asyncio
import inspect
import sys
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from reviewlens.config import ResolverConfig
from reviewlens.domain.comment import CommentThread, TraversalMode, walk_threads
from reviewlens.domain.snippet import Anchor, Snippet, ThreadOverlay
from reviewlens.infrastructure.content_fetch import ContentFetch
from reviewlens.services.location_index import CommentLocationIndex


# ============================================================
# Result Models
# ============================================================


@dataclass(frozen=True)
class FetchFailure:
    """A (commit, path) whose content could not be fetched."""

    commit: str
    path: str
    error: Exception

    @property
    def message(self) -> str:
        return f"Failed to fetch {self.path} at {self.commit}: {self.error}"


@dataclass
class SnippetResolution:
    """Outcome of resolving snippets for one review.

    Attributes:
        overlay: Per-thread annotations, with snippets attached
        snippets: Resolved snippet per anchor
        failures: Content fetches that failed
        out_of_range: Anchors whose line is outside the fetched file
    """

    overlay: ThreadOverlay
    snippets: dict[Anchor, Snippet] = field(default_factory=dict)
    failures: list[FetchFailure] = field(default_factory=list)
    out_of_range: list[Anchor] = field(default_factory=list)

    @property
    def is_complete(self) -> bool:
        """Whether every fetch succeeded."""
        return not self.failures


def print_fetch_failure(failure: FetchFailure) -> None:
    """Default failure reporter: one warning line on stderr."""
    print(f"Warning: {failure.message}", file=sys.stderr)


# ============================================================
# Service
# ============================================================


class SnippetResolverService:
    """Resolves comment anchors to snippets of the surrounding source.

    Args:
        fetch_content: Called as ``fetch_content(commit, path)``; returns the
                       raw file text. May be a coroutine function.
        config: Window size and concurrency settings
        on_failure: Called once for each failed fetch. Defaults to printing a
                    warning to stderr.
    """

    def __init__(
        self,
        fetch_content: ContentFetch,
        config: ResolverConfig | None = None,
        on_failure: Callable[[FetchFailure], None] | None = print_fetch_failure,
    ):
        self.fetch_content = fetch_content
        self.config = config or ResolverConfig()
        self.on_failure = on_failure

    async def resolve(
        self,
        threads: Sequence[CommentThread],
        index: CommentLocationIndex | None = None,
        overlay: ThreadOverlay | None = None,
    ) -> SnippetResolution:
        """Resolve snippets for every anchored top-level thread.

        Args:
            threads: Top-level comment threads of the review
            index: Prebuilt location index (built from threads if None)
            overlay: Overlay to attach snippets to (a new one if None)

        Returns:
            SnippetResolution with the overlay, snippets and any failures
        """
        if index is None:
            index = CommentLocationIndex.build(threads)
        resolution = SnippetResolution(overlay=overlay if overlay is not None else ThreadOverlay())
        if index.is_empty:
            return resolution

        known_hashes = {t.hash for t in walk_threads(threads, TraversalMode.ROOTS_ONLY) if t.hash}
        semaphore = asyncio.Semaphore(self.config.max_concurrent_fetches)

        await asyncio.gather(
            *(
                self._resolve_file(commit, path, index, known_hashes, resolution, semaphore)
                for commit, path in index.pairs()
            )
        )
        return resolution

    # --------------------------------------------------------
    # Private Helpers
    # --------------------------------------------------------

    async def _resolve_file(
        self,
        commit: str,
        path: str,
        index: CommentLocationIndex,
        known_hashes: set[str],
        resolution: SnippetResolution,
        semaphore: asyncio.Semaphore,
    ) -> None:
        try:
            async with semaphore:
                content = await self._fetch(commit, path)
            if not isinstance(content, str):
                raise TypeError(f"Expected file content as str, got {type(content).__name__}")
            content_lines = content.split("\n")
        except Exception as e:
            failure = FetchFailure(commit=commit, path=path, error=e)
            resolution.failures.append(failure)
            if self.on_failure:
                self.on_failure(failure)
            return

        for line in index.lines(commit, path):
            anchor = Anchor(commit=commit, path=path, line=line)
            snippet = Snippet.from_content_lines(
                commit, path, content_lines, line, self.config.context_lines
            )
            if snippet is None:
                resolution.out_of_range.append(anchor)
                continue

            resolution.snippets[anchor] = snippet
            for thread_hash in index.hashes_at(commit, path, line):
                if thread_hash in known_hashes:
                    resolution.overlay.attach_snippet(thread_hash, snippet)

    async def _fetch(self, commit: str, path: str) -> str:
        if inspect.iscoroutinefunction(self.fetch_content):
            return await self.fetch_content(commit, path)
        result = await asyncio.to_thread(self.fetch_content, commit, path)
        if inspect.isawaitable(result):
            return await result
        return result


async def resolve_snippets(
    threads: Sequence[CommentThread],
    fetch_content: ContentFetch,
    config: ResolverConfig | None = None,
    index: CommentLocationIndex | None = None,
    overlay: ThreadOverlay | None = None,
) -> SnippetResolution:
    """Resolve snippets for a comment forest with a one-off resolver."""
    service = SnippetResolverService(fetch_content, config=config)
    return await service.resolve(threads, index=index, overlay=overlay)
