"""Tests for SnippetResolverService.

Tests cover:
- Context windows (mid-file, first line, out of range, line zero)
- One fetch per distinct (commit, path)
- Snippets shared by reference between threads on the same line
- Partial failure: a failed fetch leaves other files resolved
- Sync and async fetch collaborators
- Concurrency bound and overlay handling
"""

from __future__ import annotations

import asyncio
import io
import unittest
from unittest.mock import patch

from reviewlens.config import ResolverConfig
from reviewlens.domain.comment import CommentThread
from reviewlens.domain.snippet import Anchor, Snippet, SnippetLine, ThreadOverlay
from reviewlens.services.location_index import CommentLocationIndex
from reviewlens.services.snippet_resolver import (
    FetchFailure,
    SnippetResolverService,
    resolve_snippets,
)


# ============================================================
# Test Fixtures
# ============================================================


def make_thread(thread_hash, path="foo.txt", line=10, commit="abc123", children=None):
    """Create an anchored CommentThread."""
    return CommentThread.from_dict(
        {
            "hash": thread_hash,
            "comment": {
                "description": "",
                "location": {"commit": commit, "path": path, "range": {"startLine": line}},
            },
            "children": children or [],
        }
    )


def numbered_content(count: int) -> str:
    return "\n".join(f"line {i}" for i in range(1, count + 1))


class FakeRepository:
    """Async content fetch backed by a dict of (commit, path) -> content."""

    def __init__(self, files: dict[tuple[str, str], str], failing: set[tuple[str, str]] | None = None):
        self.files = files
        self.failing = failing or set()
        self.calls: list[tuple[str, str]] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def fetch_content(self, commit: str, path: str) -> str:
        self.calls.append((commit, path))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(0)
            if (commit, path) in self.failing:
                raise RuntimeError(f"cannot read {path}")
            return self.files[(commit, path)]
        finally:
            self.in_flight -= 1


def resolve(threads, repo, **kwargs):
    failures: list[FetchFailure] = []
    service = SnippetResolverService(repo.fetch_content, on_failure=failures.append, **kwargs)
    resolution = asyncio.run(service.resolve(threads))
    return resolution, failures


# ============================================================
# Tests
# ============================================================


class TestSnippetWindow(unittest.TestCase):
    """Tests for the window computed around an anchor line."""

    def setUp(self):
        self.repo = FakeRepository({("abc123", "foo.txt"): numbered_content(20)})

    def test_window_ends_at_anchor_line(self):
        resolution, _ = resolve([make_thread("h1", line=10)], self.repo)
        snippet = resolution.overlay.snippet_for("h1")

        self.assertEqual(snippet.commit, "abc123")
        self.assertEqual(snippet.path, "foo.txt")
        self.assertEqual(snippet.line_numbers, [6, 7, 8, 9, 10])
        self.assertEqual(
            [line.contents for line in snippet.lines],
            ["line 6", "line 7", "line 8", "line 9", "line 10"],
        )

    def test_first_line_yields_single_line(self):
        resolution, _ = resolve([make_thread("h1", line=1)], self.repo)
        snippet = resolution.overlay.snippet_for("h1")

        self.assertEqual(snippet.lines, (SnippetLine(line_number=1, contents="line 1"),))

    def test_window_is_clipped_at_file_start(self):
        resolution, _ = resolve([make_thread("h1", line=3)], self.repo)
        self.assertEqual(resolution.overlay.snippet_for("h1").line_numbers, [1, 2, 3])

    def test_last_line_is_in_range(self):
        resolution, _ = resolve([make_thread("h1", line=20)], self.repo)
        self.assertEqual(resolution.overlay.snippet_for("h1").line_numbers, [16, 17, 18, 19, 20])

    def test_line_past_end_gets_no_snippet(self):
        resolution, failures = resolve([make_thread("h1", line=21)], self.repo)

        self.assertIsNone(resolution.overlay.snippet_for("h1"))
        self.assertEqual(resolution.out_of_range, [Anchor("abc123", "foo.txt", 21)])
        self.assertEqual(failures, [])
        self.assertTrue(resolution.is_complete)

    def test_line_zero_gets_no_snippet(self):
        resolution, _ = resolve([make_thread("h1", line=0)], self.repo)

        self.assertIsNone(resolution.overlay.snippet_for("h1"))
        self.assertEqual(resolution.out_of_range, [Anchor("abc123", "foo.txt", 0)])

    def test_trailing_newline_counts_as_a_line(self):
        repo = FakeRepository({("abc123", "foo.txt"): "a\nb\n"})
        resolution, _ = resolve([make_thread("h1", line=3)], repo)
        snippet = resolution.overlay.snippet_for("h1")

        self.assertEqual([(l.line_number, l.contents) for l in snippet.lines], [(1, "a"), (2, "b"), (3, "")])

    def test_context_lines_setting(self):
        resolution, _ = resolve(
            [make_thread("h1", line=10)], self.repo, config=ResolverConfig(context_lines=2)
        )
        self.assertEqual(resolution.overlay.snippet_for("h1").line_numbers, [9, 10])


class TestFetchBatching(unittest.TestCase):
    """Tests for fetching each (commit, path) once."""

    def test_one_fetch_per_file(self):
        repo = FakeRepository(
            {
                ("abc123", "foo.txt"): numbered_content(30),
                ("abc123", "bar.txt"): numbered_content(30),
                ("def456", "foo.txt"): numbered_content(30),
            }
        )
        threads = [
            make_thread("h1", line=10),
            make_thread("h2", line=10),
            make_thread("h3", line=25),
            make_thread("h4", path="bar.txt", line=2),
            make_thread("h5", commit="def456", line=4),
        ]

        resolution, _ = resolve(threads, repo)

        self.assertEqual(
            sorted(repo.calls),
            [("abc123", "bar.txt"), ("abc123", "foo.txt"), ("def456", "foo.txt")],
        )
        self.assertEqual(len(resolution.snippets), 4)

    def test_threads_on_same_line_share_snippet(self):
        repo = FakeRepository({("abc123", "foo.txt"): numbered_content(20)})
        resolution, _ = resolve([make_thread("h1"), make_thread("h2")], repo)

        first = resolution.overlay.snippet_for("h1")
        self.assertIsInstance(first, Snippet)
        self.assertIs(first, resolution.overlay.snippet_for("h2"))
        self.assertIs(first, resolution.snippets[Anchor("abc123", "foo.txt", 10)])

    def test_no_anchored_threads_means_no_fetch(self):
        repo = FakeRepository({})
        threads = [CommentThread.from_dict({"hash": "h1", "comment": {"description": "general"}})]

        resolution, _ = resolve(threads, repo)

        self.assertEqual(repo.calls, [])
        self.assertEqual(resolution.snippets, {})

    def test_replies_do_not_get_snippets(self):
        repo = FakeRepository({("abc123", "foo.txt"): numbered_content(20)})
        reply = {
            "hash": "reply",
            "comment": {"location": {"commit": "abc123", "path": "foo.txt", "range": {"startLine": 5}}},
        }
        resolution, _ = resolve([make_thread("root", children=[reply])], repo)

        self.assertIsNotNone(resolution.overlay.snippet_for("root"))
        self.assertIsNone(resolution.overlay.snippet_for("reply"))

    def test_concurrency_is_bounded(self):
        files = {("abc123", f"f{i}.txt"): numbered_content(5) for i in range(6)}
        repo = FakeRepository(files)
        threads = [make_thread(f"h{i}", path=f"f{i}.txt", line=1) for i in range(6)]

        resolve(threads, repo, config=ResolverConfig(max_concurrent_fetches=2))

        self.assertEqual(len(repo.calls), 6)
        self.assertLessEqual(repo.max_in_flight, 2)


class TestPartialFailure(unittest.TestCase):
    """Tests for a failed fetch leaving the rest of the review resolved."""

    def setUp(self):
        self.repo = FakeRepository(
            {
                ("abc123", "foo.txt"): numbered_content(20),
                ("abc123", "bar.txt"): numbered_content(20),
            },
            failing={("abc123", "bar.txt")},
        )
        self.threads = [
            make_thread("ok", line=10),
            make_thread("broken-1", path="bar.txt", line=3),
            make_thread("broken-2", path="bar.txt", line=7),
        ]

    def test_other_files_still_resolve(self):
        resolution, _ = resolve(self.threads, self.repo)

        self.assertIsNotNone(resolution.overlay.snippet_for("ok"))
        self.assertIsNone(resolution.overlay.snippet_for("broken-1"))
        self.assertIsNone(resolution.overlay.snippet_for("broken-2"))
        self.assertFalse(resolution.is_complete)

    def test_failure_is_reported_once_per_file(self):
        resolution, failures = resolve(self.threads, self.repo)

        self.assertEqual(len(failures), 1)
        self.assertEqual((failures[0].commit, failures[0].path), ("abc123", "bar.txt"))
        self.assertIsInstance(failures[0].error, RuntimeError)
        self.assertEqual(resolution.failures, failures)
        self.assertIn("bar.txt", failures[0].message)

    def test_non_text_content_is_a_failure(self):
        for bad_content in (None, b"a\nb\nc"):
            with self.subTest(content=bad_content):
                repo = FakeRepository(
                    {("abc123", "good.txt"): "a\nb\nc\nd", ("abc123", "bad.txt"): bad_content}
                )
                threads = [
                    make_thread("good", path="good.txt", line=3),
                    make_thread("bad", path="bad.txt", line=2),
                ]

                resolution, failures = resolve(threads, repo)

                self.assertEqual(resolution.overlay.snippet_for("good").line_numbers, [1, 2, 3])
                self.assertIsNone(resolution.overlay.snippet_for("bad"))
                self.assertEqual([f.path for f in failures], ["bad.txt"])
                self.assertIsInstance(failures[0].error, TypeError)

    def test_non_integer_start_line_is_unanchored(self):
        repo = FakeRepository({("abc123", "foo.txt"): numbered_content(20)})
        bad = CommentThread.from_dict(
            {
                "hash": "bad",
                "comment": {"location": {"commit": "abc123", "path": "foo.txt", "range": {"startLine": "3"}}},
            }
        )

        resolution, failures = resolve([make_thread("good"), bad], repo)

        self.assertEqual(resolution.overlay.snippet_for("good").line_numbers, [6, 7, 8, 9, 10])
        self.assertIsNone(resolution.overlay.snippet_for("bad"))
        self.assertEqual(failures, [])

    def test_default_reporter_prints_warning(self):
        service = SnippetResolverService(self.repo.fetch_content)
        with patch("sys.stderr", new_callable=io.StringIO) as stderr:
            asyncio.run(service.resolve(self.threads))

        self.assertIn("Warning: Failed to fetch bar.txt at abc123", stderr.getvalue())

    def test_reporter_can_be_disabled(self):
        service = SnippetResolverService(self.repo.fetch_content, on_failure=None)
        with patch("sys.stderr", new_callable=io.StringIO) as stderr:
            resolution = asyncio.run(service.resolve(self.threads))

        self.assertEqual(stderr.getvalue(), "")
        self.assertEqual(len(resolution.failures), 1)


class TestCollaborators(unittest.TestCase):
    """Tests for sync fetch functions, prebuilt indexes and overlays."""

    def test_sync_fetch_function(self):
        calls = []

        def fetch_content(commit, path):
            calls.append((commit, path))
            return numbered_content(12)

        resolution = asyncio.run(resolve_snippets([make_thread("h1", line=12)], fetch_content))

        self.assertEqual(calls, [("abc123", "foo.txt")])
        self.assertEqual(resolution.overlay.snippet_for("h1").line_numbers, [8, 9, 10, 11, 12])

    def test_sync_fetch_failure_is_recorded(self):
        def fetch_content(commit, path):
            raise FileNotFoundError(path)

        service = SnippetResolverService(fetch_content, on_failure=None)
        resolution = asyncio.run(service.resolve([make_thread("h1")]))

        self.assertIsInstance(resolution.failures[0].error, FileNotFoundError)
        self.assertIsNone(resolution.overlay.snippet_for("h1"))

    def test_uses_prebuilt_index_and_overlay(self):
        repo = FakeRepository({("abc123", "foo.txt"): numbered_content(20)})
        threads = [make_thread("h1"), make_thread("h2", line=4)]
        index = CommentLocationIndex.build(threads[:1])
        overlay = ThreadOverlay()
        overlay.set_display("h2", False)

        service = SnippetResolverService(repo.fetch_content, on_failure=None)
        resolution = asyncio.run(service.resolve(threads, index=index, overlay=overlay))

        self.assertIs(resolution.overlay, overlay)
        self.assertIsNotNone(overlay.snippet_for("h1"))
        self.assertIsNone(overlay.snippet_for("h2"))
        self.assertFalse(overlay.get("h2").display)

    def test_threads_are_not_mutated(self):
        repo = FakeRepository({("abc123", "foo.txt"): numbered_content(20)})
        thread = make_thread("h1")
        before = CommentThread.from_dict(
            {
                "hash": "h1",
                "comment": {
                    "description": "",
                    "location": {"commit": "abc123", "path": "foo.txt", "range": {"startLine": 10}},
                },
            }
        )

        resolve([thread], repo)

        self.assertEqual(thread, before)


if __name__ == "__main__":
    unittest.main()
