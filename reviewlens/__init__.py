"""reviewlens - diff and comment-context core for code review viewers.

A library package following:
- Domain Modeling: Parse-once pattern with type-safe models
- Services Pattern: Core services with dependency injection
- Python Code Style: Organized methods, section headers, modern annotations

Structure:
    reviewlens/
    ├── config.py            # ResolverConfig (YAML-backed)
    ├── errors.py            # Exception hierarchy
    ├── domain/              # Domain models (parse-once pattern)
    │   ├── diff.py          # Unified diff parser, FileDiff, DiffLine
    │   ├── comment.py       # CommentThread, ThreadStatus, walk_threads
    │   ├── snippet.py       # Snippet, ThreadOverlay
    │   ├── commit.py        # CommitDetails, CommitOverview
    │   └── review.py        # ReviewSummary, RepoSummary, ReviewPager
    ├── services/            # Business logic services
    │   ├── location_index.py
    │   ├── snippet_resolver.py
    │   ├── review_annotator.py
    │   ├── diff_summary.py
    │   └── git_operations.py
    └── infrastructure/      # External system adapters
        └── content_fetch.py
"""

from reviewlens.domain.diff import (
    DiffLine,
    DiffLineStatus,
    FileDiff,
    UnifiedDiff,
    parse_unified_diff,
)
from reviewlens.errors import MalformedDiffHeaderError, ReviewLensError
from reviewlens.services.location_index import CommentLocationIndex
from reviewlens.services.snippet_resolver import (
    SnippetResolution,
    SnippetResolverService,
    resolve_snippets,
)

__all__ = [
    "CommentLocationIndex",
    "DiffLine",
    "DiffLineStatus",
    "FileDiff",
    "MalformedDiffHeaderError",
    "ReviewLensError",
    "SnippetResolution",
    "SnippetResolverService",
    "UnifiedDiff",
    "parse_unified_diff",
    "resolve_snippets",
]
