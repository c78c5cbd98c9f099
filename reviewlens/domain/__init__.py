"""Domain models for reviewlens."""

from reviewlens.domain.comment import (
    Comment,
    CommentLocation,
    CommentRange,
    CommentThread,
    ReviewDetails,
    ThreadStatus,
    TraversalMode,
    walk_threads,
)
from reviewlens.domain.commit import CommitDetails, CommitOverview
from reviewlens.domain.diff import (
    DiffLine,
    DiffLineStatus,
    FileDiff,
    HunkHeader,
    UnifiedDiff,
    parse_file_diff,
    parse_unified_diff,
)
from reviewlens.domain.review import (
    RepoSummary,
    ReviewListPage,
    ReviewPager,
    ReviewSummary,
    get_review_list_page,
    last_path_element,
    paginate_reviews,
    repo_id,
    split_reviews,
)
from reviewlens.domain.snippet import (
    Anchor,
    Snippet,
    SnippetLine,
    ThreadAnnotations,
    ThreadOverlay,
)

__all__ = [
    "Anchor",
    "Comment",
    "CommentLocation",
    "CommentRange",
    "CommentThread",
    "CommitDetails",
    "CommitOverview",
    "DiffLine",
    "DiffLineStatus",
    "FileDiff",
    "HunkHeader",
    "RepoSummary",
    "ReviewDetails",
    "ReviewListPage",
    "ReviewPager",
    "ReviewSummary",
    "Snippet",
    "SnippetLine",
    "ThreadAnnotations",
    "ThreadOverlay",
    "ThreadStatus",
    "TraversalMode",
    "UnifiedDiff",
    "get_review_list_page",
    "last_path_element",
    "paginate_reviews",
    "parse_file_diff",
    "parse_unified_diff",
    "repo_id",
    "split_reviews",
    "walk_threads",
]
