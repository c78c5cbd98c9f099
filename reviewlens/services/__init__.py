"""Services for reviewlens.

Services encapsulate business logic and orchestrate domain models.
They receive dependencies via constructor injection.
"""

from reviewlens.services.diff_summary import DiffSummary, DiffSummaryService
from reviewlens.services.git_operations import (
    GitCommandError,
    GitDiffError,
    GitFileNotFoundError,
    GitOperationsService,
    GitRepositoryError,
)
from reviewlens.services.location_index import CommentLocationIndex
from reviewlens.services.review_annotator import ReviewAnnotator
from reviewlens.services.snippet_resolver import (
    FetchFailure,
    SnippetResolution,
    SnippetResolverService,
    resolve_snippets,
)

__all__ = [
    "CommentLocationIndex",
    "DiffSummary",
    "DiffSummaryService",
    "FetchFailure",
    "GitCommandError",
    "GitDiffError",
    "GitFileNotFoundError",
    "GitOperationsService",
    "GitRepositoryError",
    "ReviewAnnotator",
    "SnippetResolution",
    "SnippetResolverService",
    "resolve_snippets",
]
