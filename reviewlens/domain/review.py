"""Domain models for listing reviews.

Review lists are served in fixed-size pages addressed by an opaque page token.
ReviewPager walks such a listing lazily: each iteration starts again from the
first page and follows next-page tokens until the listing is exhausted.
"""

from __future__ import annotations

import hashlib
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field


# ============================================================
# Constants
# ============================================================

DEFAULT_PAGE_SIZE = 100
SUMMARY_MAX_LENGTH = 80
REPO_ID_LENGTH = 12


# ============================================================
# Domain Models
# ============================================================


@dataclass(frozen=True)
class ReviewSummary:
    """A review as shown in a review list.

    Attributes:
        revision: Commit the review request was made on
        target_ref: Ref the change is meant to land on
        review_ref: Ref holding the commits under review
        base_commit: Explicit base commit of the review, if recorded
        alias: Commit that replaced the revision after a rebase, if any
    """

    revision: str
    timestamp: str = ""
    description: str = ""
    target_ref: str = ""
    review_ref: str = ""
    base_commit: str = ""
    alias: str = ""
    submitted: bool = False

    # --------------------------------------------------------
    # Factory Methods
    # --------------------------------------------------------

    @classmethod
    def from_dict(cls, data: dict) -> ReviewSummary:
        """Parse a review summary from the review backend's JSON.

        Args:
            data: Raw dictionary with revision, request and submitted keys

        Returns:
            Typed ReviewSummary instance
        """
        request = data.get("request") or {}
        return cls(
            revision=data.get("revision", ""),
            timestamp=str(request.get("timestamp", "")),
            description=request.get("description", ""),
            target_ref=request.get("targetRef", ""),
            review_ref=request.get("reviewRef", ""),
            base_commit=request.get("baseCommit", ""),
            alias=request.get("alias", ""),
            submitted=data.get("submitted", False),
        )

    # --------------------------------------------------------
    # Public API
    # --------------------------------------------------------

    @property
    def summary(self) -> str:
        """First line of the description, truncated for list display."""
        result = self.description
        newline_index = result.find("\n")
        if newline_index > 0:
            result = result[:newline_index]
        return result[:SUMMARY_MAX_LENGTH]

    @property
    def is_open(self) -> bool:
        """Open reviews are unsubmitted and still target a ref."""
        return not self.submitted and bool(self.target_ref)

    @property
    def current_commit(self) -> str:
        """The revision, or its alias if the review was rebased."""
        return self.alias or self.revision


@dataclass(frozen=True)
class ReviewListPage:
    """One page of a review listing."""

    items: list[ReviewSummary] = field(default_factory=list)
    next_page_token: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> ReviewListPage:
        return cls(
            items=[ReviewSummary.from_dict(item) for item in data.get("items") or []],
            next_page_token=data.get("nextPageToken", "") or "",
        )

    @property
    def has_next_page(self) -> bool:
        return bool(self.next_page_token)


# ============================================================
# Listing
# ============================================================


def split_reviews(reviews: list[ReviewSummary]) -> tuple[list[ReviewSummary], list[ReviewSummary]]:
    """Split reviews into (open, closed), preserving order."""
    open_reviews = [r for r in reviews if r.is_open]
    closed_reviews = [r for r in reviews if not r.is_open]
    return open_reviews, closed_reviews


# ============================================================
# Repositories
# ============================================================


def repo_id(path: str) -> str:
    """Fixed-length, obfuscated id for a repository path."""
    return hashlib.sha1(path.encode()).hexdigest()[:REPO_ID_LENGTH]


def last_path_element(path: str) -> str:
    """Last element of a slash-separated path, used as a repository name.

    A path whose only slash is the leading one is returned unchanged.
    """
    slash_index = path.rfind("/")
    if slash_index > 0:
        return path[slash_index + 1:]
    return path


@dataclass(frozen=True)
class RepoSummary:
    """A repository with its open and closed review counts."""

    path: str
    open_review_count: int = 0
    closed_review_count: int = 0

    @classmethod
    def from_reviews(cls, path: str, reviews: list[ReviewSummary]) -> RepoSummary:
        open_reviews, closed_reviews = split_reviews(reviews)
        return cls(
            path=path,
            open_review_count=len(open_reviews),
            closed_review_count=len(closed_reviews),
        )

    @classmethod
    def from_dict(cls, data: dict) -> RepoSummary:
        return cls(
            path=data.get("path", ""),
            open_review_count=data.get("openReviewCount", 0),
            closed_review_count=data.get("closedReviewCount", 0),
        )

    @property
    def id(self) -> str:
        return repo_id(self.path)

    @property
    def name(self) -> str:
        return last_path_element(self.path)

    def to_dict(self) -> dict:
        return {
            "path": self.path,
            "openReviewCount": self.open_review_count,
            "closedReviewCount": self.closed_review_count,
        }


# ============================================================
# Pagination
# ============================================================


def paginate_reviews(
    reviews: list[ReviewSummary],
    max_per_page: int = DEFAULT_PAGE_SIZE,
) -> list[list[ReviewSummary]]:
    """Split reviews into consecutive pages.

    Always returns at least one page; an empty listing is one empty page.
    """
    if max_per_page < 1:
        raise ValueError(f"max_per_page must be positive, got {max_per_page}")
    pages = [reviews[i:i + max_per_page] for i in range(0, len(reviews), max_per_page)]
    return pages or [[]]


def parse_page_token(token: str | None) -> int:
    """Parse a page token; an empty token is the first page.

    Raises:
        ValueError: If the token is not a non-negative integer
    """
    if not token:
        return 0
    page = int(token)
    if page < 0:
        raise ValueError(f"Invalid page token: {token}")
    return page


def get_review_list_page(page_token: int, pages: list[list[ReviewSummary]]) -> ReviewListPage:
    """Get one page of a paginated listing.

    An out-of-range token yields an empty page with no next-page token.
    """
    if page_token >= len(pages):
        return ReviewListPage()
    next_page_token = str(page_token + 1) if page_token < len(pages) - 1 else ""
    return ReviewListPage(items=list(pages[page_token]), next_page_token=next_page_token)


class ReviewPager:
    """Lazy, restartable sequence of review list pages.

    Args:
        fetch_page: Called with the page token ("" for the first page) and
                    returns that page
    """

    def __init__(self, fetch_page: Callable[[str], ReviewListPage]):
        self.fetch_page = fetch_page

    def __iter__(self) -> Iterator[ReviewListPage]:
        token = ""
        while True:
            page = self.fetch_page(token)
            yield page
            if not page.has_next_page:
                return
            token = page.next_page_token

    def reviews(self) -> Iterator[ReviewSummary]:
        """Iterate over every review across all pages."""
        for page in self:
            yield from page.items
