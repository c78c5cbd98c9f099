"""Diff summary service.

Builds the diff shown for a review: every commit that can be used as a side
of the diff, with its details, and the diff text between a chosen pair of
them. Two different bases are involved:

- The review base is the earliest usable left-hand side, including commits
  from earlier iterations of the review. The commit list starts there.
- The diff base is the base of the review's current diff. A requested
  left-hand side that is not one of the review commits falls back to it.

A requested right-hand side that is not a review commit falls back to the
review's head.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from reviewlens.domain.commit import CommitOverview
from reviewlens.domain.diff import FileDiff, parse_unified_diff
from reviewlens.domain.review import ReviewSummary
from reviewlens.services.git_operations import GitOperationsService


@dataclass
class DiffSummary:
    """One diff of a review, with every review commit usable as either side.

    ``review_commits`` is ordered oldest first, starting at the review base.
    """

    review_commits: list[CommitOverview] = field(default_factory=list)
    left_hand_side: str = ""
    right_hand_side: str = ""
    contents: str = ""

    @property
    def files(self) -> list[FileDiff]:
        """Per-file views of the diff contents."""
        return parse_unified_diff(self.contents)

    @property
    def newest_first(self) -> list[CommitOverview]:
        """Review commits in display order, newest first."""
        return list(reversed(self.review_commits))

    def to_dict(self) -> dict:
        return {
            "reviewCommits": [commit.to_dict() for commit in self.review_commits],
            "leftHandSide": self.left_hand_side,
            "rightHandSide": self.right_hand_side,
            "contents": self.contents,
        }


class DiffSummaryService:
    """Computes review diffs using git."""

    def __init__(self, git_service: GitOperationsService):
        self.git_service = git_service

    def build(self, review: ReviewSummary, lhs: str = "", rhs: str = "") -> DiffSummary:
        """Build the diff summary for a review.

        Args:
            review: The review to diff
            lhs: Requested left-hand commit ("" for the diff base)
            rhs: Requested right-hand commit ("" for the head)

        Returns:
            DiffSummary with the review commits and the diff contents

        Raises:
            GitCommandError: If any of the underlying git commands fail
        """
        base = self.get_review_base(review)
        head = self.get_head_commit(review)
        commit_ids = [base] + self.git_service.list_commits_between(base, head)
        review_commits = [
            CommitOverview(id=commit, details=self.git_service.get_commit_details(commit))
            for commit in commit_ids
        ]

        known = set(commit_ids)
        if lhs not in known:
            lhs = self.get_diff_base(review)
        if rhs not in known:
            rhs = head

        return DiffSummary(
            review_commits=review_commits,
            left_hand_side=lhs,
            right_hand_side=rhs,
            contents=self.git_service.get_diff(lhs, rhs),
        )

    def get_review_base(self, review: ReviewSummary) -> str:
        """Earliest commit usable as a left-hand side for the review.

        The recorded base commit if there is one; otherwise the last parent of
        the revision for a submitted review; otherwise the merge base of that
        parent and the target ref.
        """
        if review.base_commit:
            return review.base_commit
        submitted_base = self.git_service.get_last_parent(review.revision)
        if review.submitted:
            return submitted_base
        target_ref_base = self.git_service.resolve_ref_commit(review.target_ref)
        return self.git_service.merge_base(target_ref_base, submitted_base)

    def get_diff_base(self, review: ReviewSummary) -> str:
        """Base commit of the review's current diff.

        Closed reviews use the recorded base commit, or the last parent of the
        revision. Open reviews use the merge base of the target ref and the
        current commit.
        """
        if not review.is_open:
            if review.base_commit:
                return review.base_commit
            return self.git_service.get_last_parent(review.revision)
        target_ref_head = self.git_service.resolve_ref_commit(review.target_ref)
        return self.git_service.merge_base(target_ref_head, review.current_commit)

    def get_head_commit(self, review: ReviewSummary) -> str:
        """Newest commit of the review.

        Submitted reviews end at their current commit; open reviews follow the
        review ref when one is recorded.
        """
        if review.submitted or not review.review_ref:
            return review.current_commit
        return self.git_service.resolve_ref_commit(review.review_ref)
