"""Domain models for commits listed in a review diff.

Parse-once pattern: commit metadata read from git is turned into frozen
models once; DiffSummary carries one CommitOverview per review commit.
"""

from __future__ import annotations

from dataclasses import dataclass, field

SHORT_ID_LENGTH = 6


@dataclass(frozen=True)
class CommitDetails:
    """Metadata of a single commit."""

    author: str = ""
    author_email: str = ""
    tree: str = ""
    time: str = ""
    parents: tuple[str, ...] = field(default_factory=tuple)
    summary: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> CommitDetails:
        return cls(
            author=data.get("author", ""),
            author_email=data.get("authorEmail", ""),
            tree=data.get("tree", ""),
            time=str(data.get("time", "")),
            parents=tuple(data.get("parents") or []),
            summary=data.get("summary", ""),
        )

    def to_dict(self) -> dict:
        return {
            "author": self.author,
            "authorEmail": self.author_email,
            "tree": self.tree,
            "time": self.time,
            "parents": list(self.parents),
            "summary": self.summary,
        }


@dataclass(frozen=True)
class CommitOverview:
    """A review commit with its details."""

    id: str
    details: CommitDetails = field(default_factory=CommitDetails)

    @property
    def name(self) -> str:
        """Short display name, the first characters of the commit id."""
        return self.id[:SHORT_ID_LENGTH]

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "details": self.details.to_dict()}
