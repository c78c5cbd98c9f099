"""Content fetch collaborators.

The snippet resolver reads file content through any callable of the shape
``fetch_content(commit, path) -> str``. Coroutine functions are awaited; plain
functions are run in a worker thread. This module provides the git-backed
implementation.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Union

from reviewlens.services.git_operations import GitOperationsService

ContentFetch = Callable[[str, str], Union[str, Awaitable[str]]]


class GitContentFetch:
    """Reads file content at a revision from a local git repository.

    Adapts GitOperationsService to the ``fetch_content(commit, path)`` shape.
    Failures propagate as the service's Git*Error exceptions.
    """

    def __init__(self, git_service: GitOperationsService):
        self.git_service = git_service

    def __call__(self, commit: str, path: str) -> str:
        return self.git_service.get_file_content(path, commit)
