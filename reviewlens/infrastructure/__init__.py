"""Infrastructure components for reviewlens.

This layer adapts external systems to the shapes the services expect:
- content_fetch - file content at a revision, for snippet resolution
"""

from .content_fetch import ContentFetch, GitContentFetch

__all__ = [
    "ContentFetch",
    "GitContentFetch",
]
