"""Upstream data providers."""

from readthrough.upstream.randomuser import MAX_RESULTS, RandomUserClient

__all__ = ["RandomUserClient", "MAX_RESULTS"]
