"""
Errors that cross the feed engine boundary.

Social-graph outages are deliberately absent: they are reported as a
degraded ``FollowingResult`` value, never raised.
"""


class FeedError(Exception):
    """Base class for feed engine failures."""


class InvalidQueryError(FeedError):
    """The caller asked for something the engine cannot compute."""


class StoreError(FeedError):
    """The candidate post set could not be loaded."""
