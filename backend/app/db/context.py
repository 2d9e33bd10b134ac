"""Request context for ownership enforcement."""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class RequestContext:
    """Request context containing the caller's identity.

    Every owner-scoped query filters on ``user_id``; rows are never shared
    across users.
    """

    user_id: UUID
