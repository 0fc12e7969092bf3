"""
Incoming webhook events: what route they arrived on, and what type they are.
"""

from __future__ import annotations

import dataclasses
import enum
from typing import Optional

from glom import glom

from hook_gateway.types import EventDict


class MalformedPayload(Exception):
    """The request body isn't usable as a webhook event."""


class EventType(str, enum.Enum):
    """
    The GitHub event types we know about.

    The values are the names GitHub uses in the ``X-GitHub-Event`` header.
    """
    PULL_REQUEST = "pull_request"
    ISSUE_COMMENT = "issue_comment"
    INSTALLATION_REPOSITORIES = "installation_repositories"
    PUSH = "push"
    PULL_REQUEST_REVIEW = "pull_request_review"
    UNKNOWN = "unknown"


# Header values that name a real event type.
KNOWN_EVENT_HEADERS = {t.value for t in EventType if t is not EventType.UNKNOWN}


class SourceRoute(enum.Enum):
    """Which of our endpoints a webhook was delivered to."""
    PULL_REQUEST = "pull_request"
    ISSUE_COMMENT = "issue_comment"
    INTEGRATION = "integration"


def classify(source_route: SourceRoute, declared_event_header: Optional[str]) -> EventType:
    """
    Determine the event type of a webhook.

    The dedicated routes each receive a single kind of event.  The
    integration route receives everything a GitHub App subscribes to, and
    relies on the ``X-GitHub-Event`` header to say what it got.  A header we
    don't recognize (or no header at all) gives ``EventType.UNKNOWN``.
    """
    if source_route is SourceRoute.PULL_REQUEST:
        return EventType.PULL_REQUEST
    if source_route is SourceRoute.ISSUE_COMMENT:
        return EventType.ISSUE_COMMENT
    if declared_event_header in KNOWN_EVENT_HEADERS:
        return EventType(declared_event_header)
    return EventType.UNKNOWN


def _sender_id(body: EventDict) -> Optional[int]:
    sender_id = glom(body, "sender.id", default=None)
    if isinstance(sender_id, int) and not isinstance(sender_id, bool):
        return sender_id
    return None


@dataclasses.dataclass(frozen=True)
class EventPayload:
    """
    A parsed webhook event, with the request details we care about.

    Build these with :meth:`from_request_data`, which classifies the event so
    that `event_type` always agrees with the route and header.
    """
    event_type: EventType
    raw_body: EventDict
    sender_id: Optional[int]
    source_route: SourceRoute
    declared_event_header: Optional[str] = None
    delivery_id: Optional[str] = None

    @classmethod
    def from_request_data(
        cls,
        source_route: SourceRoute,
        body,
        declared_event_header: Optional[str] = None,
        delivery_id: Optional[str] = None,
    ) -> EventPayload:
        if not isinstance(body, dict):
            raise MalformedPayload(f"Expected a JSON object, got {type(body).__name__}")
        if source_route is not SourceRoute.INTEGRATION:
            # Only the integration route is classified by header.
            declared_event_header = None
        return cls(
            event_type=classify(source_route, declared_event_header),
            raw_body=body,
            sender_id=_sender_id(body),
            source_route=source_route,
            declared_event_header=declared_event_header,
            delivery_id=delivery_id,
        )

    @property
    def action(self) -> Optional[str]:
        return self.raw_body.get("action")

    @property
    def repo(self) -> Optional[str]:
        return glom(self.raw_body, "repository.full_name", default=None)

    @property
    def sender_login(self) -> str:
        return glom(self.raw_body, "sender.login", default="someone")

    def __str__(self):
        return f"{self.event_type.value} event from {self.source_route.value} route"
