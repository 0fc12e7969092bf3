"""
Decide whether a classified webhook event should produce any work.

Every event type we act on has a rule: a predicate saying whether the event
qualifies, and an extractor producing the arguments for its job.  Events from
our own bot account are turned away before any rule is consulted, and event
types without a rule are never admitted.
"""

from __future__ import annotations

import dataclasses
import enum
from typing import Callable, Dict, NamedTuple, Optional, Tuple

from glom import glom, GlomError

from hook_gateway import settings
from hook_gateway.events import EventPayload, EventType, MalformedPayload
from hook_gateway.types import EventDict


class AdmissionReason(enum.Enum):
    ADMITTED = "admitted"
    BOT_SENDER = "bot_sender"
    FILTERED = "filtered"
    UNHANDLED = "unhandled"


@dataclasses.dataclass(frozen=True)
class AdmissionDecision:
    """Whether to run a job for an event, and what to give it."""
    admit: bool
    reason: AdmissionReason
    job_arguments: Tuple = ()

    @classmethod
    def rejected(cls, reason: AdmissionReason) -> AdmissionDecision:
        return cls(admit=False, reason=reason)


class RuleContext(NamedTuple):
    default_branch_ref: str


class Rule(NamedTuple):
    predicate: Callable[[EventDict, RuleContext], bool]
    arguments: Callable[[EventDict], Tuple]


def _always(body: EventDict, context: RuleContext) -> bool:
    return True


def _whole_body(body: EventDict) -> Tuple:
    return (body,)


def _pull_request_opened(body: EventDict, context: RuleContext) -> bool:
    return body.get("action") == "opened"


def _pushed_to_default_branch(body: EventDict, context: RuleContext) -> bool:
    return body.get("ref") == context.default_branch_ref


def _installation_repositories_arguments(body: EventDict) -> Tuple:
    try:
        return (
            glom(body, "repositories_added"),
            glom(body, "installation.id"),
        )
    except GlomError as exc:
        raise MalformedPayload(f"installation_repositories event is missing data: {exc}") from exc


RULES: Dict[EventType, Rule] = {
    EventType.PULL_REQUEST: Rule(_pull_request_opened, _whole_body),
    EventType.ISSUE_COMMENT: Rule(_always, _whole_body),
    EventType.INSTALLATION_REPOSITORIES: Rule(_always, _installation_repositories_arguments),
    EventType.PUSH: Rule(_pushed_to_default_branch, _whole_body),
    EventType.PULL_REQUEST_REVIEW: Rule(_always, _whole_body),
}


def is_bot_sender(payload: EventPayload, bot_user_id: Optional[int]) -> bool:
    """Was this event caused by our own bot account?"""
    return bot_user_id is not None and payload.sender_id == bot_user_id


def evaluate(
    payload: EventPayload,
    bot_user_id: Optional[int] = None,
    default_branch_ref: Optional[str] = None,
) -> AdmissionDecision:
    """
    Decide whether `payload` should be handed to a job.

    Arguments:
        payload: the classified event.
        bot_user_id: the GitHub id of our bot account.  Defaults to
            ``settings.GITHUB_BOT_USER_ID``.
        default_branch_ref: the only ref whose pushes are admitted.  Defaults
            to ``settings.GITHUB_DEFAULT_BRANCH_REF``.

    Returns:
        An AdmissionDecision.  Rejections carry the reason, so callers can tell
        the bot's own events apart from events that simply didn't qualify.

    Raises:
        MalformedPayload: an admitted event is missing the data its job needs.
    """
    if bot_user_id is None:
        bot_user_id = settings.GITHUB_BOT_USER_ID
    if default_branch_ref is None:
        default_branch_ref = settings.GITHUB_DEFAULT_BRANCH_REF

    if is_bot_sender(payload, bot_user_id):
        return AdmissionDecision.rejected(AdmissionReason.BOT_SENDER)

    rule = RULES.get(payload.event_type)
    if rule is None:
        return AdmissionDecision.rejected(AdmissionReason.UNHANDLED)

    context = RuleContext(default_branch_ref=default_branch_ref)
    if not rule.predicate(payload.raw_body, context):
        return AdmissionDecision.rejected(AdmissionReason.FILTERED)

    return AdmissionDecision(
        admit=True,
        reason=AdmissionReason.ADMITTED,
        job_arguments=rule.arguments(payload.raw_body),
    )
