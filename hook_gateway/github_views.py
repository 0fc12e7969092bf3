"""
These are the views that process webhook events coming from GitHub.
"""

import logging

import sentry_sdk
from flask import current_app as app
from flask import Blueprint, request

from hook_gateway.admission import AdmissionReason, evaluate
from hook_gateway.dispatcher import JobSubmissionFailed, dispatch
from hook_gateway.events import EventPayload, MalformedPayload, SourceRoute
from hook_gateway.utils import is_valid_payload, queued_response, sentry_extra_context

github_bp = Blueprint('github_views', __name__)
logger = logging.getLogger(__name__)


def verify_webhook_signature(req) -> bool:
    """
    Check that a request was signed by GitHub with our webhook secret.

    GitHub sends a SHA-256 signature in ``X-Hub-Signature-256``, and an older
    SHA-1 signature in ``X-Hub-Signature``.  The SHA-256 one is used when
    present.
    """
    signature = req.headers.get("X-Hub-Signature-256") or req.headers.get("X-Hub-Signature")
    secret = app.config.get('GITHUB_WEBHOOKS_SECRET')
    return is_valid_payload(secret, signature, req.get_data())


@github_bp.route('/pull_request', methods=('POST',))
def pull_request_receiver():
    """Receive pull request events from a repository webhook."""
    return handle_webhook(SourceRoute.PULL_REQUEST)


@github_bp.route('/issue_comment', methods=('POST',))
def issue_comment_receiver():
    """Receive issue comment events from a repository webhook."""
    return handle_webhook(SourceRoute.ISSUE_COMMENT)


@github_bp.route('/integration', methods=('POST',))
def integration_receiver():
    """Receive any event from the GitHub App, typed by ``X-GitHub-Event``."""
    return handle_webhook(SourceRoute.INTEGRATION)


def handle_webhook(source_route):
    """
    Process an incoming GitHub webhook event.

    1.  Make sure the payload hashes to the proper signature. If not,
        reject the request with http status of 401.
    2.  Work out what kind of event it is, and whether we want it.
    3.  Send a job to the queue with details of the event.
    4.  Respond with http status 202, or 200 for our own bot's events.

    Returns:
        A response, or Tuple[str, int]: Message payload and HTTP status code
    """
    if not verify_webhook_signature(request):
        msg = "Rejecting because signature doesn't match!"
        logger.info(msg)
        return msg, 401

    body = request.get_json(force=True, silent=True)
    if body is None:
        raise MalformedPayload("Request body isn't valid JSON")

    declared_event = request.headers.get("X-GitHub-Event")
    payload = EventPayload.from_request_data(
        source_route,
        body,
        declared_event_header=declared_event,
        delivery_id=request.headers.get("X-GitHub-Delivery"),
    )
    sentry_extra_context({"event": body, "event_type": payload.event_type.value})

    if source_route is SourceRoute.INTEGRATION and declared_event == "ping":
        logger.info(f"ping from {payload.repo}")
        return "PONG"

    decision = evaluate(payload)
    logger.info(
        f"Incoming GitHub event: route={source_route.value!r}, event={payload.event_type.value!r}, "
        f"action={payload.action!r}, repo={payload.repo!r}, who={payload.sender_login!r}, "
        f"delivery={payload.delivery_id!r}: {decision.reason.value}"
    )

    if decision.reason is AdmissionReason.BOT_SENDER:
        # Our own activity comes back to us as webhook events.  There's
        # nothing to do for them.
        return "Ignoring event from the bot itself", 200

    result = dispatch(payload.event_type, decision)
    if result is None:
        return "Thank you", 202
    return queued_response(result)


@github_bp.errorhandler(MalformedPayload)
def malformed_payload(exc):
    logger.info(f"Rejecting malformed webhook payload: {exc}")
    return f"Malformed payload: {exc}", 400


@github_bp.errorhandler(JobSubmissionFailed)
def job_submission_failed(exc):
    logger.error("Couldn't queue job for webhook event", exc_info=exc)
    sentry_sdk.capture_exception(exc)
    return "Couldn't queue job", 500
