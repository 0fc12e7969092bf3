"""
Hand admitted webhook events to their background jobs.
"""

import logging

from hook_gateway.admission import AdmissionDecision
from hook_gateway.events import EventType
from hook_gateway.tasks.github import (
    receive_installation_repositories_event_task,
    receive_issue_comment_event_task,
    receive_pull_request_event_task,
    receive_pull_request_review_event_task,
    receive_push_event_task,
)


logger = logging.getLogger(__name__)

# The Celery task run for each admitted event type.  The keys match
# hook_gateway.admission.RULES.
JOBS = {
    EventType.PULL_REQUEST: receive_pull_request_event_task,
    EventType.ISSUE_COMMENT: receive_issue_comment_event_task,
    EventType.INSTALLATION_REPOSITORIES: receive_installation_repositories_event_task,
    EventType.PUSH: receive_push_event_task,
    EventType.PULL_REQUEST_REVIEW: receive_pull_request_review_event_task,
}


class JobSubmissionFailed(Exception):
    """The job queue wouldn't take a job."""


def submit_job(task, args):
    """
    Queue a task to run in the background via Celery.

    Returns the AsyncResult for the queued task.
    """
    return task.delay(*args)


def dispatch(event_type, decision: AdmissionDecision, submit=submit_job, jobs=JOBS):
    """
    Queue the job for an admitted event.

    Arguments:
        event_type (EventType): the classified type of the event
        decision (AdmissionDecision): the admission result for the event
        submit (Callable): submits a task with a tuple of arguments
        jobs (Dict[EventType, Task]): the task to use for each event type

    Returns:
        The AsyncResult of the queued job, or None if nothing was queued.

    Raises:
        JobSubmissionFailed: the job couldn't be queued.  Nothing is retried.
    """
    if not decision.admit:
        return None

    task = jobs[event_type]
    logger.info(f"dispatching {task.name} for {event_type.value!r}")
    try:
        return submit(task, decision.job_arguments)
    except Exception as exc:
        raise JobSubmissionFailed(f"Couldn't queue {task.name} for {event_type.value!r}: {exc}") from exc
