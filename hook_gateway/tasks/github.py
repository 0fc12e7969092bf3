"""
Background jobs for GitHub webhook events.

The gateway only decides which of these to queue.  Each job records what it
was given and returns a small summary, which is what the task status endpoint
reports.  Admission only checks the fields its rules need, so anything else
in the event may be missing.
"""

from typing import Dict

from glom import glom

from hook_gateway import celery
from hook_gateway.tasks import logger
from hook_gateway.types import EventDict, RepoList


def _repo_name(event: EventDict) -> str:
    return glom(event, "repository.full_name", default="?")


@celery.task(bind=True)
def receive_pull_request_event_task(_, event):
    """A bound Celery task to call receive_pull_request_event."""
    return receive_pull_request_event(event)


def receive_pull_request_event(event: EventDict) -> Dict:
    repo = _repo_name(event)
    number = glom(event, "pull_request.number", default=event.get("number"))
    user = glom(event, "pull_request.user.login", default="someone")
    logger.info(f"Received pull request {repo}#{number} {event.get('action')!r} by @{user}")
    return {"repo": repo, "number": number, "action": event.get("action")}


@celery.task(bind=True)
def receive_issue_comment_event_task(_, event):
    """A bound Celery task to call receive_issue_comment_event."""
    return receive_issue_comment_event(event)


def receive_issue_comment_event(event: EventDict) -> Dict:
    repo = _repo_name(event)
    number = glom(event, "issue.number", default=None)
    comment_id = glom(event, "comment.id", default=None)
    user = glom(event, "comment.user.login", default="someone")
    on_pr = "pull_request" in (event.get("issue") or {})
    logger.info(
        f"Received comment {comment_id} on {'pull request' if on_pr else 'issue'} "
        f"{repo}#{number} by @{user}"
    )
    return {
        "repo": repo,
        "number": number,
        "comment_id": comment_id,
        "on_pull_request": on_pr,
    }


@celery.task(bind=True)
def receive_installation_repositories_event_task(_, repositories_added, installation_id):
    """A bound Celery task to call receive_installation_repositories_event."""
    return receive_installation_repositories_event(repositories_added, installation_id)


def receive_installation_repositories_event(repositories_added: RepoList, installation_id: int) -> Dict:
    """
    Note the repositories newly added to a GitHub App installation.

    Arguments:
        repositories_added: the "repositories_added" list from the event.
        installation_id: the id of the installation they were added to.
    """
    names = [glom(repo, "full_name", default="?") for repo in repositories_added or []]
    logger.info(f"Installation {installation_id} added {len(names)} repositories: {', '.join(names)}")
    return {"installation_id": installation_id, "repositories": names}


@celery.task(bind=True)
def receive_push_event_task(_, event):
    """A bound Celery task to call receive_push_event."""
    return receive_push_event(event)


def receive_push_event(event: EventDict) -> Dict:
    repo = _repo_name(event)
    ref = event.get("ref")
    commits = event.get("commits") or []
    logger.info(f"Received push of {len(commits)} commits to {repo} {ref}, now at {event.get('after')}")
    return {"repo": repo, "ref": ref, "after": event.get("after"), "commits": len(commits)}


@celery.task(bind=True)
def receive_pull_request_review_event_task(_, event):
    """A bound Celery task to call receive_pull_request_review_event."""
    return receive_pull_request_review_event(event)


def receive_pull_request_review_event(event: EventDict) -> Dict:
    repo = _repo_name(event)
    number = glom(event, "pull_request.number", default=None)
    review_id = glom(event, "review.id", default=None)
    state = glom(event, "review.state", default=None)
    user = glom(event, "review.user.login", default="someone")
    logger.info(f"Received {state!r} review of {repo}#{number} by @{user}")
    return {"repo": repo, "number": number, "review_id": review_id, "state": state}
