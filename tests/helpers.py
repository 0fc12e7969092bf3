"""Helpers for tests."""

import copy
import hashlib
import hmac
import json
from pathlib import Path
from typing import Dict, Optional

from .settings import webhook_secret

FIXTURES_DIR = Path(__file__).parent / "fixtures"

# GitHub delivers webhooks over HTTPS, and the app redirects plain http.
BASE_URL = "https://localhost"


def json_fixture(name: str, **overrides) -> Dict:
    """
    Read a canned webhook payload from tests/fixtures.

    Top-level keys can be replaced with keyword arguments.
    """
    with open(FIXTURES_DIR / f"{name}.json") as f:
        payload = json.load(f)
    payload.update(copy.deepcopy(overrides))
    return payload


def make_signature(secret: str, payload: bytes, algorithm: str = "sha256") -> str:
    """Compute a signature from a secret and a payload."""
    digestmod = getattr(hashlib, algorithm)
    return f"{algorithm}=" + hmac.new(secret.encode(), msg=payload, digestmod=digestmod).hexdigest()


def post_webhook(client, route: str, payload, event: Optional[str] = None, secret: str = webhook_secret):
    """
    POST a signed webhook payload to one of our routes, as GitHub would.

    `payload` can be bytes, which are sent as-is, or anything JSON-able.
    `event` is the value of the X-GitHub-Event header, if any.
    """
    if isinstance(payload, bytes):
        data = payload
    else:
        data = json.dumps(payload).encode("utf8")
    headers = {
        "Content-Type": "application/json",
        "X-GitHub-Delivery": "72d3162e-cc78-11e3-81ab-4c9367dc0958",
        "X-Hub-Signature-256": make_signature(secret, data),
    }
    if event is not None:
        headers["X-GitHub-Event"] = event
    return client.post(f"/webhooks/{route}", data=data, headers=headers, base_url=BASE_URL)


def total_submissions(queued_jobs) -> int:
    """How many jobs were queued, of any kind."""
    return sum(delay.call_count for delay in queued_jobs.values())
