"""
Generic utilities.
"""

import hashlib
import hmac
import os
from functools import wraps
from typing import Optional

import sentry_sdk
from flask import jsonify, request, Response, url_for

from hook_gateway import logger


# The digests GitHub uses to sign webhook payloads, by signature prefix.
SIGNATURE_DIGESTS = {
    "sha1": hashlib.sha1,
    "sha256": hashlib.sha256,
}


def _check_auth(username, password):
    """
    Checks if a username / password combination is valid.
    """
    return (
        username == os.environ.get('HTTP_BASIC_AUTH_USERNAME') and
        password == os.environ.get('HTTP_BASIC_AUTH_PASSWORD')
    )

def _authenticate():
    """
    Sends a 401 response that enables basic auth
    """
    return Response(
        'Could not verify your access level for that URL.\n'
        'You have to login with proper credentials', 401,
        {'WWW-Authenticate': 'Basic realm="Login Required"'}
    )

def requires_auth(f):
    @wraps(f)
    def decorated(*args, **kwargs):
        auth = request.authorization
        if not auth or not _check_auth(auth.username, auth.password):
            return _authenticate()
        return f(*args, **kwargs)
    return decorated


def is_valid_payload(secret: Optional[str], signature: Optional[str], payload: bytes) -> bool:
    """
    Ensure payload is valid according to signature.

    Make sure the payload hashes to the signature as calculated using
    the shared secret.

    Arguments:
        secret (str): The shared secret
        signature (str): Signature as calculated by the server, sent in
            the request, like "sha256=0123abcd...".  Both the "sha1" and
            "sha256" forms are understood.
        payload (bytes): The request payload

    Returns:
        bool: Is the payload legit?  Without a secret or a signature, it isn't.
    """
    if not secret or not signature:
        return False
    algorithm, _, _ = signature.partition("=")
    digestmod = SIGNATURE_DIGESTS.get(algorithm)
    if digestmod is None:
        return False
    mac = hmac.new(secret.encode(), msg=payload, digestmod=digestmod)
    digest = f"{algorithm}={mac.hexdigest()}"
    return hmac.compare_digest(digest.encode(), signature.encode())


def queued_response(result):
    """
    Make the HTTP response for a task that has been queued.

    The response points to the task status view for the queued job.
    """
    status_url = url_for("tasks.status", task_id=result.id, _external=True)
    logger.info(f"Job status URL: {status_url}")
    resp = jsonify({"message": "queued", "status_url": status_url})
    resp.status_code = 202
    resp.headers["Location"] = status_url
    return resp


def sentry_extra_context(data_dict):
    """Apply the keys and values from data_dict to the Sentry extra context."""
    for key, value in data_dict.items():
        sentry_sdk.set_extra(key, value)
