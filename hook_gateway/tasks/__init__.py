"""
Helpers for Celery tasks.
"""

from celery.utils.log import get_task_logger
from flask import Blueprint, jsonify

from hook_gateway import celery, log_level
from hook_gateway.utils import requires_auth


# Set up Celery logging.
logger = get_task_logger(__name__)
logger.setLevel(log_level)

# create a Flask blueprint for getting task status info
tasks = Blueprint('tasks', __name__)

@tasks.route('/status/<task_id>')
@requires_auth
def status(task_id):
    result = celery.AsyncResult(task_id)
    return jsonify({
        "status": result.state,
        "info": result.info,
    })
