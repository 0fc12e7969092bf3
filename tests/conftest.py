"""Automatically run by pytest to set up test infrastructure."""

import pytest

import hook_gateway
from hook_gateway.dispatcher import JOBS

from . import settings as test_settings


@pytest.fixture(autouse=True)
def settings_for_tests(mocker):
    for name, value in vars(test_settings).items():
        if name.isupper():
            mocker.patch(f"hook_gateway.settings.{name}", value)


@pytest.fixture
def app():
    return hook_gateway.create_app(config="testing")


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def queued_jobs(mocker):
    """
    Replace `delay` on every job task, so nothing really gets queued.

    Returns a dict mapping event types to the mocked `delay` methods.
    """
    delays = {}
    for event_type, task in JOBS.items():
        delays[event_type] = mocker.patch.object(
            task, "delay", return_value=mocker.Mock(id=f"{event_type.value}-task-id"),
        )
    return delays