"""Settings for how the webhook gateway should behave."""

import os
from typing import Optional


def read_int_setting(setting_name: str) -> Optional[int]:
    """Read an integer setting, such as a GitHub account id.

    Returns:
        The integer value if the setting is present and not empty.
        None if the setting is missing.
    """
    value = os.environ.get(setting_name, "").strip()
    if value:
        return int(value)
    return None


# The numeric GitHub id of our own bot account. Events it caused are ignored,
# so that the bot's own activity never re-triggers processing.
GITHUB_BOT_USER_ID = read_int_setting("GITHUB_BOT_USER_ID")

# Only pushes to this ref are queued.
GITHUB_DEFAULT_BRANCH_REF = os.environ.get("GITHUB_DEFAULT_BRANCH_REF", "refs/heads/master")
