"""Types specific to hook_gateway."""

from typing import Dict, List

# A webhook event body as described by a JSON object.
EventDict = Dict

# A repository as listed in an installation_repositories event.
RepoDict = Dict

# The "repositories_added" list of an installation_repositories event.
RepoList = List[RepoDict]
