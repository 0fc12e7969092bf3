"""Made-up settings to use during tests."""

# These should be in the in-memory form ready to patch into hook_gateway.settings

GITHUB_BOT_USER_ID = 1234
GITHUB_DEFAULT_BRANCH_REF = "refs/heads/master"

# Not a setting: the webhook secret from hook_gateway.config.TestingConfig.
webhook_secret = "test webhook secret"
