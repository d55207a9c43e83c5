"""Shared constants for review-apps."""

FLYCTL_BIN = "flyctl"

DEFAULT_EVENT_PATH = "/github/workflow/event.json"
DEFAULT_SETTINGS_FILE = ".review-apps.yml"
DEFAULT_CONFIG_FILE = "fly.toml"

DEFAULT_REGION = "ord"
DEFAULT_ORG = "personal"

HA_ENABLED_FLAG = "--ha=true"
HA_DISABLED_FLAG = "--ha=false"

TRUE_VALUES = frozenset({"true", "1", "yes", "on"})
FALSE_VALUES = frozenset({"false", "0", "no", "off", ""})

MESSAGE_DESTROYED = "Review app deleted."
MESSAGE_CREATED = "Review app created. It may take a few minutes for the app to deploy."
MESSAGE_UPDATED = "Review app updated. It may take a few minutes for your changes to be deployed."
MESSAGE_NOOP = "Review app unchanged for event '{action}'."
