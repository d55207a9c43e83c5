"""Lifecycle decisions for a pull request's review app."""

from reviewapps.models import Decision, EventAction

_REDEPLOY_ACTIONS = (EventAction.OPENED, EventAction.SYNCHRONIZE)


def needs_status_check(action: EventAction) -> bool:
    """Closing a PR destroys the app whatever its state, so no lookup is needed."""
    return action is not EventAction.CLOSED


def decide(action: EventAction, exists: bool) -> Decision:
    if action is EventAction.CLOSED:
        return Decision.DESTROY
    if not exists:
        return Decision.CREATE
    if action in _REDEPLOY_ACTIONS:
        return Decision.UPDATE
    return Decision.NOOP
