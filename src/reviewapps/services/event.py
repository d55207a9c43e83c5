"""Pull request event payload parsing."""

import json
from pathlib import Path
from typing import Any, Dict, Optional

from reviewapps.errors import MissingPRNumber, ReviewAppError
from reviewapps.errors_catalog import actionable_error
from reviewapps.models import EventAction, EventContext


class EventService:
    """Reads the webhook payload GitHub writes for the triggering event."""

    def __init__(self, logger):
        self.logger = logger

    def load(self, event_path: str) -> EventContext:
        payload = self.read_payload(event_path)
        return self.parse(payload)

    def read_payload(self, event_path: str) -> Dict[str, Any]:
        path = Path(event_path)
        try:
            with path.open("r", encoding="utf-8") as handle:
                payload = json.load(handle)
        except (OSError, json.JSONDecodeError) as exc:
            raise ReviewAppError(
                actionable_error("event_file_unreadable", path=event_path, reason=str(exc))
            ) from exc

        if not isinstance(payload, dict):
            raise ReviewAppError(
                actionable_error(
                    "event_file_unreadable",
                    path=event_path,
                    reason="payload is not a JSON object",
                )
            )
        return payload

    def parse(self, payload: Dict[str, Any]) -> EventContext:
        pr_number = self._pr_number(payload.get("number"))
        raw_action = payload.get("action")
        if raw_action is not None:
            raw_action = str(raw_action)

        repository = payload.get("repository")
        owner: Optional[str] = None
        name: Optional[str] = None
        if isinstance(repository, dict):
            name = repository.get("name") or None
            owner_data = repository.get("owner")
            if isinstance(owner_data, dict):
                owner = owner_data.get("login") or None

        action = EventAction.parse(raw_action)
        self.logger.debug("Event: PR #%s action=%s (%s)", pr_number, raw_action, action.value)
        return EventContext(
            action=action,
            pr_number=pr_number,
            repository_owner=owner,
            repository_name=name,
            raw_action=raw_action,
        )

    @staticmethod
    def _pr_number(value: Any) -> int:
        if isinstance(value, bool):
            raise MissingPRNumber(actionable_error("missing_pr_number"))
        if isinstance(value, int):
            return value
        if isinstance(value, str) and value.strip().isdigit():
            return int(value.strip())
        raise MissingPRNumber(actionable_error("missing_pr_number"))
