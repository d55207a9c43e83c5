"""Input resolution: options, platform environment and event data to deploy inputs."""

import os
from typing import Any, Mapping, Optional, Tuple

from reviewapps.constants import (
    DEFAULT_CONFIG_FILE,
    DEFAULT_ORG,
    DEFAULT_REGION,
    FALSE_VALUES,
    HA_DISABLED_FLAG,
    HA_ENABLED_FLAG,
    TRUE_VALUES,
)
from reviewapps.errors import ReviewAppError, UnsafeAppName
from reviewapps.errors_catalog import actionable_error
from reviewapps.models import (
    DeployRequest,
    EventContext,
    ResolvedInputs,
    ReviewAppIdentity,
    VmProfile,
)


def first_set(*candidates: Any, default: Any = None) -> Any:
    """Return the first candidate that is neither None nor an empty string."""
    for candidate in candidates:
        if candidate is None:
            continue
        if isinstance(candidate, str) and not candidate.strip():
            continue
        return candidate
    return default


def coerce_bool(value: Any, label: str, default: bool = False) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    clean = str(value).strip().lower()
    if clean == "":
        return default
    if clean in TRUE_VALUES:
        return True
    if clean in FALSE_VALUES:
        return False
    raise ReviewAppError(actionable_error("invalid_boolean", value=str(value), label=label))


def normalize_ha_flag(value: Any) -> str:
    """Accept a raw boolean or a pre-formatted ``--ha=...`` flag."""
    if isinstance(value, str) and value.strip().lower().startswith("--ha="):
        value = value.strip()[len("--ha="):]
    enabled = coerce_bool(value, "ha", default=False)
    return HA_ENABLED_FLAG if enabled else HA_DISABLED_FLAG


def split_key_values(value: Any, label: str) -> Tuple[str, ...]:
    """Split a newline- or space-separated KEY=VALUE list, keeping order."""
    if value is None:
        return ()
    if isinstance(value, (list, tuple)):
        entries = [str(item).strip() for item in value]
    else:
        entries = str(value).split()

    result = []
    for entry in entries:
        if not entry:
            continue
        key, sep, _ = entry.partition("=")
        if not sep or not key:
            raise ReviewAppError(actionable_error("invalid_key_value", label=label, entry=entry))
        result.append(entry)
    return tuple(result)


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    clean = str(value).strip()
    return clean or None


class InputResolver:
    """Derives the app identity and deploy request for one invocation.

    ``options`` holds the already-merged CLI/action inputs and settings file
    values. ``environ`` supplies the platform defaults (``FLY_REGION``,
    ``FLY_ORG``) and ``GITHUB_REPOSITORY``; it is passed in rather than read
    ambiently so each fallback rule stays explicit.
    """

    def __init__(self, options: Mapping[str, Any], environ: Optional[Mapping[str, str]] = None):
        self.options = options
        self.environ = environ if environ is not None else os.environ

    def resolve(self, event: EventContext) -> ResolvedInputs:
        identity = self.resolve_identity(event)
        request = self.resolve_request()

        working_directory = _optional_str(self.options.get("path"))
        if working_directory and not os.path.isdir(working_directory):
            raise ReviewAppError(f"Working directory not found: {working_directory}")

        return ResolvedInputs(
            identity=identity,
            event=event,
            request=request,
            secrets=split_key_values(self.options.get("secrets"), "secrets"),
            postgres_app=_optional_str(self.options.get("postgres")),
            working_directory=working_directory,
        )

    def resolve_identity(self, event: EventContext) -> ReviewAppIdentity:
        name = _optional_str(self.options.get("name"))
        if name is None:
            name = self.default_app_name(event)
        name = name.replace("_", "-")

        self.ensure_safe_name(name, event.pr_number)

        region = first_set(
            self.options.get("region"),
            self.environ.get("FLY_REGION"),
            default=DEFAULT_REGION,
        )
        org = first_set(
            self.options.get("org"),
            self.environ.get("FLY_ORG"),
            default=DEFAULT_ORG,
        )
        return ReviewAppIdentity(name=name, region=str(region).strip(), org=str(org).strip())

    def default_app_name(self, event: EventContext) -> str:
        owner, repo = self._repository(event)
        parts = [f"pr-{event.pr_number}"]
        parts.extend(part for part in (owner, repo) if part)
        return "-".join(parts)

    @staticmethod
    def ensure_safe_name(name: str, pr_number: int):
        if str(pr_number) not in name:
            raise UnsafeAppName(
                actionable_error("unsafe_app_name", name=name, pr_number=str(pr_number))
            )

    def resolve_request(self) -> DeployRequest:
        image = _optional_str(self.options.get("image"))
        dockerfile = _optional_str(self.options.get("dockerfile"))
        if image and dockerfile:
            raise ReviewAppError(actionable_error("conflicting_build_source"))

        vm_size = _optional_str(self.options.get("vm"))
        vm_profile = VmProfile(
            cpu_kind=_optional_str(self.options.get("cpukind")),
            cpu_count=_optional_str(self.options.get("cpus")),
            memory=_optional_str(self.options.get("memory")),
        )
        if vm_size and not vm_profile.is_empty():
            raise ReviewAppError(actionable_error("conflicting_vm_sizing"))

        config_path = first_set(self.options.get("config"), default=DEFAULT_CONFIG_FILE)

        return DeployRequest(
            config_path=str(config_path).strip(),
            image_ref=image,
            dockerfile_ref=dockerfile,
            build_args=split_key_values(self.options.get("build_args"), "build_args"),
            ha_flag=normalize_ha_flag(self.options.get("ha")),
            vm_size=vm_size,
            vm_profile=vm_profile,
            wait_for_completion=coerce_bool(self.options.get("wait"), "wait", default=False),
        )

    def _repository(self, event: EventContext) -> Tuple[Optional[str], Optional[str]]:
        full_name = _optional_str(self.environ.get("GITHUB_REPOSITORY"))
        if full_name and "/" in full_name:
            owner, _, repo = full_name.partition("/")
            return owner or None, repo or None
        return event.repository_owner, event.repository_name
