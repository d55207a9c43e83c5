"""Shared domain models for review-apps."""

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from reviewapps.constants import HA_DISABLED_FLAG, HA_ENABLED_FLAG


class EventAction(str, Enum):
    OPENED = "opened"
    SYNCHRONIZE = "synchronize"
    CLOSED = "closed"
    OTHER = "other"

    @classmethod
    def parse(cls, raw: Optional[str]) -> "EventAction":
        for member in (cls.OPENED, cls.SYNCHRONIZE, cls.CLOSED):
            if raw == member.value:
                return member
        return cls.OTHER


class Decision(str, Enum):
    DESTROY = "destroy"
    CREATE = "create"
    UPDATE = "update"
    NOOP = "noop"


class FailurePolicy(str, Enum):
    """How a command failure is treated at a given call site."""

    FATAL = "fatal"
    IGNORE = "ignore"
    # non-zero exit is an answer, not a failure
    PROBE = "probe"


@dataclass(frozen=True)
class EventContext:
    """The pull request event fields the run depends on."""

    action: EventAction
    pr_number: int
    repository_owner: Optional[str] = None
    repository_name: Optional[str] = None
    raw_action: Optional[str] = None


@dataclass(frozen=True)
class ReviewAppIdentity:
    name: str
    region: str
    org: str


@dataclass(frozen=True)
class VmProfile:
    cpu_kind: Optional[str] = None
    cpu_count: Optional[str] = None
    memory: Optional[str] = None

    def is_empty(self) -> bool:
        return not (self.cpu_kind or self.cpu_count or self.memory)


@dataclass(frozen=True)
class DeployRequest:
    """Build and deploy parameters shared by provisioning and deploys."""

    config_path: str
    image_ref: Optional[str] = None
    dockerfile_ref: Optional[str] = None
    build_args: Tuple[str, ...] = ()
    ha_flag: str = HA_DISABLED_FLAG
    vm_size: Optional[str] = None
    vm_profile: VmProfile = field(default_factory=VmProfile)
    wait_for_completion: bool = False

    @property
    def detach(self) -> bool:
        return not self.wait_for_completion

    @property
    def ha_enabled(self) -> bool:
        return self.ha_flag == HA_ENABLED_FLAG


@dataclass(frozen=True)
class ResolvedInputs:
    identity: ReviewAppIdentity
    event: EventContext
    request: DeployRequest
    secrets: Tuple[str, ...] = ()
    postgres_app: Optional[str] = None
    working_directory: Optional[str] = None

    @property
    def config_file(self) -> str:
        """Deployment config location as seen from the invoking process."""
        if self.working_directory and not os.path.isabs(self.request.config_path):
            return os.path.join(self.working_directory, self.request.config_path)
        return self.request.config_path


@dataclass(frozen=True)
class AppStatusSnapshot:
    exists: bool
    hostname: str = ""
    id: str = ""

    @property
    def url(self) -> str:
        return f"https://{self.hostname}" if self.hostname else ""

    @classmethod
    def absent(cls) -> "AppStatusSnapshot":
        return cls(exists=False)


@dataclass(frozen=True)
class CommandOutcome:
    succeeded: bool
    returncode: int
    stderr: str = ""


@dataclass(frozen=True)
class ExecutionResult:
    decision: Decision
    snapshot: AppStatusSnapshot
    message: str
