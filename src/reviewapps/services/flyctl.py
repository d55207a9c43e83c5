"""flyctl invocation service for review-apps."""

import json
from typing import List, Optional, Sequence

from reviewapps.constants import FLYCTL_BIN
from reviewapps.errors import ReviewAppError
from reviewapps.models import (
    AppStatusSnapshot,
    CommandOutcome,
    DeployRequest,
    FailurePolicy,
    ReviewAppIdentity,
)


class FlyctlService:
    """Builds flyctl argument vectors and runs them through a CommandRunner."""

    def __init__(self, command_runner, logger, binary: str = FLYCTL_BIN, cwd: Optional[str] = None):
        self.command_runner = command_runner
        self.logger = logger
        self.binary = binary
        self.cwd = cwd

    def version(self) -> str:
        result = self.command_runner.run(
            [self.binary, "version"],
            capture_output=True,
            cwd=self.cwd,
        )
        return (result.stdout or "").strip()

    def app_exists(self, app: str) -> bool:
        result = self.command_runner.run(
            self.status_cmd(app),
            policy=FailurePolicy.PROBE,
            capture_output=True,
            cwd=self.cwd,
        )
        return result.returncode == 0

    def status(self, app: str) -> AppStatusSnapshot:
        result = self.command_runner.run(
            self.status_cmd(app, as_json=True),
            capture_output=True,
            cwd=self.cwd,
        )
        return self.parse_status(result.stdout)

    def launch(self, identity: ReviewAppIdentity, request: DeployRequest):
        self.command_runner.run(self.launch_cmd(identity, request), cwd=self.cwd)

    def deploy(self, identity: ReviewAppIdentity, request: DeployRequest):
        self.command_runner.run(self.deploy_cmd(identity, request), cwd=self.cwd)

    def destroy(self, app: str) -> CommandOutcome:
        return self.command_runner.best_effort(
            self.destroy_cmd(app),
            capture_output=True,
            cwd=self.cwd,
        )

    def import_secrets(self, app: str, secrets: Sequence[str]) -> CommandOutcome:
        return self.command_runner.best_effort(
            self.secrets_import_cmd(app),
            capture_output=True,
            cwd=self.cwd,
            input_text="\n".join(secrets) + "\n",
        )

    def attach_postgres(self, app: str, postgres_app: str) -> CommandOutcome:
        return self.command_runner.best_effort(
            self.postgres_attach_cmd(app, postgres_app),
            capture_output=True,
            cwd=self.cwd,
        )

    def status_cmd(self, app: str, as_json: bool = False) -> List[str]:
        cmd = [self.binary, "status", "--app", app]
        if as_json:
            cmd.append("--json")
        return cmd

    def launch_cmd(self, identity: ReviewAppIdentity, request: DeployRequest) -> List[str]:
        cmd = [
            self.binary,
            "launch",
            "--no-deploy",
            "--copy-config",
            "--config",
            request.config_path,
            "--name",
            identity.name,
            "--regions",
            identity.region,
            "--org",
            identity.org,
            request.ha_flag,
        ]
        cmd.extend(self._build_source_args(request))
        cmd.extend(self._vm_args(request))
        cmd.extend(self._build_arg_flags(request))
        return cmd

    def deploy_cmd(self, identity: ReviewAppIdentity, request: DeployRequest) -> List[str]:
        cmd = [
            self.binary,
            "deploy",
            "--config",
            request.config_path,
            "--app",
            identity.name,
            "--regions",
            identity.region,
            "--strategy",
            "immediate",
            "--remote-only",
            request.ha_flag,
        ]
        if request.detach:
            cmd.append("--detach")
        cmd.extend(self._build_source_args(request))
        cmd.extend(self._vm_args(request))
        cmd.extend(self._build_arg_flags(request))
        return cmd

    def destroy_cmd(self, app: str) -> List[str]:
        return [self.binary, "apps", "destroy", app, "-y"]

    def secrets_import_cmd(self, app: str) -> List[str]:
        return [self.binary, "secrets", "import", "--app", app]

    def postgres_attach_cmd(self, app: str, postgres_app: str) -> List[str]:
        return [self.binary, "postgres", "attach", postgres_app, "--app", app]

    @staticmethod
    def parse_status(raw: Optional[str]) -> AppStatusSnapshot:
        try:
            data = json.loads(raw or "")
        except json.JSONDecodeError as exc:
            raise ReviewAppError(f"Could not parse flyctl status output: {exc}") from exc
        if not isinstance(data, dict):
            raise ReviewAppError("flyctl status output is not a JSON object.")

        return AppStatusSnapshot(
            exists=True,
            hostname=str(data.get("Hostname") or ""),
            id=str(data.get("ID") or ""),
        )

    @staticmethod
    def _build_source_args(request: DeployRequest) -> List[str]:
        if request.image_ref:
            return ["--image", request.image_ref]
        if request.dockerfile_ref:
            return ["--dockerfile", request.dockerfile_ref]
        return []

    @staticmethod
    def _vm_args(request: DeployRequest) -> List[str]:
        if request.vm_size:
            return ["--vm-size", request.vm_size]

        args = []
        profile = request.vm_profile
        if profile.cpu_kind:
            args.extend(["--vm-cpu-kind", profile.cpu_kind])
        if profile.cpu_count:
            args.extend(["--vm-cpus", profile.cpu_count])
        if profile.memory:
            args.extend(["--vm-memory", profile.memory])
        return args

    @staticmethod
    def _build_arg_flags(request: DeployRequest) -> List[str]:
        args = []
        for build_arg in request.build_args:
            args.extend(["--build-arg", build_arg])
        return args
