import logging
import os
from typing import Any, Dict, Mapping, Optional

from rich.console import Console

from .constants import DEFAULT_EVENT_PATH, FLYCTL_BIN
from .controller import decide, needs_status_check
from .errors import CommandFailedError, ReviewAppError
from .executor import ActionExecutor
from .models import Decision, ExecutionResult, ResolvedInputs
from .services.command_runner import CommandRunner
from .services.deploy_config import DeploymentConfigService
from .services.event import EventService
from .services.flyctl import FlyctlService
from .services.outputs import OutputService
from .services.resolver import InputResolver

console = Console()
logger = logging.getLogger("reviewapps")


class ReviewAppManager:
    def __init__(
        self,
        options: Optional[Dict[str, Any]] = None,
        event_path: str = DEFAULT_EVENT_PATH,
        github_output: Optional[str] = None,
        flyctl_bin: str = FLYCTL_BIN,
        dry_run: bool = False,
        environ: Optional[Mapping[str, str]] = None,
        command_timeout: Optional[float] = None,
    ):
        self.options = dict(options or {})
        self.event_path = event_path
        self.github_output = github_output
        self.dry_run = dry_run
        self.environ = environ if environ is not None else os.environ

        self.command_runner = CommandRunner(logger=logger, default_timeout=command_timeout)
        self.event_service = EventService(logger=logger)
        self.resolver = InputResolver(self.options, environ=self.environ)
        self.flyctl_service = FlyctlService(
            command_runner=self.command_runner,
            logger=logger,
            binary=flyctl_bin,
        )
        self.deploy_config_service = DeploymentConfigService(logger=logger)
        self.executor = ActionExecutor(
            flyctl_service=self.flyctl_service,
            deploy_config_service=self.deploy_config_service,
            logger=logger,
            console=console,
        )
        self.output_service = OutputService(output_path=github_output, logger=logger)

    def resolve_inputs(self) -> ResolvedInputs:
        event = self.event_service.load(self.event_path)
        inputs = self.resolver.resolve(event)
        self.flyctl_service.cwd = inputs.working_directory
        logger.info(
            "Review app %s (PR #%s, event '%s', region %s, org %s)",
            inputs.identity.name,
            event.pr_number,
            event.raw_action,
            inputs.identity.region,
            inputs.identity.org,
        )
        return inputs

    def validate_flyctl(self):
        flyctl_version = self.flyctl_service.version()
        logger.info("Using %s", flyctl_version or self.flyctl_service.binary)

    def decide(self, inputs: ResolvedInputs) -> Decision:
        exists = False
        if needs_status_check(inputs.event.action):
            exists = self.flyctl_service.app_exists(inputs.identity.name)
            logger.info("App %s %s.", inputs.identity.name, "exists" if exists else "does not exist")
        decision = decide(inputs.event.action, exists)
        console.print(f"[bold blue]Decision: {decision.value}[/bold blue]")
        return decision

    def print_plan(self, decision: Decision, inputs: ResolvedInputs):
        console.print("[yellow]Dry run: no changes will be made.[/yellow]")
        for cmd in self.executor.plan(decision, inputs):
            console.print(f"  {' '.join(cmd)}", markup=False)

    def build_outputs(self, inputs: ResolvedInputs, result: ExecutionResult) -> Dict[str, str]:
        if result.decision is Decision.DESTROY:
            return {"name": inputs.identity.name, "message": result.message}
        return {
            "hostname": result.snapshot.hostname,
            "url": result.snapshot.url,
            "id": result.snapshot.id,
            "name": inputs.identity.name,
            "message": result.message,
        }

    def run(self) -> int:
        try:
            logger.info("Starting review-apps...")
            inputs = self.resolve_inputs()
            self.validate_flyctl()
            decision = self.decide(inputs)

            if self.dry_run:
                self.print_plan(decision, inputs)
                return 0

            result = self.executor.execute(decision, inputs)
            self.output_service.write(self.build_outputs(inputs, result))
            console.print(f"[green]{result.message}[/green]")
            return 0

        except KeyboardInterrupt:
            console.print("[bold red]Operation cancelled by user.[/bold red]")
            logger.info("Operation cancelled by user")
            return 1
        except CommandFailedError as exc:
            console.print(f"[bold red]Error:[/bold red] {exc}")
            logger.error("Command exited with status %s", exc.returncode)
            return 1
        except ReviewAppError as exc:
            console.print(f"[bold red]Error:[/bold red] {exc}")
            logger.error(str(exc))
            return 1
        except Exception as exc:
            console.print(f"[bold red]Unexpected error:[/bold red] {exc}")
            logger.exception("Unexpected error")
            return 1
