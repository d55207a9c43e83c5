"""Executes a lifecycle decision against the hosting platform."""

from typing import List

from reviewapps.constants import MESSAGE_CREATED, MESSAGE_DESTROYED, MESSAGE_NOOP, MESSAGE_UPDATED
from reviewapps.models import AppStatusSnapshot, Decision, ExecutionResult, ResolvedInputs


class ActionExecutor:
    """Runs the flyctl calls implied by a Decision."""

    def __init__(self, flyctl_service, deploy_config_service, logger, console):
        self.flyctl = flyctl_service
        self.deploy_config = deploy_config_service
        self.logger = logger
        self.console = console

    def execute(self, decision: Decision, inputs: ResolvedInputs) -> ExecutionResult:
        app = inputs.identity.name

        if decision is Decision.DESTROY:
            self.destroy(inputs)
            return ExecutionResult(decision, AppStatusSnapshot.absent(), MESSAGE_DESTROYED)

        if decision is Decision.CREATE:
            self.create(inputs)
            message = MESSAGE_CREATED
        elif decision is Decision.UPDATE:
            self.update(inputs)
            message = MESSAGE_UPDATED
        else:
            self.console.print(f"[yellow]Nothing to do for event '{inputs.event.raw_action}'.[/yellow]")
            message = MESSAGE_NOOP.format(action=inputs.event.raw_action or "unknown")

        snapshot = self.flyctl.status(app)
        return ExecutionResult(decision, snapshot, message)

    def destroy(self, inputs: ResolvedInputs):
        app = inputs.identity.name
        self.console.print(f"[blue]Destroying review app {app}...[/blue]")
        outcome = self.flyctl.destroy(app)
        if outcome.succeeded:
            self.console.print(f"[green]Review app {app} destroyed.[/green]")
        else:
            self.logger.info("App %s was not destroyed (already absent?): %s", app, outcome.stderr)

    def create(self, inputs: ResolvedInputs):
        identity = inputs.identity
        self.console.print(f"[blue]Provisioning review app {identity.name}...[/blue]")
        with self.deploy_config.preserved(inputs.config_file):
            self.flyctl.launch(identity, inputs.request)

        self.import_secrets(inputs)

        if inputs.postgres_app:
            outcome = self.flyctl.attach_postgres(identity.name, inputs.postgres_app)
            if not outcome.succeeded:
                self.logger.warning(
                    "Could not attach %s to %s; continuing (it may already be attached).",
                    inputs.postgres_app,
                    identity.name,
                )

        self.deploy(inputs)

    def update(self, inputs: ResolvedInputs):
        self.import_secrets(inputs)
        self.deploy(inputs)

    def import_secrets(self, inputs: ResolvedInputs):
        if not inputs.secrets:
            return
        outcome = self.flyctl.import_secrets(inputs.identity.name, inputs.secrets)
        if not outcome.succeeded:
            self.logger.warning("Secrets import for %s failed; continuing.", inputs.identity.name)

    def deploy(self, inputs: ResolvedInputs):
        self.console.print(f"[blue]Deploying review app {inputs.identity.name}...[/blue]")
        self.flyctl.deploy(inputs.identity, inputs.request)

    def plan(self, decision: Decision, inputs: ResolvedInputs) -> List[List[str]]:
        """Commands ``execute`` would run for this decision, in order."""
        app = inputs.identity.name
        if decision is Decision.DESTROY:
            return [self.flyctl.destroy_cmd(app)]

        commands = []
        if decision is Decision.CREATE:
            commands.append(self.flyctl.launch_cmd(inputs.identity, inputs.request))
        if decision in (Decision.CREATE, Decision.UPDATE):
            if inputs.secrets:
                commands.append(self.flyctl.secrets_import_cmd(app))
            if decision is Decision.CREATE and inputs.postgres_app:
                commands.append(self.flyctl.postgres_attach_cmd(app, inputs.postgres_app))
            commands.append(self.flyctl.deploy_cmd(inputs.identity, inputs.request))
        commands.append(self.flyctl.status_cmd(app, as_json=True))
        return commands
