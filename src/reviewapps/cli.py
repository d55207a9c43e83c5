import logging
import os

import click
from rich.logging import RichHandler

from .constants import DEFAULT_EVENT_PATH, DEFAULT_SETTINGS_FILE, FLYCTL_BIN
from .core import ReviewAppManager, ReviewAppError
from .services.config_loader import ConfigLoader

# key -> (flag, help); each is also read from INPUT_<KEY> and the settings file
INPUT_OPTIONS = {
    "path": ("--path", "Working directory holding the deployment config."),
    "name": ("--name", "Explicit app name. Must contain the PR number."),
    "region": ("--region", "Region to launch the app in (falls back to FLY_REGION, then ord)."),
    "org": ("--org", "Organization to launch the app in (falls back to FLY_ORG, then personal)."),
    "image": ("--image", "Pre-built image to deploy instead of building one."),
    "dockerfile": ("--dockerfile", "Dockerfile to build from."),
    "config": ("--config", "Deployment config file, relative to --path (default: fly.toml)."),
    "build_args": ("--build-args", "Space or newline separated KEY=VALUE build arguments."),
    "ha": ("--ha", "High availability: true/false or a pre-formatted --ha=... flag."),
    "wait": ("--wait", "Wait for the deploy to finish instead of detaching (true/false)."),
    "vm": ("--vm", "VM size label."),
    "cpukind": ("--cpukind", "VM CPU kind (shared or performance)."),
    "cpus": ("--cpus", "Number of VM CPUs."),
    "memory": ("--memory", "VM memory."),
    "secrets": ("--secrets", "Space or newline separated KEY=VALUE secrets to import."),
    "postgres": ("--postgres", "Postgres app to attach on first deploy."),
}


def _resolve_option(cli_value, config, key, default=None):
    if cli_value is not None and cli_value != "":
        return cli_value
    if key in config:
        return config[key]
    return default


def _input_options(func):
    for key, (flag, help_text) in reversed(list(INPUT_OPTIONS.items())):
        func = click.option(
            flag,
            key,
            required=False,
            envvar=f"INPUT_{key.upper()}",
            help=help_text,
        )(func)
    return func


logging.basicConfig(
    level="INFO",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[RichHandler(rich_tracebacks=True, show_level=False, show_path=False)],
)


@click.command()
@_input_options
@click.option(
    "--event-path",
    envvar="GITHUB_EVENT_PATH",
    default=DEFAULT_EVENT_PATH,
    show_default=True,
    type=click.Path(),
    help="Pull request webhook payload.",
)
@click.option(
    "--github-output",
    envvar="GITHUB_OUTPUT",
    required=False,
    type=click.Path(),
    help="File the step outputs are appended to.",
)
@click.option(
    "--flyctl",
    "flyctl_bin",
    envvar="FLYCTL_BIN",
    default=FLYCTL_BIN,
    show_default=True,
    help="flyctl executable.",
)
@click.option(
    "--settings",
    required=False,
    type=click.Path(),
    help=f"Path to a YAML settings file. Defaults to {DEFAULT_SETTINGS_FILE} if present.",
)
@click.option(
    "--command-timeout",
    required=False,
    type=float,
    default=None,
    help="Timeout in seconds for each flyctl call.",
)
@click.option("--verbose", is_flag=True, default=None, help="Enable verbose logging")
@click.option("--log-file", type=click.Path(), help="Path to log file")
@click.option(
    "--dry-run",
    is_flag=True,
    default=None,
    help="Resolve inputs and print the planned flyctl calls without changing anything.",
)
def main(
    event_path,
    github_output,
    flyctl_bin,
    settings,
    command_timeout,
    verbose,
    log_file,
    dry_run,
    **inputs,
):
    """Create, update or destroy the Fly.io review app for a pull request."""
    logger = logging.getLogger("reviewapps")

    try:
        config_loader = ConfigLoader()
        resolved_settings = settings
        if resolved_settings is None:
            default_settings_path = os.path.join(os.getcwd(), DEFAULT_SETTINGS_FILE)
            if os.path.exists(default_settings_path):
                resolved_settings = default_settings_path

        settings_values = config_loader.load(resolved_settings)
    except ReviewAppError as exc:
        raise click.ClickException(str(exc)) from exc

    options = {key: _resolve_option(inputs.get(key), settings_values, key) for key in INPUT_OPTIONS}
    verbose = bool(_resolve_option(verbose, settings_values, "verbose", default=False))
    log_file = _resolve_option(log_file, settings_values, "log_file")
    dry_run = bool(_resolve_option(dry_run, settings_values, "dry_run", default=False))

    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.setLevel(logging.DEBUG)
    else:
        logger.setLevel(logging.INFO)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
        file_handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(message)s"))
        logger.addHandler(file_handler)

    manager = ReviewAppManager(
        options=options,
        event_path=event_path,
        github_output=github_output,
        flyctl_bin=flyctl_bin,
        dry_run=dry_run,
        command_timeout=command_timeout,
    )

    raise SystemExit(manager.run())


if __name__ == "__main__":
    main()
