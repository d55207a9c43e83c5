"""Actionable error catalog for review-apps."""

from typing import Dict

_ERROR_MESSAGES: Dict[str, Dict[str, str]] = {
    "missing_pr_number": {
        "what": "This action only supports pull_request events; the event payload has no PR number.",
        "next": "Trigger the workflow on `pull_request` events only.",
    },
    "unsafe_app_name": {
        "what": "For safety, the app name '{name}' must contain the PR number {pr_number}.",
        "next": "Include the PR number in the `name` input, e.g. `myapp-pr-{pr_number}`.",
    },
    "event_file_unreadable": {
        "what": "Could not read the event payload '{path}': {reason}",
        "next": "Run inside GitHub Actions or pass `--event-path` to a pull_request payload.",
    },
    "conflicting_build_source": {
        "what": "Both an image and a Dockerfile were configured.",
        "next": "Set either `image` or `dockerfile`, not both.",
    },
    "conflicting_vm_sizing": {
        "what": "A VM size label was combined with explicit cpukind/cpus/memory values.",
        "next": "Use either `vm` or the `cpukind`/`cpus`/`memory` inputs.",
    },
    "invalid_key_value": {
        "what": "Invalid {label} entry '{entry}'. Entries must look like KEY=VALUE.",
        "next": "Separate entries with spaces or newlines.",
    },
    "invalid_boolean": {
        "what": "Invalid value '{value}' for {label}.",
        "next": "Use `true` or `false`.",
    },
}


def actionable_error(code: str, **kwargs: str) -> str:
    if code not in _ERROR_MESSAGES:
        raise KeyError(f"Unknown error catalog key: {code}")

    template = _ERROR_MESSAGES[code]
    what = template["what"].format(**kwargs)
    next_step = template["next"].format(**kwargs)
    return f"{what} Suggested action: {next_step}"
