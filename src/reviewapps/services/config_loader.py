"""Settings file loader for review-apps."""

from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from reviewapps.errors import ReviewAppError


class ConfigLoader:
    """Loads YAML settings files used as defaults for CLI options."""

    SUPPORTED_KEYS = {
        "path",
        "name",
        "region",
        "org",
        "image",
        "dockerfile",
        "config",
        "build_args",
        "ha",
        "wait",
        "vm",
        "cpukind",
        "cpus",
        "memory",
        "secrets",
        "postgres",
        "verbose",
        "log_file",
        "dry_run",
    }

    def load(self, settings_path: Optional[str]) -> Dict[str, Any]:
        if not settings_path:
            return {}

        path = Path(settings_path)
        if not path.exists():
            raise ReviewAppError(f"Settings file not found: {settings_path}")

        try:
            parsed = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (yaml.YAMLError, OSError) as exc:
            raise ReviewAppError(f"Invalid settings file '{settings_path}': {exc}") from exc

        if parsed is None:
            return {}
        if not isinstance(parsed, dict):
            raise ReviewAppError("Settings file must contain a YAML mapping at the root.")

        unknown = sorted(set(parsed.keys()) - self.SUPPORTED_KEYS)
        if unknown:
            unknown_list = ", ".join(unknown)
            raise ReviewAppError(f"Unknown settings keys: {unknown_list}")

        return parsed
