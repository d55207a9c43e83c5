"""GitHub Actions step output writer."""

import uuid
from pathlib import Path
from typing import Dict, Optional

from reviewapps.errors import ReviewAppError


class OutputService:
    """Appends ``key=value`` pairs to the file named by ``GITHUB_OUTPUT``."""

    def __init__(self, output_path: Optional[str], logger):
        self.output_path = output_path
        self.logger = logger

    def write(self, outputs: Dict[str, str]):
        for key, value in outputs.items():
            self.logger.info("Output %s=%s", key, value)

        if not self.output_path:
            self.logger.debug("GITHUB_OUTPUT is not set; outputs were only logged.")
            return

        path = Path(self.output_path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with path.open("a", encoding="utf-8") as handle:
                for key, value in outputs.items():
                    handle.write(self.format_entry(key, value))
        except OSError as exc:
            raise ReviewAppError(f"Could not write outputs to '{self.output_path}': {exc}") from exc

    @staticmethod
    def format_entry(key: str, value: str) -> str:
        if "\n" not in value:
            return f"{key}={value}\n"
        delimiter = f"ghadelimiter_{uuid.uuid4().hex}"
        return f"{key}<<{delimiter}\n{value}\n{delimiter}\n"
