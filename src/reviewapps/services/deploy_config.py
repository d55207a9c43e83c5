"""Deployment config file preservation around provisioning."""

import os
from contextlib import contextmanager
from typing import Iterator, Optional

from reviewapps.errors import ReviewAppError


class DeploymentConfigService:
    """Snapshots and restores the deployment config file.

    ``flyctl launch`` rewrites parts of the config it copies (notably the
    build arguments section). The snapshot taken before provisioning is put
    back byte for byte once the call returns, whether it succeeded or not.
    """

    def __init__(self, logger):
        self.logger = logger

    def snapshot(self, path: str) -> Optional[bytes]:
        if not os.path.exists(path):
            return None
        try:
            with open(path, "rb") as file_obj:
                return file_obj.read()
        except OSError as exc:
            raise ReviewAppError(f"Could not read deployment config '{path}': {exc}") from exc

    def restore(self, path: str, content: Optional[bytes]):
        if content is None:
            self.logger.debug("No deployment config existed at %s before provisioning.", path)
            return
        try:
            with open(path, "wb") as file_obj:
                file_obj.write(content)
        except OSError as exc:
            raise ReviewAppError(f"Could not restore deployment config '{path}': {exc}") from exc
        self.logger.debug("Restored deployment config %s", path)

    @contextmanager
    def preserved(self, path: str) -> Iterator[Optional[bytes]]:
        content = self.snapshot(path)
        try:
            yield content
        finally:
            self.restore(path, content)
