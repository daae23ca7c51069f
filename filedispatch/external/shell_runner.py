import logging
import os
import subprocess
from typing import Optional

logger = logging.getLogger(__name__)


class SubprocessShellRunner:
    """Exécute une condition shell via `sh -c`; le chemin est passé dans FILE_PATH"""

    def __init__(self, timeout: Optional[float] = 30.0, shell: str = "sh"):
        self.timeout = timeout
        self.shell = shell

    def run(self, command: str, path: str) -> bool:
        env = {**os.environ, "FILE_PATH": path}
        try:
            completed = subprocess.run(
                [self.shell, "-c", command],
                env=env,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                timeout=self.timeout,
                check=False,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            logger.warning(f"Shell condition failed to run for {path}: {e}")
            return False
        return completed.returncode == 0
