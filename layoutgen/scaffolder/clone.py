"""Git clone collaborator used for clone-target modules."""

from __future__ import annotations

from pathlib import Path

from layoutgen.config import Config
from layoutgen.utils import run_command


class CloneFailure(Exception):
    """Raised when a repository cannot be cloned into a clone target."""

    def __init__(self, url: str, target: str | Path, stderr: str = ""):
        self.url = url
        self.target = Path(target)
        self.stderr = stderr
        message = f"Failed to clone {url} into {self.target}"
        if stderr:
            message = f"{message}: {stderr}"
        super().__init__(message)


class GitCloner:
    """Clones repositories by shelling out to ``git clone``."""

    def __init__(self, git_executable: str = "git", timeout: int = 300) -> None:
        self.git_executable = git_executable
        self.timeout = timeout

    @classmethod
    def from_config(cls, config: Config) -> GitCloner:
        return cls(git_executable=config.git_executable, timeout=config.clone_timeout)

    def clone(self, url: str, target: str | Path) -> None:
        """Clone *url* into *target* and wait for git to finish.

        Raises:
            CloneFailure: If git cannot be launched, exits non-zero, or
                times out.
        """
        target = Path(target)
        cmd = [self.git_executable, "clone", url, str(target)]
        try:
            returncode, _, stderr = run_command(cmd, timeout=self.timeout)
        except OSError as exc:
            raise CloneFailure(url, target, str(exc)) from exc

        if returncode != 0:
            raise CloneFailure(url, target, stderr)
