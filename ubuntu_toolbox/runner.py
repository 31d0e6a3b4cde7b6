"""
Process boundary for every external collaborator.

All package-manager, git, fetch and vendor-installer invocations go through a
``CommandRunner`` so that workflows can be exercised against a recording fake.
"""

import logging
import os
import shlex
import shutil
import subprocess
from typing import Dict, List, Optional, Sequence, Union

from ubuntu_toolbox.config import DEFAULT_TIMEOUT
from ubuntu_toolbox.log import LOGGER_NAME

Command = Union[str, Sequence[str]]


class CommandRunner:
    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self.logger = logger or logging.getLogger(LOGGER_NAME)

    @property
    def is_root(self) -> bool:
        return os.geteuid() == 0

    def which(self, cmd: str) -> Optional[str]:
        return shutil.which(cmd)

    def command_exists(self, cmd: str) -> bool:
        return self.which(cmd) is not None

    def run(
        self,
        cmd: Command,
        *,
        sudo: bool = False,
        shell: bool = False,
        check: bool = True,
        capture_output: bool = False,
        env: Optional[Dict[str, str]] = None,
        timeout: int = DEFAULT_TIMEOUT,
    ) -> subprocess.CompletedProcess:
        """
        Execute a command and return the CompletedProcess.

        Args:
            cmd: Argument list, or a string when ``shell`` is set
            sudo: Prefix with ``sudo`` unless already running as root
            shell: Run through ``/bin/sh -c``
            check: Raise CalledProcessError on a non-zero exit
            capture_output: Capture stdout/stderr as text
            env: Extra environment variables merged over os.environ
            timeout: Seconds before the command is killed

        Returns:
            CompletedProcess instance with command results
        """
        if shell:
            args: Command = cmd if isinstance(cmd, str) else " ".join(cmd)
            if sudo and not self.is_root:
                args = f"sudo sh -c {shlex.quote(args)}"
        else:
            args = [cmd] if isinstance(cmd, str) else list(cmd)
            if sudo and not self.is_root:
                args = ["sudo"] + args

        cmd_str = args if isinstance(args, str) else shlex.join(args)
        self.logger.debug(f"Running command: {cmd_str}")

        full_env = os.environ.copy()
        if env:
            full_env.update(env)

        try:
            return subprocess.run(
                args,
                shell=shell,
                check=check,
                text=True,
                capture_output=capture_output,
                timeout=timeout,
                env=full_env,
            )
        except subprocess.CalledProcessError as e:
            self.logger.debug(f"Command failed ({e.returncode}): {cmd_str}")
            if e.stderr:
                self.logger.debug(f"Stderr: {e.stderr.strip()}")
            raise
        except FileNotFoundError:
            if check:
                raise
            return subprocess.CompletedProcess(
                args, 127, "", f"Command not found: {cmd_str}"
            )

    def succeeds(self, cmd: List[str]) -> bool:
        """Return True when ``cmd`` exits 0. Never raises."""
        try:
            return self.run(cmd, check=False, capture_output=True).returncode == 0
        except (OSError, subprocess.SubprocessError):
            return False

    def output(self, cmd: List[str]) -> str:
        """Return stripped stdout of ``cmd``, or an empty string on failure."""
        try:
            result = self.run(cmd, check=False, capture_output=True)
        except (OSError, subprocess.SubprocessError):
            return ""
        return (result.stdout or "").strip() if result.returncode == 0 else ""
