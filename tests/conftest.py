"""
Shared fixtures: a temporary home directory and a recording CommandRunner.

No test talks to apt, git, wget or the real home directory.
"""

import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Tuple, Union

import pytest

from ubuntu_toolbox.config import Config
from ubuntu_toolbox.context import Context
from ubuntu_toolbox.runner import CommandRunner


@dataclass
class Call:
    args: Union[str, List[str]]
    sudo: bool
    env: Optional[Dict[str, str]]

    @property
    def line(self) -> str:
        return self.args if isinstance(self.args, str) else " ".join(self.args)


class FakeRunner(CommandRunner):
    """Records every command instead of executing it."""

    def __init__(self, commands: Sequence[str] = (), root: bool = False) -> None:
        super().__init__()
        self.paths: Dict[str, str] = {name: f"/usr/bin/{name}" for name in commands}
        self.calls: List[Call] = []
        self.failures: List[str] = []
        self.outputs: List[Tuple[str, str]] = []
        self.effects: List[Tuple[str, Callable]] = []
        self.root = root

    # Scripting helpers
    def add_command(self, name: str, path: Optional[str] = None) -> None:
        self.paths[name] = path or f"/usr/bin/{name}"

    def fail(self, prefix: str) -> None:
        self.failures.append(prefix)

    def respond(self, prefix: str, stdout: str) -> None:
        self.outputs.append((prefix, stdout))

    def on(self, prefix: str, effect: Callable) -> None:
        self.effects.append((prefix, effect))

    @property
    def lines(self) -> List[str]:
        return [c.line for c in self.calls]

    def ran(self, prefix: str) -> bool:
        return any(line.startswith(prefix) for line in self.lines)

    # CommandRunner interface
    @property
    def is_root(self) -> bool:
        return self.root

    def which(self, cmd: str) -> Optional[str]:
        return self.paths.get(cmd)

    def run(
        self,
        cmd,
        *,
        sudo=False,
        shell=False,
        check=True,
        capture_output=False,
        env=None,
        timeout=None,
    ):
        args = cmd if isinstance(cmd, str) else list(cmd)
        call = Call(args, sudo, env)
        self.calls.append(call)
        for prefix, effect in self.effects:
            if call.line.startswith(prefix):
                effect(args)
        returncode = 1 if any(call.line.startswith(p) for p in self.failures) else 0
        if returncode and check:
            raise subprocess.CalledProcessError(returncode, args)
        stdout = next((out for p, out in self.outputs if call.line.startswith(p)), "")
        return subprocess.CompletedProcess(args, returncode, stdout, "")


@pytest.fixture
def home(tmp_path: Path) -> Path:
    path = tmp_path / "home"
    path.mkdir()
    return path


@pytest.fixture
def config(home: Path, tmp_path: Path) -> Config:
    return Config(
        home=home,
        login_shell="/bin/bash",
        log_file=tmp_path / "toolbox.log",
        microsoft_keyring=tmp_path / "apt" / "microsoft.gpg",
        vscode_sources_list=tmp_path / "apt" / "vscode.list",
    )


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def ctx(config: Config, runner: FakeRunner) -> Context:
    return Context.create(config, runner)
