"""
Tests for CommandRunner's command construction, with subprocess.run stubbed out.
"""

import shlex
import subprocess

import pytest

from ubuntu_toolbox.runner import CommandRunner


class _Runner(CommandRunner):
    def __init__(self, root):
        super().__init__()
        self.root = root

    @property
    def is_root(self):
        return self.root


@pytest.fixture
def launched(monkeypatch):
    seen = []

    def fake_run(args, **kwargs):
        seen.append((args, kwargs))
        return subprocess.CompletedProcess(args, 0, "", "")

    monkeypatch.setattr(subprocess, "run", fake_run)
    return seen


def test_sudo_prefix_for_regular_user(launched):
    _Runner(root=False).run(["install", "-m", "0644", "a", "b"], sudo=True)
    assert launched[0][0] == ["sudo", "install", "-m", "0644", "a", "b"]


def test_no_sudo_when_already_root(launched):
    _Runner(root=True).run(["install", "-m", "0644", "a", "b"], sudo=True)
    assert launched[0][0] == ["install", "-m", "0644", "a", "b"]


def test_shell_command_is_quoted_under_sudo(launched):
    script = "echo 'it''s' > /etc/x"
    _Runner(root=False).run(script, sudo=True, shell=True)
    args, kwargs = launched[0]
    assert shlex.split(args) == ["sudo", "sh", "-c", script]
    assert kwargs["shell"] is True


def test_extra_environment_is_merged(launched, monkeypatch):
    monkeypatch.setenv("PATH", "/usr/bin")
    _Runner(root=True).run(["sh", "install.sh"], env={"RUNZSH": "no"})
    env = launched[0][1]["env"]
    assert env["RUNZSH"] == "no"
    assert env["PATH"] == "/usr/bin"


def test_missing_binary_without_check(monkeypatch):
    def missing(args, **kwargs):
        raise FileNotFoundError(args[0])

    monkeypatch.setattr(subprocess, "run", missing)
    result = _Runner(root=True).run(["no-such-tool"], check=False)
    assert result.returncode == 127


def test_timeout_propagates_as_subprocess_error(monkeypatch):
    def hung(args, **kwargs):
        raise subprocess.TimeoutExpired(args, kwargs["timeout"])

    monkeypatch.setattr(subprocess, "run", hung)
    with pytest.raises(subprocess.SubprocessError):
        _Runner(root=True).run(["apt-get", "update"], timeout=1)
