"""Exception hierarchy: fatal, per-target warning, and skip severities."""

from typing import Optional


class ToolboxError(Exception):
    """Base class for every error raised by the toolbox."""


class RequiredCommandError(ToolboxError):
    """A strictly required command is missing. Aborts the whole run."""

    def __init__(self, command: str) -> None:
        super().__init__(f"Command '{command}' not found but is required.")
        self.command = command


class InstallError(ToolboxError):
    """An install, update or fetch step of a single target failed."""

    def __init__(self, message: str, target: Optional[str] = None) -> None:
        super().__init__(message)
        self.target = target


class TargetSkipped(ToolboxError):
    """The target cannot apply to this machine; skip it without failing."""


class EmptySelection(ToolboxError):
    """The operator entered nothing at the selection prompt."""
