import logging
from dataclasses import dataclass, field
from typing import Optional

from ubuntu_toolbox.config import Config
from ubuntu_toolbox.errors import RequiredCommandError
from ubuntu_toolbox.log import LOGGER_NAME
from ubuntu_toolbox.runner import CommandRunner


@dataclass
class Context:
    """Everything a detect/install/patch step needs, passed explicitly."""

    config: Config
    runner: CommandRunner = field(default_factory=CommandRunner)
    logger: logging.Logger = field(
        default_factory=lambda: logging.getLogger(LOGGER_NAME)
    )

    @classmethod
    def create(
        cls, config: Optional[Config] = None, runner: Optional[CommandRunner] = None
    ) -> "Context":
        logger = logging.getLogger(LOGGER_NAME)
        return cls(
            config=config or Config.from_env(),
            runner=runner or CommandRunner(logger),
            logger=logger,
        )


def require_command(ctx: Context, cmd: str) -> str:
    """Return the path of ``cmd`` or raise the fatal RequiredCommandError."""
    path = ctx.runner.which(cmd)
    if not path:
        ctx.logger.error(f"Command '{cmd}' not found but is required.")
        raise RequiredCommandError(cmd)
    return path
