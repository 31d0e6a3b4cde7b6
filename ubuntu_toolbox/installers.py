"""
Install-or-skip logic for the four target categories.

- package manager: ``apt_install``
- git repository: ``sync_git_repo``
- downloaded asset: ``fetch_asset`` / ``download_file``
- external installer: vendor procedures built on the helpers above

``ensure_installed`` wraps a target's detect/install/configure steps and turns
every per-target failure into a warning-level ``TargetResult``.
"""

import enum
import subprocess
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Sequence, Union

from ubuntu_toolbox.context import Context
from ubuntu_toolbox.detect import detect
from ubuntu_toolbox.errors import (
    InstallError,
    RequiredCommandError,
    TargetSkipped,
)


class Outcome(enum.Enum):
    SKIPPED = "skipped"
    INSTALLED = "installed"
    FAILED = "failed"


@dataclass(frozen=True)
class TargetResult:
    target: Any
    outcome: Outcome
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.outcome is not Outcome.FAILED


class GitSync(enum.Enum):
    CLONED = "cloned"
    UPDATED = "updated"
    UPDATE_FAILED = "update-failed"
    NOT_A_REPO = "not-a-repo"
    CLONE_FAILED = "clone-failed"

    @property
    def ok(self) -> bool:
        return self in (GitSync.CLONED, GitSync.UPDATED)


# ----------------------------------------------------------------
# Package Manager
# ----------------------------------------------------------------
# dpkg takes one writer at a time; parallel targets queue here.
_apt_lock = threading.Lock()


def apt_install(ctx: Context, packages: Sequence[Union[str, Path]], update: bool = True) -> None:
    """Install ``packages`` with apt-get. Raises InstallError on failure."""
    names = [str(p) for p in packages]
    try:
        with _apt_lock:
            if update:
                ctx.runner.run(["apt-get", "update"], sudo=True)
            ctx.runner.run(["apt-get", "install", "-y"] + names, sudo=True)
    except (subprocess.SubprocessError, OSError) as e:
        raise InstallError(f"apt-get install {' '.join(names)} failed: {e}") from e
    ctx.logger.info(f"Installed packages: {', '.join(names)}")


# ----------------------------------------------------------------
# Git Repositories
# ----------------------------------------------------------------
def sync_git_repo(ctx: Context, repo_url: str, dest: Path) -> GitSync:
    """Clone ``repo_url`` into ``dest``, or fast-forward an existing clone."""
    dest = Path(dest)
    name = dest.name
    if (dest / ".git").is_dir():
        ctx.logger.info(f"Updating {name}...")
        try:
            ctx.runner.run(["git", "-C", str(dest), "pull", "--ff-only"])
            return GitSync.UPDATED
        except (subprocess.SubprocessError, OSError):
            ctx.logger.warning(f"Could not update {name}")
            return GitSync.UPDATE_FAILED
    if dest.exists():
        ctx.logger.warning(f"{dest} exists but is not a git repo. Skipping.")
        return GitSync.NOT_A_REPO
    ctx.logger.info(f"Cloning {name}...")
    dest.parent.mkdir(parents=True, exist_ok=True)
    try:
        ctx.runner.run(["git", "clone", "--depth=1", repo_url, str(dest)])
        return GitSync.CLONED
    except (subprocess.SubprocessError, OSError):
        ctx.logger.warning(f"Failed to clone {name} from {repo_url}")
        return GitSync.CLONE_FAILED


# ----------------------------------------------------------------
# Downloaded Assets
# ----------------------------------------------------------------
def download_file(ctx: Context, url: str, dest: Path) -> None:
    """Fetch ``url`` to ``dest`` with wget. Raises InstallError on failure."""
    dest = Path(dest)
    ctx.logger.info(f"Downloading {url} to {dest}...")
    try:
        ctx.runner.run(["wget", "-qO", str(dest), url])
    except (subprocess.SubprocessError, OSError) as e:
        if dest.is_file() and dest.stat().st_size == 0:
            dest.unlink()
        raise InstallError(f"Failed to download {url}: {e}") from e


def fetch_asset(ctx: Context, url: str, dest: Path) -> bool:
    """Download ``url`` unless ``dest`` already exists. Warns instead of raising."""
    dest = Path(dest)
    if dest.exists():
        ctx.logger.info(f"Already exists: {dest.name}")
        return True
    dest.parent.mkdir(parents=True, exist_ok=True)
    try:
        download_file(ctx, url, dest)
    except InstallError:
        ctx.logger.warning(f"Failed to download {dest.name}")
        return False
    return True


# ----------------------------------------------------------------
# Install-or-Skip
# ----------------------------------------------------------------
def ensure_installed(target, ctx: Context) -> TargetResult:
    """
    Skip, install, or refresh a single target.

    A missing required command propagates (fatal). Any other failure is logged
    as a warning and reported as FAILED, unless ``ctx.config.strict`` asks for
    the run to stop.
    """
    try:
        if detect(target, ctx):
            ctx.logger.info(f"{target.label} is already installed. Skipping.")
            if target.configure and target.refresh_when_present:
                target.configure(ctx)
                return TargetResult(
                    target, Outcome.SKIPPED, "already installed; configuration refreshed"
                )
            return TargetResult(target, Outcome.SKIPPED, "already installed")

        ctx.logger.info(f"Installing {target.label}...")
        target.install(ctx)
        if target.configure:
            target.configure(ctx)
        ctx.logger.info(f"{target.label} installed.")
        return TargetResult(target, Outcome.INSTALLED, "installed")
    except RequiredCommandError:
        raise
    except TargetSkipped as e:
        ctx.logger.warning(str(e))
        return TargetResult(target, Outcome.SKIPPED, str(e))
    except (InstallError, subprocess.SubprocessError, OSError) as e:
        ctx.logger.warning(f"{target.label} failed: {e}")
        if ctx.config.strict:
            raise InstallError(str(e), target=target.key) from e
        return TargetResult(target, Outcome.FAILED, str(e))
