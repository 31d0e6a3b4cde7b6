"""
The toolbox menu entries, in the order they are displayed and executed.

Each ``Target`` pairs a side-effect-free detection predicate with an install
action and an optional configuration step.
"""

import subprocess
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional

from ubuntu_toolbox import desktop, shell_setup, virtualenvwrapper
from ubuntu_toolbox.config import (
    CHROME_DEB_URL,
    MICROSOFT_KEY_URL,
    MINICONDA_URL,
    VSCODE_APT_LINE,
)
from ubuntu_toolbox.context import Context
from ubuntu_toolbox.detect import (
    Predicate,
    any_of,
    command_available,
    detect,
    directory_exists,
)
from ubuntu_toolbox.errors import InstallError, TargetSkipped
from ubuntu_toolbox.installers import apt_install, download_file

Action = Callable[[Context], object]


@dataclass(frozen=True)
class Target:
    key: str
    label: str
    detect: Predicate
    install: Action
    configure: Optional[Action] = None
    refresh_when_present: bool = False


@dataclass(frozen=True)
class TargetStatus:
    target: Target
    detected: bool


def statuses(targets: List[Target], ctx: Context) -> List[TargetStatus]:
    return [TargetStatus(t, detect(t, ctx)) for t in targets]


# ----------------------------------------------------------------
# External Installers
# ----------------------------------------------------------------
def install_chrome(ctx: Context) -> None:
    with tempfile.TemporaryDirectory(prefix="ubuntu_toolbox_") as tmp:
        deb = Path(tmp) / "google-chrome-stable_current_amd64.deb"
        download_file(ctx, CHROME_DEB_URL, deb)
        apt_install(ctx, [deb], update=False)


def install_conda(ctx: Context) -> None:
    conda_dir = ctx.config.conda_dir
    ctx.logger.info(f"Installing Miniconda (Conda) into {conda_dir} ...")
    with tempfile.TemporaryDirectory(prefix="ubuntu_toolbox_") as tmp:
        installer = Path(tmp) / "miniconda.sh"
        download_file(ctx, MINICONDA_URL, installer)
        try:
            ctx.runner.run(["bash", str(installer), "-b", "-p", str(conda_dir)])
        except (subprocess.SubprocessError, OSError) as e:
            raise InstallError(f"Miniconda installer failed: {e}") from e

    conda = conda_dir / "bin" / "conda"
    for shell in ("bash", "zsh"):
        result = ctx.runner.run([str(conda), "init", shell], check=False, capture_output=True)
        if result.returncode != 0:
            ctx.logger.warning(f"'conda init {shell}' failed.")
    ctx.logger.info("Miniconda installed. Open a new shell to use 'conda'.")


def add_vscode_repository(ctx: Context) -> None:
    """Install the Microsoft signing key and the VS Code apt source, each only if missing."""
    keyring = ctx.config.microsoft_keyring
    sources_list = ctx.config.vscode_sources_list
    try:
        with tempfile.TemporaryDirectory(prefix="ubuntu_toolbox_") as tmp:
            if not keyring.exists():
                armored = Path(tmp) / "microsoft.asc"
                dearmored = Path(tmp) / "microsoft.gpg"
                download_file(ctx, MICROSOFT_KEY_URL, armored)
                ctx.runner.run(
                    ["gpg", "--batch", "--yes", "--dearmor", "-o", str(dearmored), str(armored)]
                )
                ctx.runner.run(
                    ["install", "-D", "-m", "0644", str(dearmored), str(keyring)], sudo=True
                )
            if not sources_list.exists():
                entry = Path(tmp) / "vscode.list"
                entry.write_text(VSCODE_APT_LINE + "\n")
                ctx.runner.run(
                    ["install", "-D", "-m", "0644", str(entry), str(sources_list)], sudo=True
                )
    except (subprocess.SubprocessError, OSError) as e:
        raise InstallError(f"Could not add the Microsoft apt repository: {e}") from e


def install_vscode(ctx: Context) -> None:
    add_vscode_repository(ctx)
    apt_install(ctx, ["code"])


def has_nvidia_gpu(ctx: Context) -> bool:
    return "nvidia" in ctx.runner.output(["lspci"]).lower()


def install_nvidia(ctx: Context) -> None:
    if not has_nvidia_gpu(ctx):
        raise TargetSkipped(
            "No NVIDIA GPU detected via 'lspci'. Skipping NVIDIA driver installation."
        )
    ctx.logger.info("Installing NVIDIA drivers using 'ubuntu-drivers autoinstall'...")
    apt_install(ctx, ["ubuntu-drivers-common"])
    try:
        ctx.runner.run(["ubuntu-drivers", "autoinstall"], sudo=True)
    except (subprocess.SubprocessError, OSError) as e:
        raise InstallError(f"ubuntu-drivers autoinstall failed: {e}") from e
    ctx.logger.info(
        "NVIDIA drivers installation finished. A system reboot is usually "
        "required for changes to take effect."
    )


# ----------------------------------------------------------------
# Declared Targets
# ----------------------------------------------------------------
def default_targets() -> List[Target]:
    return [
        Target(
            key="ohmyzsh",
            label="Oh My Zsh",
            detect=directory_exists(lambda ctx: ctx.config.ohmyzsh_dir),
            install=shell_setup.run_dev_setup,
        ),
        Target(
            key="virtualenvwrapper",
            label="virtualenvwrapper",
            detect=command_available(virtualenvwrapper.WRAPPER_SCRIPT),
            install=virtualenvwrapper.run_setup,
        ),
        Target(
            key="chrome",
            label="Google Chrome",
            detect=command_available("google-chrome", "google-chrome-stable"),
            install=install_chrome,
        ),
        Target(
            key="conda",
            label="Conda (Miniconda)",
            detect=any_of(
                command_available("conda"),
                directory_exists(lambda ctx: ctx.config.conda_dir),
            ),
            install=install_conda,
        ),
        Target(
            key="vscode",
            label="VS Code + context menu (Dolphin & GNOME Files)",
            detect=command_available("code"),
            install=install_vscode,
            configure=desktop.install_vscode_context_menus,
            refresh_when_present=True,
        ),
        Target(
            key="dolphin",
            label="Dolphin File Manager",
            detect=command_available("dolphin"),
            install=lambda ctx: apt_install(ctx, ["dolphin"]),
        ),
        Target(
            key="nvidia",
            label="NVIDIA GPU drivers (nvidia-smi)",
            detect=command_available("nvidia-smi"),
            install=install_nvidia,
        ),
    ]
