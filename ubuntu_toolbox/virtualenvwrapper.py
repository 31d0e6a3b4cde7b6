"""
Python & virtualenvwrapper setup
--------------------------------------------------

- Ensures python3, pip, dev tools are installed
- Makes "python" point to "python3"
- Installs virtualenv & virtualenvwrapper via pip
- Configures ~/.bashrc and ~/.zshrc for virtualenvwrapper
"""

import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ubuntu_toolbox.context import Context, require_command
from ubuntu_toolbox.errors import InstallError
from ubuntu_toolbox.installers import apt_install
from ubuntu_toolbox.patcher import PatchMode, apply_block

MARKER = "virtualenvwrapper configuration"
WRAPPER_SCRIPT = "virtualenvwrapper.sh"
WRAPPER_FALLBACKS = [
    Path("/usr/local/bin/virtualenvwrapper.sh"),
    Path("/usr/bin/virtualenvwrapper.sh"),
]
PIP_PACKAGES = ["virtualenv", "virtualenvwrapper"]


@dataclass(frozen=True)
class VirtualenvwrapperSettings:
    workon_home: Path
    python: str
    virtualenv: str
    wrapper_script: str

    def environment(self) -> dict:
        return {
            "WORKON_HOME": str(self.workon_home),
            "VIRTUALENVWRAPPER_PYTHON": self.python,
            "VIRTUALENVWRAPPER_VIRTUALENV": self.virtualenv,
        }


def build_block(settings: VirtualenvwrapperSettings) -> str:
    return (
        f"# >>> {MARKER} >>>\n"
        f'export WORKON_HOME="{settings.workon_home}"\n'
        f'export VIRTUALENVWRAPPER_PYTHON="{settings.python}"\n'
        f'export VIRTUALENVWRAPPER_VIRTUALENV="{settings.virtualenv}"\n'
        f'if [ -f "{settings.wrapper_script}" ]; then\n'
        f'    source "{settings.wrapper_script}"\n'
        f"fi\n"
        f"# <<< {MARKER} <<<\n"
    )


# ----------------------------------------------------------------
# Individual Steps
# ----------------------------------------------------------------
def install_python_toolchain(ctx: Context) -> None:
    ctx.logger.info("Updating apt and installing Python3 + tools ...")
    apt_install(ctx, ctx.config.python_packages)


def python_major_version(ctx: Context) -> Optional[str]:
    out = ctx.runner.output(
        ["python", "-c", "import sys; print(sys.version_info.major)"]
    )
    return out or None


def ensure_python_is_python3(ctx: Context) -> None:
    """Point 'python' at Python 3 via python-is-python3, or a symlink as a fallback."""
    ctx.logger.info("Ensuring 'python' runs python3 ...")
    if ctx.runner.command_exists("python"):
        major = python_major_version(ctx)
        if major == "3":
            ctx.logger.info("'python' already points to Python 3.")
            return
        ctx.logger.warning(
            f"'python' is not Python 3 (detected major version: {major}). "
            "Trying to install python-is-python3..."
        )
        try:
            apt_install(ctx, ["python-is-python3"], update=False)
        except InstallError:
            ctx.logger.warning(
                "Could not install python-is-python3; you may need to fix 'python' manually."
            )
        return

    try:
        apt_install(ctx, ["python-is-python3"], update=False)
        ctx.logger.info("Installed python-is-python3; now 'python' should be python3.")
        return
    except InstallError:
        ctx.logger.warning(
            "Could not install python-is-python3. "
            "Creating a symlink /usr/local/bin/python -> python3 ..."
        )

    python3 = ctx.runner.which("python3")
    if not python3:
        ctx.logger.error("python3 not found in PATH, cannot create symlink.")
        return
    try:
        ctx.runner.run(["ln", "-sf", python3, "/usr/local/bin/python"], sudo=True)
        ctx.logger.info(f"Created symlink: /usr/local/bin/python -> {python3}")
    except (subprocess.SubprocessError, OSError):
        ctx.logger.warning("Could not create /usr/local/bin/python symlink.")


def pip_install(ctx: Context) -> None:
    ctx.logger.info("Installing virtualenv and virtualenvwrapper via pip3 (system-wide) ...")
    try:
        ctx.runner.run(["pip3", "install", "--upgrade", "pip"], sudo=True)
        ctx.runner.run(["pip3", "install", "--upgrade"] + PIP_PACKAGES, sudo=True)
    except (subprocess.SubprocessError, OSError) as e:
        raise InstallError(f"pip3 install failed: {e}") from e


def locate_wrapper_script(ctx: Context) -> str:
    found = ctx.runner.which(WRAPPER_SCRIPT)
    if found:
        return found
    for candidate in WRAPPER_FALLBACKS:
        if candidate.is_file():
            return str(candidate)
    raise InstallError(
        "virtualenvwrapper.sh not found. Check pip installation paths."
    )


def resolve_settings(ctx: Context) -> VirtualenvwrapperSettings:
    virtualenv = ctx.runner.which("virtualenv")
    if not virtualenv:
        raise InstallError("virtualenv command not found after installation.")
    wrapper = locate_wrapper_script(ctx)
    ctx.logger.info(f"virtualenv:        {virtualenv}")
    ctx.logger.info(f"virtualenvwrapper: {wrapper}")
    return VirtualenvwrapperSettings(
        workon_home=ctx.config.workon_home,
        python=ctx.runner.which("python3") or "python3",
        virtualenv=virtualenv,
        wrapper_script=wrapper,
    )


def configure_shells(ctx: Context, settings: VirtualenvwrapperSettings) -> bool:
    ctx.logger.info("Configuring shell startup files ...")
    settings.workon_home.mkdir(parents=True, exist_ok=True)
    block = build_block(settings)
    changed = False
    for rc_file in (ctx.config.bashrc, ctx.config.zshrc):
        if apply_block(rc_file, MARKER, block, PatchMode.APPEND_ONCE):
            ctx.logger.info(f"Adding virtualenvwrapper config block to {rc_file}")
            changed = True
        else:
            ctx.logger.info(f"virtualenvwrapper block already present in {rc_file}, skipping.")
    return changed


def pre_initialize(ctx: Context, settings: VirtualenvwrapperSettings) -> bool:
    """Source the wrapper once so its first-run output never hits an interactive prompt."""
    ctx.logger.info("Pre-initializing virtualenvwrapper...")
    result = ctx.runner.run(
        ["bash", "-lc", f'source "{settings.wrapper_script}" >/dev/null 2>&1'],
        check=False,
        capture_output=True,
        env=settings.environment(),
    )
    if result.returncode != 0:
        ctx.logger.warning(
            "Could not pre-initialize virtualenvwrapper, but it will still work."
        )
        return False
    return True


# ----------------------------------------------------------------
# Full Workflow
# ----------------------------------------------------------------
def run_setup(ctx: Context) -> VirtualenvwrapperSettings:
    install_python_toolchain(ctx)
    ensure_python_is_python3(ctx)
    require_command(ctx, "python3")
    require_command(ctx, "pip3")
    pip_install(ctx)
    settings = resolve_settings(ctx)
    configure_shells(ctx, settings)
    pre_initialize(ctx, settings)
    ctx.logger.info("virtualenvwrapper installed and configured.")
    return settings
