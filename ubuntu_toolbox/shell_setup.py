"""
Zsh developer shell setup
--------------------------------------------------

Installs zsh with Oh My Zsh, the autosuggestions / syntax-highlighting /
completions plugins, the Powerlevel10k theme and the Meslo Nerd fonts, wires
everything into ``~/.zshrc`` and makes zsh the login shell.

Every step is safe to re-run: packages are skipped by apt, git checkouts are
fast-forwarded, fonts are only fetched when missing and ``~/.zshrc`` edits go
through the idempotent patcher.
"""

import getpass
import shutil
import subprocess
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional
from urllib.parse import quote

from ubuntu_toolbox.config import (
    MESLO_FONTS,
    MESLO_URL_BASE,
    OHMYZSH_INSTALL_URL,
    TERMINAL_FONT,
)
from ubuntu_toolbox.context import Context, require_command
from ubuntu_toolbox.errors import InstallError
from ubuntu_toolbox.installers import (
    GitSync,
    apt_install,
    download_file,
    fetch_asset,
    sync_git_repo,
)
from ubuntu_toolbox.patcher import PatchMode, apply_block

OHMYZSH_ENV = {"RUNZSH": "no", "CHSH": "no", "KEEP_ZSHRC": "yes"}

ZSH_COMPLETIONS_MARKER = "plugins/zsh-completions/src"
ZSH_COMPLETIONS_BLOCK = """
# zsh-completions
if [ -d "${ZSH_CUSTOM:-$HOME/.oh-my-zsh/custom}/plugins/zsh-completions" ]; then
  fpath=(${ZSH_CUSTOM:-$HOME/.oh-my-zsh/custom}/plugins/zsh-completions/src $fpath)
fi
"""

SYNTAX_HIGHLIGHTING_MARKER = "zsh-syntax-highlighting.zsh"
SYNTAX_HIGHLIGHTING_BLOCK = """
# zsh-syntax-highlighting must be last
if [ -f "${ZSH_CUSTOM:-$HOME/.oh-my-zsh/custom}/plugins/zsh-syntax-highlighting/zsh-syntax-highlighting.zsh" ]; then
  source "${ZSH_CUSTOM:-$HOME/.oh-my-zsh/custom}/plugins/zsh-syntax-highlighting/zsh-syntax-highlighting.zsh"
fi
"""

AUTOJUMP_MARKER = "autojump.zsh"
AUTOJUMP_BLOCK = """
# autojump init (if installed)
if [ -f /usr/share/autojump/autojump.zsh ]; then
  . /usr/share/autojump/autojump.zsh
fi
"""

ZSHRC_BLOCKS = [
    (ZSH_COMPLETIONS_MARKER, ZSH_COMPLETIONS_BLOCK),
    (SYNTAX_HIGHLIGHTING_MARKER, SYNTAX_HIGHLIGHTING_BLOCK),
    (AUTOJUMP_MARKER, AUTOJUMP_BLOCK),
]

TERMINAL_PROFILE_SCHEMA = (
    "org.gnome.Terminal.Legacy.Profile:/org/gnome/terminal/legacy/profiles:/:{profile}/"
)


@dataclass
class DevSetupReport:
    repos: Dict[str, GitSync] = field(default_factory=dict)
    fonts: Dict[str, bool] = field(default_factory=dict)
    ohmyzsh_installed: bool = False
    zshrc_changed: bool = False
    terminal_font_set: bool = False
    login_shell_changed: bool = False


# ----------------------------------------------------------------
# Individual Steps
# ----------------------------------------------------------------
def check_os(ctx: Context) -> Optional[str]:
    if not ctx.runner.command_exists("lsb_release"):
        ctx.logger.warning("lsb_release not found. Skipping OS check (should be Ubuntu).")
        return None
    distro = ctx.runner.output(["lsb_release", "-is"])
    if distro != "Ubuntu":
        ctx.logger.warning(f"This script is optimized for Ubuntu, detected: {distro}")
    return distro


def install_base_packages(ctx: Context) -> None:
    ctx.logger.info("Updating apt and installing base packages...")
    apt_install(ctx, ctx.config.base_packages)


def alias_fd(ctx: Context) -> bool:
    """Ubuntu ships fd as 'fdfind'; expose it as 'fd' when nothing else is."""
    fdfind = ctx.runner.which("fdfind")
    if not fdfind or ctx.runner.command_exists("fd"):
        return False
    ctx.logger.info("Creating alias 'fd' for 'fdfind'")
    try:
        ctx.runner.run(
            ["update-alternatives", "--install", "/usr/local/bin/fd", "fd", fdfind, "10"],
            sudo=True,
        )
    except (subprocess.SubprocessError, OSError):
        ctx.logger.warning("Could not register 'fd' alternative.")
        return False
    return True


def install_ohmyzsh(ctx: Context) -> bool:
    """Run the upstream unattended installer unless ~/.oh-my-zsh exists."""
    if ctx.config.ohmyzsh_dir.is_dir():
        ctx.logger.info("Oh My Zsh already installed. Skipping installation.")
        return False
    ctx.logger.info("Installing Oh My Zsh (unattended)...")
    with tempfile.TemporaryDirectory(prefix="ubuntu_toolbox_") as tmp:
        script = Path(tmp) / "ohmyzsh_install.sh"
        download_file(ctx, OHMYZSH_INSTALL_URL, script)
        try:
            ctx.runner.run(["sh", str(script)], env=OHMYZSH_ENV)
        except (subprocess.SubprocessError, OSError) as e:
            raise InstallError(f"Oh My Zsh installer failed: {e}") from e
    return True


def install_plugins(ctx: Context) -> Dict[str, GitSync]:
    ctx.logger.info("Installing Oh My Zsh plugins and themes...")
    return {
        repo.name: sync_git_repo(ctx, repo.url, ctx.config.repo_dest(repo))
        for repo in ctx.config.git_repos
    }


def install_fonts(ctx: Context) -> Dict[str, bool]:
    font_dir = ctx.config.font_dir
    font_dir.mkdir(parents=True, exist_ok=True)
    results = {}
    for font in MESLO_FONTS:
        url = f"{MESLO_URL_BASE}/{quote(font)}"
        results[font] = fetch_asset(ctx, url, font_dir / font)
    ctx.runner.run(["fc-cache", "-f"], check=False, capture_output=True)
    return results


def configure_terminal_font(ctx: Context, font_name: str = TERMINAL_FONT) -> bool:
    ctx.logger.info("Trying to configure GNOME Terminal font automatically...")
    if not ctx.runner.command_exists("gsettings"):
        ctx.logger.warning("gsettings not found. Cannot auto-configure GNOME Terminal font.")
        return False
    profile = ctx.runner.output(
        ["gsettings", "get", "org.gnome.Terminal.ProfilesList", "default"]
    ).strip("'\"")
    if not profile:
        ctx.logger.warning(
            "GNOME Terminal default profile not detected. Skipping font auto-setup."
        )
        return False
    ctx.logger.info(f"Detected GNOME Terminal profile: {profile}")
    schema = TERMINAL_PROFILE_SCHEMA.format(profile=profile)
    try:
        ctx.runner.run(["gsettings", "set", schema, "use-system-font", "false"])
        ctx.runner.run(["gsettings", "set", schema, "font", font_name])
    except (subprocess.SubprocessError, OSError):
        ctx.logger.warning("Could not set GNOME Terminal font.")
        return False
    ctx.logger.info(f"GNOME Terminal font has been set to: {font_name}")
    return True


def configure_zshrc(ctx: Context) -> bool:
    config = ctx.config
    zshrc = config.zshrc
    if not zshrc.exists():
        template = config.ohmyzsh_dir / "templates" / "zshrc.zsh-template"
        if template.is_file():
            ctx.logger.info("No ~/.zshrc found. Creating a new one from Oh My Zsh template.")
            shutil.copyfile(template, zshrc)

    ctx.logger.info("Configuring ~/.zshrc ...")
    changed = apply_block(zshrc, "ZSH_THEME", f'"{config.zsh_theme}"', PatchMode.REPLACE_LINE)
    plugins = " ".join(config.omz_plugins)
    changed |= apply_block(zshrc, "plugins", f"({plugins})", PatchMode.REPLACE_LINE)
    for marker, block in ZSHRC_BLOCKS:
        changed |= apply_block(zshrc, marker, block, PatchMode.APPEND_ONCE)
    return changed


def set_default_shell(ctx: Context) -> bool:
    zsh = ctx.runner.which("zsh")
    if not zsh:
        ctx.logger.warning("zsh is not installed; leaving the login shell unchanged.")
        return False
    if ctx.config.login_shell == zsh:
        ctx.logger.info("zsh is already the default shell.")
        return False
    ctx.logger.info("Changing default shell to zsh...")
    require_command(ctx, "chsh")
    try:
        ctx.runner.run(["chsh", "-s", zsh, getpass.getuser()])
    except (subprocess.SubprocessError, OSError):
        ctx.logger.warning(
            f"Could not change shell automatically. You may need to run: chsh -s {zsh}"
        )
        return False
    return True


# ----------------------------------------------------------------
# Full Workflow
# ----------------------------------------------------------------
def run_dev_setup(ctx: Context) -> DevSetupReport:
    report = DevSetupReport()
    check_os(ctx)
    install_base_packages(ctx)
    alias_fd(ctx)
    report.ohmyzsh_installed = install_ohmyzsh(ctx)
    report.repos = install_plugins(ctx)
    report.fonts = install_fonts(ctx)
    report.terminal_font_set = configure_terminal_font(ctx)
    report.zshrc_changed = configure_zshrc(ctx)
    report.login_shell_changed = set_default_shell(ctx)
    ctx.logger.info(
        "All done! Log out and log back in (or open a new terminal) to start using "
        "zsh + Oh My Zsh + plugins + Powerlevel10k."
    )
    return report
