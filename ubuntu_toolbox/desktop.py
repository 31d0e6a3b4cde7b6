"""'Open in VS Code' entries for Dolphin (KDE) and Nautilus (GNOME Files)."""

from pathlib import Path
from typing import List

from ubuntu_toolbox.context import Context
from ubuntu_toolbox.patcher import RC_ENCODING, RC_ERRORS

DOLPHIN_SERVICE_MENU = """[Desktop Entry]
Type=Service
X-KDE-ServiceTypes=KonqPopupMenu/Plugin
MimeType=inode/directory;inode/mount-point;application/x-iso;application/octet-stream;text/plain;application/x-shellscript;
Actions=openInCode;
X-KDE-StartupNotify=false
X-KDE-Priority=TopLevel

[Desktop Action openInCode]
Name=Open in VS Code
Icon=code
Exec=code %F
"""

NAUTILUS_SCRIPT = """#!/usr/bin/env bash
# Nautilus script: Open selection in VS Code
code "$@"
"""

DOLPHIN_FILE_NAME = "vscode_dolphin.desktop"
NAUTILUS_SCRIPT_NAME = "Open in VS Code"


def write_if_changed(path: Path, content: str, mode: int = 0o644) -> bool:
    path.parent.mkdir(parents=True, exist_ok=True)
    changed = not path.is_file() or path.read_text(encoding=RC_ENCODING, errors=RC_ERRORS) != content
    if changed:
        path.write_text(content, encoding=RC_ENCODING)
    path.chmod(mode)
    return changed


def install_vscode_context_menus(ctx: Context) -> List[Path]:
    """Write both descriptors and nudge the file managers to reload them."""
    config = ctx.config
    if not ctx.runner.command_exists("code"):
        ctx.logger.warning(
            "VS Code is not installed yet, but context menu entries will be prepared."
        )

    ctx.logger.info("Adding 'Open in VS Code' to Dolphin context menu...")
    service_file = config.dolphin_service_dir / DOLPHIN_FILE_NAME
    write_if_changed(service_file, DOLPHIN_SERVICE_MENU)
    if ctx.runner.command_exists("kbuildsycoca5"):
        ctx.runner.run(["kbuildsycoca5"], check=False, capture_output=True)

    ctx.logger.info("Adding 'Open in VS Code' script for Nautilus (GNOME Files)...")
    script_file = config.nautilus_scripts_dir / NAUTILUS_SCRIPT_NAME
    write_if_changed(script_file, NAUTILUS_SCRIPT, mode=0o755)
    if ctx.runner.succeeds(["pgrep", "-x", "nautilus"]):
        ctx.runner.run(["nautilus", "-q"], check=False, capture_output=True)

    ctx.logger.info("VS Code context menu entries added for Dolphin and Nautilus.")
    return [service_file, script_file]
