"""
Ubuntu Toolbox
--------------------------------------------------

Idempotent workstation provisioning for Ubuntu: Oh My Zsh with plugins and
Powerlevel10k, Meslo Nerd fonts, virtualenvwrapper, and a menu-driven installer
for common desktop developer tools.
"""

APP_NAME = "Ubuntu Toolbox"
APP_SUBTITLE = "Developer Workstation Installer"
VERSION = "1.0.0"

__version__ = VERSION
