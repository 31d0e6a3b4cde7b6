"""
Console entry points.

- ``ubuntu-toolbox``: detection table, one free-text prompt, dispatch, summary
- ``ubuntu-dev-setup``: the zsh developer shell workflow, start to finish
- ``setup-virtualenvwrapper``: the Python / virtualenvwrapper workflow
"""

import platform
import signal
import sys
from datetime import datetime
from typing import Callable, List, Optional

from prompt_toolkit import prompt as pt_prompt
from prompt_toolkit.history import InMemoryHistory
from rich.align import Align
from rich.panel import Panel
from rich.traceback import install as install_rich_traceback

from ubuntu_toolbox import APP_SUBTITLE, shell_setup, virtualenvwrapper
from ubuntu_toolbox.config import Config
from ubuntu_toolbox.context import Context
from ubuntu_toolbox.dispatcher import dispatch
from ubuntu_toolbox.errors import EmptySelection, InstallError, RequiredCommandError
from ubuntu_toolbox.installers import Outcome
from ubuntu_toolbox.log import setup_logger
from ubuntu_toolbox.selection import parse_selection
from ubuntu_toolbox.targets import Target, default_targets, statuses
from ubuntu_toolbox.ui import (
    NordColors,
    console,
    create_header,
    display_panel,
    get_prompt_style,
    menu_table,
    print_error,
    print_step,
    print_success,
    print_warning,
    summary_table,
)

EXAMPLES_HINT = "Examples: 1 3 5   or   1,3,5   or   all"
selection_history = InMemoryHistory()


def ask_selection() -> str:
    return pt_prompt(
        "Enter your choices: ", history=selection_history, style=get_prompt_style()
    )


def signal_handler(signum, frame):
    sig = signal.Signals(signum).name
    print_warning(f"Process interrupted by {sig}")
    sys.exit(128 + signum)


def install_signal_handlers() -> None:
    for s in (signal.SIGINT, signal.SIGTERM, signal.SIGHUP):
        signal.signal(s, signal_handler)


def print_banner(subtitle: Optional[str] = None) -> None:
    console.print(create_header(subtitle=subtitle or APP_SUBTITLE))
    current_time = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    console.print(
        Align.center(
            f"[{NordColors.SNOW_STORM_1}]Current Time: {current_time}[/] | "
            f"[{NordColors.SNOW_STORM_1}]Host: {platform.node()}[/]"
        )
    )


# ----------------------------------------------------------------
# Toolbox Menu
# ----------------------------------------------------------------
def run_toolbox(
    ctx: Context,
    targets: Optional[List[Target]] = None,
    read_input: Callable[[], str] = ask_selection,
) -> int:
    """Detect, prompt, dispatch and summarise. Returns the process exit code."""
    targets = targets if targets is not None else default_targets()

    print_step("Detecting current installation status...")
    console.print(menu_table(statuses(targets, ctx)))
    console.print(f"[{NordColors.FROST_3}]{EXAMPLES_HINT}[/]")

    try:
        selection = parse_selection(read_input(), len(targets))
    except (EmptySelection, EOFError):
        print_warning("No selection made. Exiting.")
        return 0

    try:
        results = dispatch(targets, selection, ctx, max_workers=ctx.config.jobs)
    except RequiredCommandError as e:
        print_error(str(e))
        return 1
    except InstallError as e:
        print_error(f"Stopping after failure of {e.target}: {e}")
        return 1

    if results:
        console.print(Panel(summary_table(results), border_style=NordColors.FROST_1))
    failed = [r for r in results if r.outcome is Outcome.FAILED]
    if failed:
        print_warning(
            f"Completed with {len(failed)} failure(s): "
            + ", ".join(r.target.label for r in failed)
        )
    print_success(
        "All selected operations completed. For shell/environment changes or NVIDIA "
        "drivers, a new terminal and/or a reboot may be needed."
    )
    return 0


def _bootstrap() -> Context:
    install_rich_traceback(show_locals=False)
    install_signal_handlers()
    config = Config.from_env()
    setup_logger(config.log_file)
    return Context.create(config)


def _exit_with(func: Callable[[], int]) -> None:
    try:
        sys.exit(func())
    except KeyboardInterrupt:
        print_warning("\nProcess interrupted by user.")
        sys.exit(130)


def main() -> None:
    def run() -> int:
        ctx = _bootstrap()
        print_banner()
        return run_toolbox(ctx)

    _exit_with(run)


# ----------------------------------------------------------------
# Standalone Workflows
# ----------------------------------------------------------------
def run_dev_setup_command(ctx: Context) -> int:
    try:
        report = shell_setup.run_dev_setup(ctx)
    except RequiredCommandError as e:
        print_error(str(e))
        return 1
    except InstallError as e:
        print_error(f"Dev shell setup failed: {e}")
        return 1

    failed_repos = [name for name, state in report.repos.items() if not state.ok]
    missing_fonts = [name for name, ok in report.fonts.items() if not ok]
    lines = [
        f"Oh My Zsh:    {'installed' if report.ohmyzsh_installed else 'already present'}",
        f"Plugins:      {', '.join(f'{k} ({v.value})' for k, v in report.repos.items())}",
        f"Fonts:        {len(report.fonts) - len(missing_fonts)}/{len(report.fonts)} present",
        f"~/.zshrc:     {'updated' if report.zshrc_changed else 'unchanged'}",
        f"Login shell:  {'changed to zsh' if report.login_shell_changed else 'unchanged'}",
    ]
    display_panel("\n".join(lines), style=NordColors.FROST_3, title="Dev Shell Setup")
    if failed_repos or missing_fonts:
        print_warning("Some steps failed; re-run to retry them.")
    return 0


def run_virtualenvwrapper_command(ctx: Context) -> int:
    try:
        settings = virtualenvwrapper.run_setup(ctx)
    except RequiredCommandError as e:
        print_error(str(e))
        return 1
    except InstallError as e:
        print_error(f"virtualenvwrapper setup failed: {e}")
        return 1

    display_panel(
        "Python & virtualenvwrapper setup completed.\n\n"
        f"WORKON_HOME                  = {settings.workon_home}\n"
        f"VIRTUALENVWRAPPER_PYTHON     = {settings.python}\n"
        f"VIRTUALENVWRAPPER_VIRTUALENV = {settings.virtualenv}\n"
        f"virtualenvwrapper.sh         = {settings.wrapper_script}\n\n"
        "Open a NEW terminal (or run: source ~/.bashrc / source ~/.zshrc), then:\n"
        "  mkvirtualenv myenv   create a new env\n"
        "  workon myenv         work on an env\n"
        "  workon               list envs\n"
        "  rmvirtualenv myenv   remove an env",
        style=NordColors.GREEN,
        title="virtualenvwrapper",
    )
    return 0


def dev_setup_main() -> None:
    def run() -> int:
        ctx = _bootstrap()
        print_banner(subtitle="Zsh Developer Shell Setup")
        return run_dev_setup_command(ctx)

    _exit_with(run)


def virtualenvwrapper_main() -> None:
    def run() -> int:
        ctx = _bootstrap()
        print_banner(subtitle="Python & virtualenvwrapper Setup")
        return run_virtualenvwrapper_command(ctx)

    _exit_with(run)
