"""Nord-themed console helpers: banner, messages, menu and summary tables."""

import shutil
from typing import Iterable, Optional, Sequence

import pyfiglet
from prompt_toolkit.styles import Style as PtStyle
from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich.theme import Theme

from ubuntu_toolbox import APP_NAME, APP_SUBTITLE, VERSION


# ----------------------------------------------------------------
# Nord-Themed Colors and Theme Setup
# ----------------------------------------------------------------
class NordColors:
    POLAR_NIGHT_1: str = "#2E3440"
    POLAR_NIGHT_3: str = "#434C5E"
    POLAR_NIGHT_4: str = "#4C566A"
    SNOW_STORM_1: str = "#D8DEE9"
    SNOW_STORM_2: str = "#E5E9F0"
    FROST_1: str = "#8FBCBB"
    FROST_2: str = "#88C0D0"
    FROST_3: str = "#81A1C1"
    FROST_4: str = "#5E81AC"
    RED: str = "#BF616A"
    ORANGE: str = "#D08770"
    YELLOW: str = "#EBCB8B"
    GREEN: str = "#A3BE8C"
    PURPLE: str = "#B48EAD"


nord_theme = Theme(
    {
        "banner": f"bold {NordColors.FROST_2}",
        "header": f"bold {NordColors.FROST_2}",
        "info": NordColors.GREEN,
        "warning": NordColors.YELLOW,
        "error": NordColors.RED,
        "debug": NordColors.POLAR_NIGHT_3,
        "success": NordColors.GREEN,
    }
)

console = Console(theme=nord_theme, highlight=False)

INSTALLED_LABEL = "[installed]"
MISSING_LABEL = "[        ]"

OUTCOME_STYLES = {
    "installed": "success",
    "skipped": "debug",
    "failed": "error",
}


# ----------------------------------------------------------------
# Banner
# ----------------------------------------------------------------
def create_header(title: str = APP_NAME, subtitle: str = APP_SUBTITLE) -> Panel:
    """
    Generate an ASCII art header with gradient styling using Pyfiglet.
    The banner is built line-by-line into a Rich Text object to avoid stray markup tokens.
    """
    width = min(shutil.get_terminal_size().columns - 4, 80)
    fonts = ["slant", "small", "standard", "mini"]
    ascii_art = ""
    for font in fonts:
        try:
            fig = pyfiglet.Figlet(font=font, width=width)
            ascii_art = fig.renderText(title)
            if ascii_art.strip():
                break
        except pyfiglet.FontNotFound:
            continue
    if not ascii_art.strip():
        ascii_art = title
    ascii_lines = [line for line in ascii_art.splitlines() if line.strip()]
    colors = [
        NordColors.FROST_1,
        NordColors.FROST_2,
        NordColors.FROST_3,
        NordColors.FROST_4,
    ]
    combined_text = Text()
    for i, line in enumerate(ascii_lines):
        combined_text.append(line, style=f"bold {colors[i % len(colors)]}")
        if i < len(ascii_lines) - 1:
            combined_text.append("\n")
    border = Text("━" * max(width - 10, 10), style=NordColors.FROST_3)
    return Panel(
        Align.center(Text.assemble(border, "\n", combined_text, "\n", border)),
        border_style=NordColors.FROST_1,
        padding=(1, 2),
        title=Text(f"v{VERSION}", style=f"bold {NordColors.SNOW_STORM_2}"),
        title_align="right",
        subtitle=Text(subtitle, style=f"bold {NordColors.SNOW_STORM_1}"),
        subtitle_align="center",
    )


# ----------------------------------------------------------------
# Simple Message Printing Helpers
# ----------------------------------------------------------------
def print_message(
    text: str, style: str = NordColors.FROST_2, prefix: str = "•"
) -> None:
    console.print(f"[{style}]{prefix} {text}[/{style}]")


def print_success(message: str) -> None:
    print_message(message, NordColors.GREEN, "✓")


def print_warning(message: str) -> None:
    print_message(message, NordColors.YELLOW, "⚠")


def print_error(message: str) -> None:
    print_message(message, NordColors.RED, "✗")


def print_step(message: str) -> None:
    print_message(message, NordColors.FROST_3, "➜")


def display_panel(
    message: str, style: str = NordColors.FROST_2, title: Optional[str] = None
) -> None:
    panel = Panel(
        Text.from_markup(f"[{style}]{message}[/{style}]"),
        border_style=style,
        padding=(1, 2),
        title=f"[bold {style}]{title}[/]" if title else None,
    )
    console.print(panel)


def get_prompt_style() -> PtStyle:
    return PtStyle.from_dict({"prompt": f"bold {NordColors.PURPLE}"})


# ----------------------------------------------------------------
# Menu and Summary Tables
# ----------------------------------------------------------------
def status_label(detected: bool) -> str:
    return INSTALLED_LABEL if detected else MISSING_LABEL


def menu_table(statuses: Sequence) -> Table:
    """Numbered toggle list, one row per ``TargetStatus``."""
    table = Table(
        show_header=True,
        header_style=f"bold {NordColors.FROST_1}",
        border_style=NordColors.FROST_3,
        title=f"[bold {NordColors.FROST_2}]Which tools would you like to install/configure?[/]",
        title_justify="center",
    )
    table.add_column("#", style=f"bold {NordColors.FROST_4}", justify="right", width=4)
    table.add_column("Status", style=f"bold {NordColors.GREEN}", no_wrap=True)
    table.add_column("Tool", style=NordColors.SNOW_STORM_1)
    for i, status in enumerate(statuses, 1):
        table.add_row(str(i), Text(status_label(status.detected)), status.target.label)
    return table


def summary_table(results: Iterable, title: str = "Setup Summary") -> Table:
    table = Table(
        show_header=True,
        header_style=f"bold {NordColors.FROST_1}",
        border_style=NordColors.FROST_3,
        title=f"[bold]{title}[/]",
        title_style=f"bold {NordColors.FROST_2}",
        title_justify="center",
        expand=True,
    )
    table.add_column("Component", style=f"bold {NordColors.FROST_2}")
    table.add_column("Status")
    table.add_column("Message", style=NordColors.SNOW_STORM_1)
    for result in results:
        style = OUTCOME_STYLES.get(result.outcome.value, "info")
        table.add_row(
            result.target.label,
            f"[{style}]{result.outcome.value.upper()}[/{style}]",
            result.message,
        )
    return table
