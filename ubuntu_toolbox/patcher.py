"""
Idempotent edits to shell startup files.

Two rules, both convergent (applying them N times equals applying them once):

- replace-line: every ``KEY=...`` line is rewritten to ``KEY=value`` in place,
  or ``KEY=value`` is appended when the key is absent.
- append-once: the block is appended after a blank line unless the marker
  already occurs somewhere in the file.

The string functions are pure; ``apply_block`` adds file I/O and a per-path
lock so concurrent targets never interleave writes to the same file.
"""

import enum
import threading
from pathlib import Path
from typing import Dict, Union


class PatchMode(enum.Enum):
    REPLACE_LINE = "replace-line"
    APPEND_ONCE = "append-once"


# Undecodable bytes in rc files survive a read/write cycle unchanged.
RC_ENCODING = "utf-8"
RC_ERRORS = "surrogateescape"

_locks: Dict[str, threading.Lock] = {}
_locks_guard = threading.Lock()


def _lock_for(path: Path) -> threading.Lock:
    key = str(path.resolve())
    with _locks_guard:
        return _locks.setdefault(key, threading.Lock())


def replace_line(content: str, key: str, value: str) -> str:
    new_line = f"{key}={value}"
    lines = content.splitlines(keepends=True)
    found = False
    for i, line in enumerate(lines):
        if line.startswith(f"{key}="):
            ending = line[len(line.rstrip("\r\n")):]
            lines[i] = new_line + ending
            found = True
    if found:
        return "".join(lines)
    if content and not content.endswith("\n"):
        content += "\n"
    return content + new_line + "\n"


def append_once(content: str, marker: str, block: str) -> str:
    if not marker:
        raise ValueError("marker must not be empty")
    if marker not in block:
        raise ValueError(f"block does not contain its marker {marker!r}")
    if marker in content:
        return content
    if content and not content.endswith("\n"):
        content += "\n"
    return content + "\n" + block.strip("\n") + "\n"


def apply_block(
    file_path: Union[str, Path],
    marker: str,
    text: str,
    mode: PatchMode = PatchMode.APPEND_ONCE,
) -> bool:
    """
    Patch ``file_path`` idempotently, creating it if absent.

    Args:
        file_path: Shell configuration file to edit
        marker: Key for replace-line, marker substring for append-once
        text: Value for replace-line, block body for append-once
        mode: Which rule to apply

    Returns:
        True if the file content changed
    """
    path = Path(file_path)
    with _lock_for(path):
        path.parent.mkdir(parents=True, exist_ok=True)
        if not path.exists():
            path.touch()
        content = path.read_text(encoding=RC_ENCODING, errors=RC_ERRORS)
        if mode is PatchMode.REPLACE_LINE:
            updated = replace_line(content, marker, text)
        else:
            updated = append_once(content, marker, text)
        if updated == content:
            return False
        path.write_text(updated, encoding=RC_ENCODING, errors=RC_ERRORS)
        return True
