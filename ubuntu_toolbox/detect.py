"""
Installation-state probes.

Every predicate takes a ``Context`` and returns a bool. Probes never write to
the filesystem, and any error during a probe counts as "absent" so the
installer attempts the work instead of silently skipping it.
"""

from pathlib import Path
from typing import Callable, List, Union

from ubuntu_toolbox.context import Context

Predicate = Callable[[Context], bool]


def command_available(*names: str) -> Predicate:
    def probe(ctx: Context) -> bool:
        return any(ctx.runner.command_exists(name) for name in names)

    return probe


def directory_exists(path: Union[str, Path, Callable[[Context], Path]]) -> Predicate:
    def probe(ctx: Context) -> bool:
        resolved = path(ctx) if callable(path) else Path(path)
        return resolved.is_dir()

    return probe


def command_succeeds(cmd: List[str]) -> Predicate:
    def probe(ctx: Context) -> bool:
        return ctx.runner.succeeds(cmd)

    return probe


def any_of(*predicates: Predicate) -> Predicate:
    def probe(ctx: Context) -> bool:
        return any(safe_probe(p, ctx) for p in predicates)

    return probe


def safe_probe(predicate: Predicate, ctx: Context) -> bool:
    try:
        return bool(predicate(ctx))
    except Exception as e:
        ctx.logger.debug(f"Detection probe failed, treating as absent: {e}")
        return False


def detect(target, ctx: Context) -> bool:
    """Return True when ``target`` is already present on this machine."""
    return safe_probe(target.detect, ctx)
