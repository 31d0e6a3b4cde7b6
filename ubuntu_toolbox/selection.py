import re
from dataclasses import dataclass, field
from typing import List, Tuple

from ubuntu_toolbox.errors import EmptySelection

ALL_TOKEN = "all"
_SEPARATORS = re.compile(r"[\s,]+")


@dataclass(frozen=True)
class Selection:
    """1-based target indices in declared order, plus rejected tokens."""

    indices: Tuple[int, ...]
    invalid: Tuple[str, ...] = field(default_factory=tuple)

    def __bool__(self) -> bool:
        return bool(self.indices)


def tokenize(raw: str) -> List[str]:
    return [t for t in _SEPARATORS.split(raw.strip()) if t]


def parse_selection(raw: str, count: int) -> Selection:
    """
    Parse operator input such as ``"1 3 5"``, ``"1,3,5"`` or ``"all"``.

    Indices come back sorted and de-duplicated regardless of input order.
    Unknown tokens are collected in ``invalid`` rather than aborting.
    Raises EmptySelection when the input holds no tokens at all.
    """
    tokens = tokenize(raw or "")
    if not tokens:
        raise EmptySelection("No selection made.")

    chosen = set()
    invalid: List[str] = []
    for token in tokens:
        if token.lower() == ALL_TOKEN:
            chosen.update(range(1, count + 1))
            continue
        if token.isascii() and token.isdigit() and 1 <= int(token) <= count:
            chosen.add(int(token))
        else:
            invalid.append(token)
    return Selection(tuple(sorted(chosen)), tuple(invalid))
