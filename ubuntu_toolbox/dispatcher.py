from concurrent.futures import ThreadPoolExecutor
from typing import List, Sequence

from ubuntu_toolbox.context import Context
from ubuntu_toolbox.installers import TargetResult, ensure_installed
from ubuntu_toolbox.selection import Selection


def selected_targets(targets: Sequence, selection: Selection) -> List:
    return [targets[i - 1] for i in selection.indices if 1 <= i <= len(targets)]


def dispatch(
    targets: Sequence, selection: Selection, ctx: Context, max_workers: int = 1
) -> List[TargetResult]:
    """
    Run the selected targets and return their results in declared order.

    Unknown tokens are warned about here. With ``max_workers`` > 1 targets run
    in a thread pool; the patcher serialises writes to each file.
    """
    for token in selection.invalid:
        ctx.logger.warning(f"Invalid choice: {token}")

    chosen = selected_targets(targets, selection)
    if max_workers <= 1 or len(chosen) <= 1:
        return [ensure_installed(target, ctx) for target in chosen]

    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        futures = [pool.submit(ensure_installed, target, ctx) for target in chosen]
        return [future.result() for future in futures]
