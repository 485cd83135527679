"""
Parallel execution utilities for czsnoop searches.

Provides the all-or-nothing fan-out used by every search stage: one task
per item, at most one Outcome per task, and a collector that keeps
draining until every submitted task has reported.
"""

import logging
import sys
from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import TypeVar

from tqdm import tqdm

from czsnoop.domain.models import Outcome
from czsnoop.search.cancellation import CancellationToken

logger = logging.getLogger(__name__)

T = TypeVar("T")  # Input type
R = TypeVar("R")  # Result type


def _run_task(worker_func: Callable[[T], R], item: T, token: CancellationToken) -> Outcome[R]:
    """Run one task and wrap its result or error; never raises."""
    try:
        # Items still queued when the search fails are skipped without a remote call
        token.raise_if_cancelled()
        return Outcome(value=worker_func(item))
    except Exception as e:
        return Outcome(error=e)


def execute_all_or_nothing(
    items: Iterable[T],
    worker_func: Callable[[T], R],
    token: CancellationToken,
    max_workers: int | None = None,
    desc: str = "Processing",
    unit: str = "item",
    show_progress: bool = False,
) -> list[R]:
    """
    Execute a function across items in parallel, failing as a whole.

    The first failing task cancels the token. Every task is still waited
    for (in-flight tasks finish and their results are discarded) before
    the token's cause is raised, so no thread outlives the call.

    Args:
        items: Iterable of items to process
        worker_func: Function to call for each item (takes item, returns result)
        token: Cancellation token shared by the whole search
        max_workers: Maximum number of parallel workers (default: one per item)
        desc: Progress bar description
        unit: Progress bar unit name
        show_progress: Whether to show progress bar

    Returns:
        Results in the same order as items

    Raises:
        The error that cancelled the token (this call's first failure, or
        a failure from another stage sharing the token)

    Example:
        details = execute_all_or_nothing(
            candidates,
            fetch_detail,
            token,
            max_workers=6,
            desc="Fetching details",
            unit="subject",
        )
    """
    items_list = list(items)  # Convert to list to get length
    total = len(items_list)

    if total == 0:
        token.raise_cause()
        return []

    workers = total if max_workers is None else max(1, min(max_workers, total))
    results: dict[int, R] = {}

    with ThreadPoolExecutor(max_workers=workers) as executor:
        future_to_index = {
            executor.submit(_run_task, worker_func, item, token): index
            for index, item in enumerate(items_list)
        }

        progress_bar = None
        if show_progress:
            progress_bar = tqdm(
                total=total,
                desc=desc,
                unit=unit,
                file=sys.stderr,  # Use stderr to keep stdout for results
                ncols=100,
                dynamic_ncols=True,
            )

        try:
            # Exactly one Outcome per submitted task; keep draining after a failure
            for future in as_completed(future_to_index):
                outcome = future.result()
                index = future_to_index[future]
                if outcome.ok:
                    results[index] = outcome.value
                elif token.cancel(outcome.error):
                    logger.debug(f"{desc} failed on item {index}: {outcome.error}")
                if progress_bar:
                    progress_bar.update(1)
        finally:
            if progress_bar:
                progress_bar.close()

    token.raise_cause()
    return [results[index] for index in range(total)]
