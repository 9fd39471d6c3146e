from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, wait
from typing import Callable, List, Optional, Sequence, TypeVar

T = TypeVar("T")
R = TypeVar("R")


def fan_out(
    fn: Callable[[T], R],
    items: Sequence[T],
    max_workers: Optional[int] = None,
) -> List[R]:
    """
    Call fn on every item concurrently and join all of them.

    Results come back in the order of `items`, not completion order.
    If any call failed, the first failure (in item order) is re-raised,
    but only after every call has finished.
    """
    if not items:
        return []

    workers = max_workers or len(items)
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="fan-out") as executor:
        futures = [executor.submit(fn, item) for item in items]
        wait(futures)

    return [f.result() for f in futures]
