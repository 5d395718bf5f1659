import heapq
import logging
from functools import cmp_to_key
from typing import Any

from src import IndexedHeap

logger = logging.getLogger(__name__)


def get_topk(heap: IndexedHeap, k: int) -> list[Any]:
    """
    Function to get the top-K elements from a heap without modifying it.

    In case of a max heap, the K largest elements will be retrieved; for a
    min heap the K smallest. More generally, the elements come back in the
    order the heap's `less` predicate would pop them.

    Parameters
    ----------
    heap : IndexedHeap
        An IndexedHeap object
    k : int
        The number of 'top-K' elements to retrieve.

    Returns
    -------
    list[Any]
        The 'top-K' elements, most extremal first.
    """
    if k <= 0:
        return []
    if heap.is_empty():
        return []
    if k > len(heap):
        logger.debug(f"Requested top-{k} from a heap of {len(heap)} elements")

    less = heap.less

    def compare(a: Any, b: Any) -> int:
        if less(a, b):
            return -1
        if less(b, a):
            return 1
        return 0

    return heapq.nsmallest(k, heap, key=cmp_to_key(compare))
