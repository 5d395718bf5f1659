from src.indexed_heap.indexed_heap import IndexedHeap
from src.indexed_heap.topk import get_topk
