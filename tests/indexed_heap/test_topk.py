from src.indexed_heap.indexed_heap import IndexedHeap
from src.indexed_heap.topk import get_topk


class TestGetTopK:
    def test_get_topk_with_negative_k(self):
        heap = IndexedHeap.min_heap([10, 5, 3])
        assert get_topk(heap, -1) == []
        assert get_topk(heap, 0) == []

    def test_get_topk_with_empty_heap(self):
        heap = IndexedHeap()
        assert get_topk(heap, 5) == []

    def test_get_topk_max_heap(self):
        heap = IndexedHeap.max_heap([10, 5, 15, 1, 20])
        assert get_topk(heap, 3) == [20, 15, 10]

    def test_get_topk_min_heap(self):
        heap = IndexedHeap.min_heap([10, 5, 15, 1, 20])
        assert get_topk(heap, 3) == [1, 5, 10]

    def test_get_topk_does_not_modify_heap(self):
        heap = IndexedHeap.min_heap([4, 2, 8, 6], branching_factor=3)
        before = list(heap)

        get_topk(heap, 2)

        assert list(heap) == before
        assert len(heap) == 4
        assert heap.peek() == 2

    def test_get_topk_k_larger_than_heap(self):
        heap = IndexedHeap.max_heap([3, 1, 2])
        assert get_topk(heap, 10) == [3, 2, 1]

    def test_get_topk_with_duplicates(self):
        heap = IndexedHeap.min_heap([10, 10, 5, 15])
        assert get_topk(heap, 3) == [5, 10, 10]

    def test_get_topk_with_custom_less(self):
        heap = IndexedHeap(less=lambda a, b: len(a) > len(b))
        for word in ["fig", "banana", "kiwi", "apple"]:
            heap.push(word)
        assert get_topk(heap, 2) == ["banana", "apple"]

    def test_get_topk_with_negative_values(self):
        values = [-10, 0, 5, -5]

        max_heap = IndexedHeap.max_heap(values)
        assert get_topk(max_heap, 2) == [5, 0]

        min_heap = IndexedHeap.min_heap(values)
        assert get_topk(min_heap, 2) == [-10, -5]
