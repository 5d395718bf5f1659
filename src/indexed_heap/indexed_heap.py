"""
Indexed d-ary heap.

The heap is stored in a flat list where the parent of slot ``i`` is
``(i - 1) // d`` and its k-th child (k = 1..d) is ``d * i + k``. Next to the
list it keeps a position index mapping every distinct stored value to the
ordered set of slots currently holding it, so membership tests and lookups
are O(1) even when values repeat, and ``update``/``remove`` can find their
target without scanning.

The module is written in Cython pure Python mode: ``setup.py`` compiles it to
an extension, and it runs unchanged as plain Python when not compiled.
"""
import logging
import operator

import cython

logger = logging.getLogger(__name__)

DEFAULT_BRANCHING_FACTOR = 2
DEFAULT_CAPACITY = 16


@cython.cclass
class IndexedHeap:
    """
    A d-ary heap ordered by a strict ``less`` predicate, with a position index.

    ``less(a, b)`` must return True when ``a`` has to come out of the heap
    before ``b``. ``operator.lt`` gives a min-heap, ``operator.gt`` a max-heap.
    Stored values must be hashable; equal values share one index entry.

    Parameters
    ----------
    branching_factor : int
        Number of children per node, by default 2. A branching factor of 1 is
        accepted: the heap degenerates into a sorted chain with O(n) push and
        pop but stays correct.
    less : Callable[[Any, Any], bool], optional
        Strict ordering predicate, by default ``operator.lt``.
    values : Iterable[Any]
        Values pushed into the heap on construction, by default none.
    capacity : int
        Number of slots preallocated for the backing store, by default 16.

    Raises
    ------
    ValueError
        If ``branching_factor`` is smaller than 1 or ``capacity`` is negative.
    TypeError
        If ``less`` is not callable.

    Notes
    -----
    ``pop`` and ``peek`` return ``default`` (``None``) on an empty heap
    instead of raising. When ``None`` is a legitimate element, check
    ``len(heap)`` first or pass a sentinel as ``default``.
    """

    _data: list
    _index: dict
    _less: object
    _d: cython.Py_ssize_t
    _size: cython.Py_ssize_t

    def __init__(
        self,
        branching_factor=DEFAULT_BRANCHING_FACTOR,
        less=None,
        values=(),
        capacity=DEFAULT_CAPACITY
    ):
        branching_factor = operator.index(branching_factor)
        capacity = operator.index(capacity)
        if branching_factor < 1:
            raise ValueError(
                f"Branching factor must be at least 1, got {branching_factor}"
            )
        if capacity < 0:
            raise ValueError(f"Capacity cannot be negative, got {capacity}")
        if less is None:
            less = operator.lt
        elif not callable(less):
            raise TypeError("less must be a callable taking two elements")

        self._d = branching_factor
        self._less = less
        self._data = [None] * capacity
        self._index = {}
        self._size = 0

        for value in values:
            self.push(value)

    @classmethod
    def min_heap(
        cls,
        values=(),
        branching_factor=DEFAULT_BRANCHING_FACTOR,
        capacity=DEFAULT_CAPACITY
    ):
        """Create a heap that pops the smallest value first."""
        return cls(branching_factor, operator.lt, values, capacity)

    @classmethod
    def max_heap(
        cls,
        values=(),
        branching_factor=DEFAULT_BRANCHING_FACTOR,
        capacity=DEFAULT_CAPACITY
    ):
        """Create a heap that pops the largest value first."""
        return cls(branching_factor, operator.gt, values, capacity)

    @property
    def branching_factor(self):
        return self._d

    @property
    def less(self):
        return self._less

    @property
    def capacity(self):
        """Number of allocated slots in the backing store."""
        return len(self._data)

    def __len__(self):
        return self._size

    def __contains__(self, value):
        return value in self._index

    def __iter__(self):
        # array order, which is heap order rather than sorted order
        return iter(self._data[:self._size])

    def __repr__(self):
        return (
            f"IndexedHeap(branching_factor={self._d}, size={self._size}, "
            f"capacity={len(self._data)})"
        )

    def is_empty(self):
        return self._size == 0

    def first_leaf_index(self):
        """
        Index of the first leaf in the backing store.

        Every slot from this index up to ``len(heap) - 1`` has no children.
        Returns 0 for a heap with fewer than two elements.
        """
        if self._size <= 1:
            return 0
        return (self._size - 2) // self._d + 1

    def push(self, value):
        """
        Add ``value`` to the heap.

        Parameters
        ----------
        value : Hashable
            The value to insert.
        """
        if self._size == len(self._data):
            self._grow()
        self._track(value, self._size)
        self._data[self._size] = value
        self._size += 1
        self._sift_up(self._size - 1)

    def pop(self, default=None):
        """
        Remove and return the extremal element.

        Parameters
        ----------
        default : Any
            Returned when the heap is empty, by default None.

        Returns
        -------
        Any
            The element at the root, or ``default``.
        """
        if self._size == 0:
            return default
        top = self._data[0]
        self._swap(0, self._size - 1)
        self._drop_last()
        self._sift_down(0)
        return top

    def peek(self, default=None):
        """Return the extremal element without removing it."""
        if self._size == 0:
            return default
        return self._data[0]

    def contains(self, value):
        return value in self._index

    def get(self, value):
        """
        Look up a stored element equal to ``value``.

        With duplicates, the element at the first tracked position is
        returned. This is the instance held by the heap, which matters when
        elements carry data that equality ignores.

        Returns
        -------
        tuple[Any, bool]
            ``(element, True)`` when found, ``(None, False)`` otherwise.
        """
        positions = self._index.get(value)
        if not positions:
            return None, False
        return self._data[next(iter(positions))], True

    def update(self, old, new):
        """
        Replace one occurrence of ``old`` with ``new`` and restore heap order.

        Parameters
        ----------
        old : Hashable
            A value currently in the heap.
        new : Hashable
            The replacement value.

        Returns
        -------
        Any
            The stored element that was replaced.

        Raises
        ------
        KeyError
            If ``old`` is not in the heap.
        """
        pos: cython.Py_ssize_t = self._first_position(old)
        # unhashable replacements fail before the heap is touched
        hash(new)
        replaced = self._data[pos]
        self._untrack(replaced, pos)
        self._track(new, pos)
        self._data[pos] = new
        self._restore(pos)
        return replaced

    def remove(self, value):
        """
        Remove one occurrence of ``value`` and return the stored element.

        Raises
        ------
        KeyError
            If ``value`` is not in the heap.
        """
        pos: cython.Py_ssize_t = self._first_position(value)
        removed = self._data[pos]
        self._swap(pos, self._size - 1)
        self._drop_last()
        if pos < self._size:
            self._restore(pos)
        return removed

    def _validate(self):
        """Check that no element precedes its parent."""
        i: cython.Py_ssize_t
        for i in range(1, self._size):
            if self._less(self._data[i], self._data[(i - 1) // self._d]):
                return False
        return True

    def _validate_index(self):
        """Check that the position index matches the backing store exactly."""
        tracked: cython.Py_ssize_t = 0
        for value, positions in self._index.items():
            if not positions:
                return False
            for pos in positions:
                if pos >= self._size or self._data[pos] != value:
                    return False
                tracked += 1
        if tracked != self._size:
            return False
        return all(slot is None for slot in self._data[self._size:])

    @cython.cfunc
    def _grow(self):
        capacity = len(self._data)
        extra = capacity if capacity > 0 else 1
        self._data.extend([None] * extra)
        logger.debug(f"Grew heap storage from {capacity} to {capacity + extra} slots")

    @cython.cfunc
    def _first_position(self, value):
        positions = self._index.get(value)
        if not positions:
            raise KeyError(value)
        return next(iter(positions))

    @cython.cfunc
    def _track(self, value, pos: cython.Py_ssize_t):
        positions = self._index.get(value)
        if positions is None:
            self._index[value] = {pos: None}
        else:
            positions[pos] = None

    @cython.cfunc
    def _untrack(self, value, pos: cython.Py_ssize_t):
        positions: dict = self._index[value]
        del positions[pos]
        if not positions:
            del self._index[value]

    @cython.cfunc
    def _drop_last(self):
        last: cython.Py_ssize_t = self._size - 1
        self._untrack(self._data[last], last)
        self._data[last] = None
        self._size = last

    @cython.cfunc
    def _swap(self, i: cython.Py_ssize_t, j: cython.Py_ssize_t):
        # the only place where elements change slots
        if i == j:
            return
        a = self._data[i]
        b = self._data[j]
        self._data[i] = b
        self._data[j] = a

        a_positions: dict = self._index[a]
        b_positions: dict = self._index[b]
        if a_positions is b_positions:
            return
        del a_positions[i]
        a_positions[j] = None
        del b_positions[j]
        b_positions[i] = None

    @cython.cfunc
    def _restore(self, pos: cython.Py_ssize_t):
        if pos > 0 and self._less(
            self._data[pos], self._data[(pos - 1) // self._d]
        ):
            self._sift_up(pos)
        else:
            self._sift_down(pos)

    @cython.cfunc
    def _sift_up(self, i: cython.Py_ssize_t):
        parent: cython.Py_ssize_t
        while i > 0:
            parent = (i - 1) // self._d
            if not self._less(self._data[i], self._data[parent]):
                break
            self._swap(i, parent)
            i = parent

    @cython.cfunc
    def _sift_down(self, i: cython.Py_ssize_t):
        best: cython.Py_ssize_t
        child: cython.Py_ssize_t
        end: cython.Py_ssize_t
        while True:
            best = i
            child = self._d * i + 1
            end = min(child + self._d, self._size)
            # first strictly smaller child wins ties
            while child < end:
                if self._less(self._data[child], self._data[best]):
                    best = child
                child += 1
            if best == i:
                break
            self._swap(i, best)
            i = best
