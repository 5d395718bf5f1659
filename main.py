from src import IndexedHeap, get_topk


values = [10.5, 3.2, 15.0, 7.8, 20.1, 1.5, 3.2]

# Create a 4-ary min heap
print("Creating 4-ary min heap...")
heap = IndexedHeap.min_heap(values, branching_factor=4)

# Test basic properties
print(f"Heap size: {len(heap)}")
print(f"Is empty: {heap.is_empty()}")
print(f"First leaf index: {heap.first_leaf_index()}")
print(f"Peek: {heap.peek()}")
print(f"Contains 3.2: {3.2 in heap}")
print(f"Top 3: {get_topk(heap, 3)}")

heap.update(20.1, 0.5)
print(f"Peek after update: {heap.peek()}")
heap.remove(3.2)
print(f"Still contains 3.2: {3.2 in heap}")

print("Draining heap...")
while not heap.is_empty():
    print(heap.pop())
