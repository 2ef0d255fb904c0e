"""Structural analysis over a Graph: cycle detection and reachability."""
from collections import deque
from typing import Dict, Iterator, List, Optional, Set, Tuple

from .GraphPrimitives import Graph


def detect_cycle(graph: Graph) -> Optional[List[str]]:
    """
    Depth-first search with an explicit stack of (node, neighbor iterator) frames.

    Returns the first cycle found as the ordered path from the re-entry point,
    closed on itself (``["a", "b", "a"]``), or None for an acyclic graph.
    """
    adjacency = graph.adjacency()
    visited: Set[str] = set()
    on_stack: Set[str] = set()

    for node in graph.nodes:
        if node.id in visited:
            continue

        visited.add(node.id)
        on_stack.add(node.id)
        path: List[str] = [node.id]
        frames: List[Tuple[str, Iterator[str]]] = [(node.id, iter(adjacency.get(node.id, [])))]

        while frames:
            current, neighbors = frames[-1]
            for neighbor in neighbors:
                if neighbor in on_stack:
                    start = path.index(neighbor)
                    return path[start:] + [neighbor]
                if neighbor not in visited:
                    visited.add(neighbor)
                    on_stack.add(neighbor)
                    path.append(neighbor)
                    frames.append((neighbor, iter(adjacency.get(neighbor, []))))
                    break
            else:
                # every neighbor explored, leave this node
                frames.pop()
                on_stack.discard(current)
                path.pop()

    return None


def find_reachable_nodes(graph: Graph) -> Set[str]:
    """Breadth-first walk from every zero-in-degree node."""
    adjacency: Dict[str, List[str]] = graph.adjacency()
    reachable: Set[str] = set()
    queue = deque(n.id for n in graph.find_start_nodes())

    while queue:
        current = queue.popleft()
        if current in reachable:
            continue
        reachable.add(current)
        queue.extend(adjacency.get(current, []))

    return reachable
