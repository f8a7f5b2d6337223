"""Graph module providing traversals over gate graphs.

This module contains:
- expand: The reachable closure of a gate
- sorted_by_id: Stable display order for a set of gates
- successor_map: Consumer edges restricted to a set of gates
- topological_sort: Kahn ordering of gates, inputs first
"""

from ._algorithms import expand, sorted_by_id, successor_map, topological_sort

__all__ = ["expand", "sorted_by_id", "successor_map", "topological_sort"]
