"""
Call graph representation module.

The call graph maps a caller type name to the set of callee type names it
invokes. It is rebuilt from scratch for every generation run.
"""

from typing import Dict, Iterator, Optional, Set, Tuple

from stubdriver.core.enums import NON_CLASS_TYPES


class CallGraph:
    """
    Directed graph of caller -> callee class names.

    Self edges and edges touching "ACTOR", "REF", "unknown" or an empty
    name are rejected by add_edge.
    """

    def __init__(self):
        self.edges: Dict[str, Set[str]] = {}
        self.operations: Dict[str, Set[str]] = {}
        self.external_services: Set[str] = set()

    @staticmethod
    def is_valid_edge(caller: str, callee: str) -> bool:
        if not caller or not callee:
            return False
        if caller in NON_CLASS_TYPES or callee in NON_CLASS_TYPES:
            return False
        return caller != callee

    def add_edge(self, caller: str, callee: str, operation: Optional[str] = None) -> bool:
        """
        Record that caller invokes callee.

        Args:
            caller: Caller type name
            callee: Callee type name
            operation: Operation name observed on the call, if any

        Returns:
            True if the edge is valid and recorded (or already present)
        """
        if not self.is_valid_edge(caller, callee):
            return False
        self.edges.setdefault(caller, set()).add(callee)
        if operation:
            self.operations.setdefault(callee, set()).add(operation)
        return True

    def add_external_service(self, caller: str, service: str, operation: Optional[str] = None) -> bool:
        """Record an edge to a synthetic service standing in for an unresolved reference."""
        added = self.add_edge(caller, service, operation)
        if added:
            self.external_services.add(service)
        return added

    def callees(self, caller: str) -> Set[str]:
        return set(self.edges.get(caller, set()))

    def callers(self, callee: str) -> Set[str]:
        return {caller for caller, targets in self.edges.items() if callee in targets}

    def has_edge(self, caller: str, callee: str) -> bool:
        return callee in self.edges.get(caller, set())

    def iter_edges(self) -> Iterator[Tuple[str, str]]:
        for caller in sorted(self.edges):
            for callee in sorted(self.edges[caller]):
                yield caller, callee

    def edge_count(self) -> int:
        return sum(len(targets) for targets in self.edges.values())

    def __len__(self) -> int:
        return self.edge_count()

    def __repr__(self) -> str:
        return f"CallGraph(edges={self.edge_count()}, external={sorted(self.external_services)})"
