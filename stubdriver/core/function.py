"""
System function representation module.

This module defines the SystemFunction class, one row group of the
requirements traceability matrix naming the sequence diagrams that
realize a function.
"""

from typing import Any, Iterable


class SystemFunction:
    """
    A system function taken from the traceability matrix.

    The id is the stable key from the matrix. Diagram names are kept as
    written in the matrix; they are resolved against loaded diagrams later.
    """

    def __init__(self, function_id: str, name: str, sequence_diagram_names: Iterable[str] = ()):
        """
        Initialize a new SystemFunction.

        Args:
            function_id: Requirement/function identifier from the matrix
            name: Human-readable function name
            sequence_diagram_names: Diagram names as written in the matrix
        """
        self.id = function_id
        self.name = name
        self.sequence_diagram_names: list[str] = []
        self.merge_diagram_names(sequence_diagram_names)

    def merge_diagram_names(self, names: Iterable[str]) -> None:
        """
        Add diagram names, keeping first-seen order and dropping duplicates.

        Args:
            names: Diagram names to add
        """
        for name in names:
            if name and name not in self.sequence_diagram_names:
                self.sequence_diagram_names.append(name)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "sequenceDiagramNames": list(self.sequence_diagram_names),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SystemFunction":
        return cls(data["id"], data.get("name", ""), data.get("sequenceDiagramNames", []))

    def __repr__(self) -> str:
        return f"SystemFunction(id={self.id!r}, name={self.name!r}, diagrams={self.sequence_diagram_names!r})"
