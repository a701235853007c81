"""
Class element representation module.

This module defines ClassModel, MethodModel and ParameterModel, the
normalized form of classes read from a class diagram export.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from stubdriver.core.enums import DEFAULT_PACKAGE
from stubdriver.utils.identifiers import generate_id


@dataclass
class ParameterModel:
    """A method parameter."""

    name: str
    type: str = "Object"

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "type": self.type}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ParameterModel":
        return cls(data.get("name", ""), data.get("type", "Object"))


@dataclass
class MethodModel:
    """A class operation with its return type and parameters."""

    name: str
    return_type: str = "void"
    visibility: str = "public"
    parameters: list[ParameterModel] = field(default_factory=list)
    id: str = field(default_factory=generate_id)

    def __post_init__(self):
        self.visibility = (self.visibility or "public").lower()

    @property
    def signature(self) -> str:
        """Name plus parameter types, used to merge duplicate classes."""
        return f"{self.name}({','.join(p.type for p in self.parameters)})"

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "returnType": self.return_type,
            "visibility": self.visibility,
            "parameters": [p.to_dict() for p in self.parameters],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MethodModel":
        return cls(
            name=data.get("name", ""),
            return_type=data.get("returnType", "void"),
            visibility=data.get("visibility", "public"),
            parameters=[ParameterModel.from_dict(p) for p in data.get("parameters", [])],
            id=data.get("id") or generate_id(),
        )


class ClassModel:
    """
    Represents a class from the class diagram.

    Identity for deduplication is (package_name, name). The set of related
    function ids starts empty and is filled by cross-referencing functions,
    diagrams and participant types.
    """

    def __init__(
        self,
        class_id: str,
        name: str,
        package_name: str = DEFAULT_PACKAGE,
        methods: Optional[list[MethodModel]] = None,
    ):
        """
        Initialize a new ClassModel.

        Args:
            class_id: Identifier from the export (or synthetic)
            name: Class name
            package_name: Owning package, "default" when not packaged
            methods: Modeled operations
        """
        self.id = class_id
        self.name = name
        self.package_name = package_name or DEFAULT_PACKAGE
        self.methods: list[MethodModel] = list(methods or [])
        self.related_function_ids: set[str] = set()

    @property
    def identity(self) -> tuple[str, str]:
        return (self.package_name, self.name)

    @property
    def has_default_package(self) -> bool:
        return self.package_name == DEFAULT_PACKAGE

    def method_signatures(self) -> set[str]:
        return {m.signature for m in self.methods}

    def merge_methods_from(self, other: "ClassModel") -> int:
        """
        Merge in methods of another definition of the same class.

        Only methods whose signature this class lacks are copied.

        Args:
            other: The losing definition

        Returns:
            Number of methods added
        """
        known = self.method_signatures()
        added = 0
        for method in other.methods:
            if method.signature not in known:
                self.methods.append(method)
                known.add(method.signature)
                added += 1
        return added

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "packageName": self.package_name,
            "methods": [m.to_dict() for m in self.methods],
            "relatedFunctionIds": sorted(self.related_function_ids),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ClassModel":
        model = cls(
            data.get("id") or generate_id(),
            data.get("name", ""),
            data.get("packageName", DEFAULT_PACKAGE),
            [MethodModel.from_dict(m) for m in data.get("methods", [])],
        )
        model.related_function_ids = set(data.get("relatedFunctionIds", []))
        return model

    def __repr__(self) -> str:
        return f"ClassModel({self.package_name}.{self.name}, methods={len(self.methods)})"
