"""
Stub source generation module.

This module provides the StubGenerator class, which renders a Java stub
for a class called by the classes under test. Modeled classes get a
subclass overriding every method with a canned return value; classes
known only from an unresolved reference get a generic service stub.
"""

import logging
import re
from typing import List, Optional

from stubdriver.analysis.resolver import ResolvedTarget
from stubdriver.core.artifact import GeneratedArtifact
from stubdriver.core.class_model import ClassModel, MethodModel, ParameterModel
from stubdriver.core.enums import ArtifactKind
from stubdriver.generators.values import ValueGenerator

logger = logging.getLogger(__name__)

# (return type, method name, parameters) per service-name suffix
SERVICE_METHODS = {
    "Transaction": [
        ("boolean", "processTransaction", [("double", "amount")]),
        ("double", "getBalance", [("String", "accountId")]),
        ("String", "getTransactionStatus", [("String", "transactionId")]),
    ],
    "Data": [
        ("boolean", "save", [("Object", "data")]),
        ("boolean", "update", [("Object", "data")]),
        ("boolean", "delete", [("String", "id")]),
        ("Object", "findById", [("String", "id")]),
    ],
    "Transform": [
        ("Object", "transform", [("Object", "input")]),
        ("String", "convert", [("String", "value")]),
    ],
    "Validation": [
        ("boolean", "validate", [("Object", "input")]),
        ("String", "getValidationStatus", [("String", "requestId")]),
    ],
    "Calculation": [
        ("double", "calculate", [("double", "value")]),
        ("double", "compute", [("double", "left"), ("double", "right")]),
    ],
}

GENERIC_SERVICE_METHODS = [
    ("boolean", "execute", [("Object", "request")]),
    ("String", "getStatus", []),
]


def service_suffix(class_name: str) -> Optional[str]:
    """Return the known suffix ("Transaction", "Data", ...) of a service class name."""
    for suffix in SERVICE_METHODS:
        if class_name == f"{suffix}Service":
            return suffix
    return None


def service_methods(class_name: str, operations: List[str]) -> List[MethodModel]:
    """
    Canned methods for a service class with no model.

    Args:
        class_name: Synthetic or unmodeled class name
        operations: Operation names observed in calls to the class

    Returns:
        Method models, canned ones first
    """
    suffix = service_suffix(class_name)
    canned = SERVICE_METHODS[suffix] if suffix else GENERIC_SERVICE_METHODS
    methods = [
        MethodModel(name, return_type, parameters=[ParameterModel(p_name, p_type) for p_type, p_name in params])
        for return_type, name, params in canned
    ]
    known = {m.name for m in methods}
    for operation in operations:
        if operation and operation not in known and re.match(r"^[A-Za-z_]\w*$", operation):
            methods.append(MethodModel(operation, "boolean", parameters=[ParameterModel("args", "Object...")]))
            known.add(operation)
    return methods


def package_line(cls: Optional[ClassModel]) -> List[str]:
    if cls is None or cls.has_default_package:
        return []
    return [f"package {cls.package_name};", ""]


def parameter_list(parameters: List[ParameterModel]) -> str:
    return ", ".join(f"{p.type} {p.name or f'arg{i}'}" for i, p in enumerate(parameters))


class StubGenerator:
    """
    Generator for Java stub classes.

    Private methods of a modeled class are skipped because they cannot be
    overridden.
    """

    def __init__(self, values: Optional[ValueGenerator] = None):
        """
        Initialize the stub generator.

        Args:
            values: Literal source for return values
        """
        self.values = values or ValueGenerator()

    @staticmethod
    def file_name(class_name: str) -> str:
        return f"{class_name}Stub.java"

    def generate(self, target: ResolvedTarget) -> GeneratedArtifact:
        """
        Render the stub for one target.

        Args:
            target: Resolved stub target

        Returns:
            The stub artifact
        """
        if target.class_model is not None:
            content = self.render_class_stub(target.class_model)
        else:
            content = self.render_service_stub(target.class_name, target.operations)
        logger.debug(f"Rendered stub for {target.class_name}")
        return GeneratedArtifact(
            file_name=self.file_name(target.class_name),
            file_content=content,
            kind=ArtifactKind.STUB,
            related_class_name=target.class_name,
        )

    def render_class_stub(self, cls: ClassModel) -> str:
        """
        Render a stub subclass of a modeled class.

        Args:
            cls: The class being stubbed

        Returns:
            Java source
        """
        stub_name = f"{cls.name}Stub"
        lines = package_line(cls)
        lines.extend([
            "/**",
            f" * Stub for {cls.name}.",
            " * Returns canned values so callers can be tested in isolation.",
            " */",
            f"public class {stub_name} extends {cls.name} {{",
            "",
        ])

        methods = [m for m in cls.methods if m.visibility != "private"]
        if not methods:
            lines.extend(self._constructor(stub_name))
        for method in methods:
            lines.extend(self._method(method, override=True))

        lines.append("}")
        return "\n".join(lines) + "\n"

    def render_service_stub(self, class_name: str, operations: List[str]) -> str:
        """
        Render a stub for a class that has no model.

        Args:
            class_name: Service class name
            operations: Operation names observed in calls to it

        Returns:
            Java source
        """
        stub_name = f"{class_name}Stub"
        lines = [
            "/**",
            f" * Stub for {class_name}.",
            " * No class definition was found, so the methods below are inferred",
            " * from the service name and from the calls made to it.",
            " */",
            f"public class {stub_name} {{",
            "",
        ]
        for method in service_methods(class_name, operations):
            lines.extend(self._method(method, override=False))
        lines.append("}")
        return "\n".join(lines) + "\n"

    def _method(self, method: MethodModel, override: bool) -> List[str]:
        lines = ["    @Override"] if override else []
        visibility = method.visibility if method.visibility in ("public", "protected") else "public"
        lines.append(
            f"    {visibility} {method.return_type} {method.name}({parameter_list(method.parameters)}) {{"
        )
        literal = self.values.literal(method.return_type, method.name)
        if literal is None:
            lines.append(f'        System.out.println("Stub method called: {method.name}");')
        else:
            lines.append(f"        return {literal};")
        lines.extend(["    }", ""])
        return lines

    @staticmethod
    def _constructor(stub_name: str) -> List[str]:
        return [
            f"    public {stub_name}() {{",
            "        super();",
            "    }",
            "",
        ]
