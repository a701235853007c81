"""
Class diagram parser.

This module reads a Visual Paradigm "simple" XML export of a class diagram
into ClassModel objects, resolving operation return and parameter types
through the document's data-type table and merging duplicate definitions.
"""

import logging
import re
from typing import Dict, List, Optional, Set

from lxml import etree

from stubdriver.core.class_catalog import ClassCatalog
from stubdriver.core.class_model import ClassModel, MethodModel, ParameterModel
from stubdriver.core.enums import DEFAULT_PACKAGE
from stubdriver.core.errors import EmptyResultWarning, FormatError
from stubdriver.parsers.base import (
    BaseParser,
    ParseResult,
    build_name_table,
    first_element_child,
    parse_vendor_xml,
    resolve_named_ref,
)

logger = logging.getLogger(__name__)

PLACEHOLDER_NAME = re.compile(r"^(class|untitled|unnamed)\d*$", re.IGNORECASE)

TYPE_TAGS = ["DataType", "Class", "Interface", "Enumeration"]


def is_placeholder_name(name: Optional[str]) -> bool:
    """Whether a class name is empty or a tool-generated default."""
    stripped = (name or "").strip()
    return not stripped or bool(PLACEHOLDER_NAME.match(stripped))


class ClassDiagramParser(BaseParser):
    """
    Parses class diagram exports into a deduplicated list of classes.

    Packages are walked recursively; classes outside any package are
    collected by a second scan and placed in the "default" package.
    """

    def empty_value(self) -> list:
        return []

    def _parse(self, content: str, source_name: str, result: ParseResult) -> List[ClassModel]:
        root = parse_vendor_xml(content)

        models = root.find("Models")
        if models is None:
            raise FormatError("Invalid Visual Paradigm XML format - no Models element")

        type_table = build_name_table(root, TYPE_TAGS)
        catalog = ClassCatalog()
        seen_ids: Set[str] = set()

        self._walk_container(models, DEFAULT_PACKAGE, catalog, seen_ids, type_table)

        for element in models.iter("Class"):
            if self._is_definition(element) and element.get("Id") not in seen_ids:
                self._add_class(element, self._enclosing_package(element), catalog, seen_ids, type_table)

        classes = list(catalog)
        if classes:
            result.add_message(f"Successfully processed {len(classes)} unique classes")
        else:
            result.add_diagnostic(EmptyResultWarning("No classes found in the Visual Paradigm XML file"))
        return classes

    def _walk_container(
        self,
        container: etree._Element,
        package_name: str,
        catalog: ClassCatalog,
        seen_ids: Set[str],
        type_table: Dict[str, str],
    ) -> None:
        for node in container:
            if node.tag == "Package":
                name = (node.get("Name") or "").strip() or package_name
                logger.debug(f"Entering package {name}")
                self._walk_container(node, name, catalog, seen_ids, type_table)
            elif node.tag == "ModelChildren":
                self._walk_container(node, package_name, catalog, seen_ids, type_table)
            elif node.tag == "Class" and self._is_definition(node):
                self._add_class(node, package_name, catalog, seen_ids, type_table)

    @staticmethod
    def _is_definition(element: etree._Element) -> bool:
        return bool(element.get("Id")) and not element.get("Idref")

    @staticmethod
    def _enclosing_package(element: etree._Element) -> str:
        for ancestor in element.iterancestors("Package"):
            name = (ancestor.get("Name") or "").strip()
            if name:
                return name
        return DEFAULT_PACKAGE

    def _add_class(
        self,
        element: etree._Element,
        package_name: str,
        catalog: ClassCatalog,
        seen_ids: Set[str],
        type_table: Dict[str, str],
    ) -> None:
        class_id = element.get("Id")
        if class_id in seen_ids:
            logger.debug(f"Skipping duplicate class ID: {class_id}")
            return
        seen_ids.add(class_id)

        name = (element.get("Name") or "").strip()
        if is_placeholder_name(name):
            logger.debug(f"Discarding placeholder class {name!r} ({class_id})")
            return

        methods = [
            self._parse_operation(operation, j, type_table)
            for j, operation in enumerate(self._direct_children(element, "Operation"))
        ]
        kept = catalog.add_class(ClassModel(class_id, name, package_name, methods))
        logger.debug(
            f"Added class: {name} (ID: {class_id}) in package: {package_name} "
            f"with {len(methods)} methods (kept {kept.package_name}.{kept.name})"
        )

    @staticmethod
    def _direct_children(element: etree._Element, tag: str) -> List[etree._Element]:
        model_children = element.find("ModelChildren")
        if model_children is None:
            return []
        return model_children.findall(tag)

    def _parse_operation(self, operation: etree._Element, index: int, type_table: Dict[str, str]) -> MethodModel:
        name = operation.get("Name") or f"method{index}"
        return_type = self._resolve_type(
            operation.find("ReturnType"), operation.get("ReturnType"), type_table, "void"
        )
        parameters = [
            ParameterModel(
                parameter.get("Name") or f"param{k}",
                self._resolve_type(parameter.find("Type"), parameter.get("Type"), type_table, "Object"),
            )
            for k, parameter in enumerate(self._direct_children(operation, "Parameter"))
        ]
        return MethodModel(
            name=name,
            return_type=return_type,
            visibility=operation.get("Visibility") or "public",
            parameters=parameters,
            id=operation.get("Id") or f"{name}_{index}",
        )

    @staticmethod
    def _resolve_type(
        holder: Optional[etree._Element],
        attribute: Optional[str],
        type_table: Dict[str, str],
        default: str,
    ) -> str:
        """
        Resolve a type reference.

        A child element of holder is resolved by Name or by Idref through the
        data-type table; otherwise the attribute is looked up as an id and,
        failing that, taken as a literal type name.
        """
        if holder is not None:
            resolved = resolve_named_ref(first_element_child(holder), type_table)
            if resolved:
                return resolved
            text = (holder.text or "").strip()
            if text:
                return type_table.get(text, text)
        if attribute:
            return type_table.get(attribute, attribute)
        return default
