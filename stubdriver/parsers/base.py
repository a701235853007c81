"""
Shared parser infrastructure.

This module defines ParseResult, the diagnostic-carrying return value of
every parser, the BaseParser boundary that turns errors into diagnostics,
and helpers for the vendor's "simple" XML export.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional

from lxml import etree

from stubdriver.core.errors import FormatError, StubDriverError

logger = logging.getLogger(__name__)

VENDOR_ROOT_TAG = "Project"
VENDOR_STRUCTURE_ATTR = "Xml_structure"
VENDOR_STRUCTURE_VALUE = "simple"


@dataclass
class ParseResult:
    """
    Outcome of parsing one input file.

    value is None when the file was rejected; otherwise it holds the parsed
    (possibly empty) result. Errors and warnings are user-facing texts.
    """

    # Parsed value, or None when the file was rejected
    value: Any = None

    # Fatal diagnostics for this file
    errors: list[str] = field(default_factory=list)

    # Non-fatal diagnostics
    warnings: list[str] = field(default_factory=list)

    # Informational messages
    messages: list[str] = field(default_factory=list)

    # Structured non-fatal diagnostics (EmptyResultWarning and the like)
    diagnostics: list[StubDriverError] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.value is not None and not self.errors

    def add_error(self, message: str) -> None:
        self.errors.append(message)
        logger.error(message)

    def add_warning(self, message: str) -> None:
        self.warnings.append(message)
        logger.warning(message)

    def add_message(self, message: str) -> None:
        self.messages.append(message)
        logger.info(message)

    def add_diagnostic(self, diagnostic: StubDriverError) -> None:
        """Record a structured non-fatal diagnostic, also listed as a warning."""
        self.diagnostics.append(diagnostic)
        self.add_warning(str(diagnostic))


class BaseParser(ABC):
    """
    Base class for input parsers.

    Subclasses implement _parse and may raise StubDriverError subclasses;
    parse() converts every failure into a diagnostic so nothing escapes.
    """

    def empty_value(self) -> Any:
        """Value returned when parsing fails with a non-format error."""
        return None

    def parse(self, content: str, source_name: str = "") -> ParseResult:
        """
        Parse file content.

        Args:
            content: Raw text of the file
            source_name: File name, used for naming and diagnostics

        Returns:
            ParseResult with the parsed value and diagnostics
        """
        result = ParseResult()
        try:
            result.value = self._parse(content, source_name, result)
        except FormatError as e:
            result.value = None
            result.add_error(f"{source_name or 'input'}: {e}")
        except StubDriverError as e:
            result.value = self.empty_value()
            result.add_error(f"{source_name or 'input'}: {e}")
        except Exception as e:
            logger.exception("Unexpected failure parsing %s", source_name or "input")
            result.value = None
            result.add_error(f"{source_name or 'input'}: failed to parse ({e})")
        return result

    @abstractmethod
    def _parse(self, content: str, source_name: str, result: ParseResult) -> Any:
        """Parse content, recording non-fatal diagnostics on result."""


def parse_vendor_xml(content: str) -> etree._Element:
    """
    Parse a vendor export and check its root marker.

    Args:
        content: XML text

    Returns:
        The root element

    Raises:
        FormatError: If the XML is malformed or not a "simple" export
    """
    if not content or not content.strip():
        raise FormatError("Empty XML document")

    parser = etree.XMLParser(resolve_entities=False, no_network=True, huge_tree=False)
    try:
        root = etree.fromstring(content.strip().encode("utf-8"), parser=parser)
    except etree.XMLSyntaxError as e:
        raise FormatError("Invalid XML format", {"reason": str(e)}) from e

    if root.tag != VENDOR_ROOT_TAG or root.get(VENDOR_STRUCTURE_ATTR) != VENDOR_STRUCTURE_VALUE:
        raise FormatError(
            "Invalid Visual Paradigm XML format",
            {"root": root.tag, VENDOR_STRUCTURE_ATTR: root.get(VENDOR_STRUCTURE_ATTR)},
        )
    return root


def build_name_table(root: etree._Element, tags: Iterable[str]) -> Dict[str, str]:
    """
    Map element Id to Name for every definition element with the given tags.

    Args:
        root: Document root
        tags: Element tags to index

    Returns:
        Dictionary of id -> name
    """
    table: Dict[str, str] = {}
    for tag in tags:
        for element in root.iter(tag):
            element_id = element.get("Id")
            name = element.get("Name")
            if element_id and name and element_id not in table:
                table[element_id] = name
    return table


def find_by_id(scope: etree._Element, tag: str, element_id: Optional[str]) -> Optional[etree._Element]:
    """Find the first element with the given tag and Id under scope."""
    if not element_id:
        return None
    for element in scope.iter(tag):
        if element.get("Id") == element_id:
            return element
    return None


def first_element_child(element: Optional[etree._Element]) -> Optional[etree._Element]:
    """First child that is an element (skips comments and processing instructions)."""
    if element is None:
        return None
    for node in element:
        if isinstance(node.tag, str):
            return node
    return None


def resolve_named_ref(element: Optional[etree._Element], table: Dict[str, str]) -> Optional[str]:
    """
    Resolve a reference element to a name.

    The element's Name wins; otherwise its Idref is looked up in table.
    """
    if element is None:
        return None
    name = element.get("Name")
    if name:
        return name
    idref = element.get("Idref")
    if idref:
        return table.get(idref)
    return None
