"""
Function to class traceability.

Links each system function from the matrix to the classes that take part
in its sequence diagrams, following REF entries into referenced diagrams.
"""

import logging
from typing import Dict, Iterable, Optional, Set

from stubdriver.analysis.matching import NameMatcher
from stubdriver.core.class_catalog import ClassCatalog
from stubdriver.core.diagram import SequenceDiagramModel
from stubdriver.core.function import SystemFunction

logger = logging.getLogger(__name__)


def collect_participant_types(
    diagram: SequenceDiagramModel,
    catalog: Dict[str, SequenceDiagramModel],
    matcher: NameMatcher,
    visited: Optional[Set[str]] = None,
) -> Set[str]:
    """
    Collect the class types of a diagram and of every diagram it references.

    Args:
        diagram: Starting diagram
        catalog: All loaded diagrams keyed by name
        matcher: Matcher used to resolve references
        visited: Diagram names already walked

    Returns:
        Class type names
    """
    visited = visited if visited is not None else set()
    if diagram.name in visited:
        return set()
    visited.add(diagram.name)

    types = diagram.class_types()
    for reference in diagram.references:
        match = matcher.find(reference.diagram_name or reference.name, catalog)
        if match is not None:
            types |= collect_participant_types(match.value, catalog, matcher, visited)
    return types


def map_functions_to_classes(
    functions: Iterable[SystemFunction],
    diagrams: Iterable[SequenceDiagramModel],
    catalog: ClassCatalog,
    matcher: Optional[NameMatcher] = None,
) -> int:
    """
    Recompute related_function_ids for every class in the catalog.

    Args:
        functions: Parsed system functions
        diagrams: Loaded sequence diagrams
        catalog: Class catalog to update in place
        matcher: Matcher for function -> diagram names

    Returns:
        Number of (function, class) links made
    """
    matcher = matcher or NameMatcher()
    diagram_map = {d.name: d for d in diagrams}

    for cls in catalog:
        cls.related_function_ids.clear()

    links = 0
    for function in functions:
        types: Set[str] = set()
        for diagram_name in function.sequence_diagram_names:
            match = matcher.find(diagram_name, diagram_map)
            if match is None:
                logger.debug(f"Function {function.id}: diagram {diagram_name!r} not loaded")
                continue
            types |= collect_participant_types(match.value, diagram_map, matcher)

        for type_name in sorted(types):
            cls = catalog.get_by_name(type_name)
            if cls is not None:
                cls.related_function_ids.add(function.id)
                links += 1

    logger.info(f"Linked functions to classes: {links} link(s)")
    return links
