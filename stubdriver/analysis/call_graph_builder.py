"""
Call graph construction module.

Walks every loaded sequence diagram, following REF entries into the
diagrams they name, and records caller -> callee edges for messages the
MessageClassifier considers forward calls. References that resolve to no
loaded diagram become calls to a synthetic service class.
"""

import logging
import re
from typing import Dict, Iterable, List, Optional, Set

from stubdriver.analysis.classifier import MessageClassifier
from stubdriver.analysis.matching import MatchResult, NameMatcher, expand_camel_case, strip_leading_token
from stubdriver.core.call_graph import CallGraph
from stubdriver.core.diagram import ReferenceModel, SequenceDiagramModel
from stubdriver.core.errors import UnresolvedReferenceError

logger = logging.getLogger(__name__)

# Ordered verb patterns -> synthetic service class for unmodeled operations
SERVICE_PATTERNS = [
    (re.compile(r"deposit|withdraw|transfer|process|payment|transaction", re.IGNORECASE), "TransactionService"),
    (re.compile(r"insert|update|save|store|persist|delete", re.IGNORECASE), "DataService"),
    (re.compile(r"transform|convert", re.IGNORECASE), "TransformService"),
    (re.compile(r"validate|validation|check|verify", re.IGNORECASE), "ValidationService"),
    (re.compile(r"calculate|calculation|compute", re.IGNORECASE), "CalculationService"),
]

_OPERATION_NAME = re.compile(r"([A-Za-z_]\w*)\s*\(")


def _label_text(label: str) -> str:
    text = label or ""
    if text.upper().startswith("REF_"):
        text = text[4:]
    return strip_leading_token(text)


def derive_service_name(label: str) -> str:
    """
    Derive a synthetic service class name from an operation-style label.

    Args:
        label: Reference label or operation name

    Returns:
        A class name ending in "Service"
    """
    text = _label_text(label)
    for pattern, service in SERVICE_PATTERNS:
        if pattern.search(text):
            return service

    words = re.split(r"[^A-Za-z0-9]+", expand_camel_case(text))
    base = "".join(w[:1].upper() + w[1:] for w in words if w) or "External"
    if base[0].isdigit():
        base = "Op" + base
    return base if base.endswith("Service") else base + "Service"


def operation_name(label: str) -> str:
    """
    Turn a message or reference label into a method-style identifier.

    "processDeposit(amount)" -> "processDeposit", "ref Deposit Funds" -> "depositFunds".
    """
    match = _OPERATION_NAME.search(label or "")
    if match:
        return match.group(1)
    words = [w for w in re.split(r"[^A-Za-z0-9]+", expand_camel_case(_label_text(label))) if w]
    if not words:
        return ""
    name = words[0].lower() + "".join(w[:1].upper() + w[1:] for w in words[1:])
    return name if not name[0].isdigit() else "op" + name


class CallGraphBuilder:
    """
    Builds the caller -> callee graph for one generation run.

    Diagram traversal is guarded by a visited set of diagram names, so
    mutually referencing diagrams terminate.
    """

    def __init__(self, matcher: Optional[NameMatcher] = None, classifier: Optional[MessageClassifier] = None):
        """
        Initialize the builder.

        Args:
            matcher: Matcher used to resolve references to diagrams
            classifier: Classifier deciding call vs. return
        """
        self.matcher = matcher or NameMatcher()
        self.classifier = classifier or MessageClassifier()

    def build(
        self,
        diagrams: Iterable[SequenceDiagramModel],
        classes_under_test: Optional[Iterable[str]] = None,
    ) -> CallGraph:
        """
        Build the call graph over all diagrams.

        Args:
            diagrams: Loaded sequence diagrams
            classes_under_test: Fallback callers for unresolved references
                that no message calls through

        Returns:
            The call graph
        """
        catalog: Dict[str, SequenceDiagramModel] = {}
        for diagram in diagrams:
            catalog.setdefault(diagram.name, diagram)

        graph = CallGraph()
        visited: Set[str] = set()
        fallback_callers = sorted(set(classes_under_test or []))

        for name in catalog:
            self.process_diagram(catalog[name], catalog, graph, visited, fallback_callers)

        logger.info(
            f"Built call graph with {graph.edge_count()} edges from {len(visited)} diagrams"
        )
        return graph

    def process_diagram(
        self,
        diagram: SequenceDiagramModel,
        catalog: Dict[str, SequenceDiagramModel],
        graph: CallGraph,
        visited: Set[str],
        fallback_callers: List[str],
    ) -> None:
        """
        Record a diagram's call edges and follow its references.

        Args:
            diagram: Diagram to process
            catalog: All loaded diagrams keyed by name
            graph: Graph being built
            visited: Names of diagrams already processed
            fallback_callers: Callers used when a reference has none
        """
        if diagram.name in visited:
            return
        visited.add(diagram.name)
        logger.debug(f"Processing diagram {diagram.name}")

        participants = diagram.participant_index()
        for message in diagram.messages:
            source = participants.get(message.source)
            target = participants.get(message.target)
            if source is None or target is None:
                continue
            if not self.classifier.is_call(message.type, message.name):
                continue
            if graph.add_edge(source.type, target.type, operation_name(message.name) or None):
                logger.debug(f"Edge {source.type} -> {target.type} ({message.name})")

        for reference in diagram.references:
            self._process_reference(diagram, reference, catalog, graph, visited, fallback_callers)

    def _process_reference(
        self,
        diagram: SequenceDiagramModel,
        reference: ReferenceModel,
        catalog: Dict[str, SequenceDiagramModel],
        graph: CallGraph,
        visited: Set[str],
        fallback_callers: List[str],
    ) -> None:
        target_name = reference.diagram_name or reference.name
        try:
            match = self.resolve_reference(reference, catalog)
        except UnresolvedReferenceError as e:
            logger.debug(str(e))
        else:
            if match.key != diagram.name:
                logger.debug(f"Following reference {reference.name!r} into {match.key}")
                self.process_diagram(match.value, catalog, graph, visited, fallback_callers)
            return

        service = derive_service_name(target_name)
        operation = operation_name(target_name)
        callers = self.reference_callers(diagram, reference) or fallback_callers
        logger.info(
            f"Unresolved reference {reference.name!r} in {diagram.name}; "
            f"treating as {service}.{operation or '?'} called by {callers}"
        )
        for caller in callers:
            graph.add_external_service(caller, service, operation or None)

    def resolve_reference(self, reference: ReferenceModel, catalog: Dict[str, SequenceDiagramModel]) -> MatchResult:
        """
        Match a reference to a loaded diagram by its resolved target, then by its label.

        Raises:
            UnresolvedReferenceError: If neither matches a loaded diagram
        """
        try:
            return self.matcher.resolve(reference.diagram_name or reference.name, catalog)
        except UnresolvedReferenceError:
            if reference.diagram_name and reference.name != reference.diagram_name:
                return self.matcher.resolve(reference.name, catalog)
            raise

    def reference_callers(self, diagram: SequenceDiagramModel, reference: ReferenceModel) -> List[str]:
        """
        Find the classes that call through a reference.

        For a REF box these are the senders of call messages to its
        participant; for a recovered operation reference, the sender of
        the transition message.
        """
        participants = diagram.participant_index()
        callers: Set[str] = set()
        for message in diagram.messages:
            through_box = reference.participant_id is not None and message.target == reference.participant_id
            through_message = reference.message_id is not None and message.id == reference.message_id
            if not (through_box or through_message):
                continue
            if through_box and not self.classifier.is_call(message.type, message.name):
                continue
            source = participants.get(message.source)
            if source is not None and source.is_class:
                callers.add(source.type)
        return sorted(callers)
