"""
Sequence diagram parser.

This module turns one Visual Paradigm "simple" XML export of a sequence
diagram into a SequenceDiagramModel: participants (lifelines, actors and
REF occurrences), the messages between them, and references to other
interactions or unmodeled operations.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from lxml import etree

from stubdriver.analysis.matching import NameMatcher, strip_leading_token
from stubdriver.core.diagram import (
    MessageModel,
    ParticipantModel,
    ReferenceModel,
    SequenceDiagramModel,
)
from stubdriver.core.enums import ACTOR, REF, UNKNOWN, MessageKind
from stubdriver.core.errors import EmptyResultWarning, FormatError
from stubdriver.parsers.base import (
    BaseParser,
    ParseResult,
    build_name_table,
    find_by_id,
    first_element_child,
    parse_vendor_xml,
    resolve_named_ref,
)
from stubdriver.utils.file_loader import diagram_name_from_file
from stubdriver.utils.identifiers import generate_id

logger = logging.getLogger(__name__)

MESSAGE_TYPE_MAP = {
    "create message": MessageKind.CREATE,
    "message": MessageKind.SYNCH_CALL,
    "call message": MessageKind.SYNCH_CALL,
    "synchronous message": MessageKind.SYNCH_CALL,
    "return message": MessageKind.RETURN,
    "reply message": MessageKind.RETURN,
    "reply": MessageKind.RETURN,
    "response": MessageKind.RETURN,
}


def map_message_type(declared: Optional[str]) -> MessageKind:
    """Map a vendor message Type attribute onto a MessageKind."""
    return MESSAGE_TYPE_MAP.get((declared or "Message").strip().lower(), MessageKind.MESSAGE)


@dataclass
class DiagramLookupTables:
    """
    Id -> name tables for one document.

    Built once per parse call and passed to the steps that need them.
    """

    operations: Dict[str, str]
    classes: Dict[str, str]
    frames: Dict[str, str]

    @classmethod
    def build(cls, root: etree._Element) -> "DiagramLookupTables":
        return cls(
            operations=build_name_table(root, ["Operation"]),
            classes=build_name_table(root, ["Class"]),
            frames=build_name_table(root, ["Frame", "InteractionDiagram"]),
        )


@dataclass
class _Occurrence:
    participant: ParticipantModel
    model: Optional[etree._Element]


@dataclass
class _ParsedMessage:
    message: Optional[MessageModel]
    bound_operation: Optional[str]
    transition_operation: Optional[str]


class SequenceDiagramParser(BaseParser):
    """
    Parses sequence diagram exports.

    A missing interaction diagram or root frame rejects the file. A diagram
    with no participants or no messages is still returned, with a warning.
    Messages whose endpoints do not resolve to a participant are dropped.
    """

    def __init__(self, matcher: Optional[NameMatcher] = None):
        """
        Initialize the parser.

        Args:
            matcher: Matcher used to link REF labels to bound operations
        """
        self.matcher = matcher or NameMatcher()

    def _parse(self, content: str, source_name: str, result: ParseResult) -> SequenceDiagramModel:
        root = parse_vendor_xml(content)
        tables = DiagramLookupTables.build(root)

        # REF occurrences may embed InteractionDiagram elements under Models
        diagrams = root.find("Diagrams")
        diagram_element = next((diagrams if diagrams is not None else root).iter("InteractionDiagram"), None)
        if diagram_element is None:
            raise FormatError("No sequence diagram found in XML")

        frame_id = diagram_element.get("_rootFrame")
        frame = find_by_id(root, "Frame", frame_id)
        if frame is None:
            raise FormatError("Invalid sequence diagram structure: root frame not found", {"frame": frame_id})

        name = diagram_name_from_file(source_name) if source_name else diagram_element.get("Name", "")
        logger.info(f"Processing diagram: {name}, frameId: {frame_id}")

        objects, model_map, occurrences = self._collect_participants(root, diagram_element, frame, tables)
        parsed_messages = self._collect_messages(root, model_map, tables)
        messages = [p.message for p in parsed_messages if p.message is not None]
        references = self._collect_references(occurrences, parsed_messages, tables)

        diagram = SequenceDiagramModel(generate_id(), name, objects, messages, references)

        if not objects:
            result.add_diagnostic(EmptyResultWarning(f"No objects found in the sequence diagram {name}"))
        elif not messages:
            result.add_diagnostic(EmptyResultWarning(f"No messages found in the sequence diagram {name}"))
        else:
            result.add_message(
                f"Successfully processed sequence diagram {name} with {len(objects)} objects, "
                f"{len(messages)} messages and {len(references)} references"
            )
        return diagram

    def _collect_participants(
        self,
        root: etree._Element,
        diagram_element: etree._Element,
        frame: etree._Element,
        tables: DiagramLookupTables,
    ) -> Tuple[List[ParticipantModel], Dict[str, str], List[_Occurrence]]:
        """
        Build participants from the diagram shapes.

        Returns:
            Participants, a model-id -> participant-id map, and the REF
            occurrences with their model elements
        """
        objects: List[ParticipantModel] = []
        model_map: Dict[str, str] = {}
        occurrences: List[_Occurrence] = []

        shapes = diagram_element.find("Shapes")
        if shapes is None:
            return objects, model_map, occurrences

        for i, shape in enumerate(shapes.iter("InteractionLifeLine")):
            model_id = shape.get("Model")
            if not model_id or model_id in model_map:
                continue
            model = self._find_model(frame, root, "InteractionLifeLine", model_id)
            class_name = self._resolve_lifeline_class(model, tables) or UNKNOWN
            name = shape.get("Name") or (model.get("Name") if model is not None else None) or f"Object{i}"
            participant = ParticipantModel(name, class_name)
            objects.append(participant)
            model_map[model_id] = participant.id
            logger.debug(f"Added object: {name} -> {class_name}")

        for i, shape in enumerate(shapes.iter("InteractionActor")):
            model_id = shape.get("Model")
            if not model_id or model_id in model_map:
                continue
            participant = ParticipantModel(shape.get("Name") or f"Actor{i}", ACTOR)
            objects.append(participant)
            model_map[model_id] = participant.id
            logger.debug(f"Added actor: {participant.name}")

        for i, shape in enumerate(shapes.iter("InteractionOccurrence")):
            model_id = shape.get("Model")
            if not model_id or model_id in model_map:
                continue
            model = self._find_model(frame, root, "InteractionOccurrence", model_id)
            name = shape.get("Name") or (model.get("Name") if model is not None else None) or f"Ref{i}"
            participant = ParticipantModel(name, REF)
            objects.append(participant)
            model_map[model_id] = participant.id
            occurrences.append(_Occurrence(participant, model))
            logger.debug(f"Added reference: {name}")

        return objects, model_map, occurrences

    @staticmethod
    def _find_model(frame, root, tag: str, model_id: str) -> Optional[etree._Element]:
        model = find_by_id(frame, tag, model_id)
        if model is None:
            models = root.find("Models")
            model = find_by_id(models if models is not None else root, tag, model_id)
        return model

    @staticmethod
    def _resolve_lifeline_class(model: Optional[etree._Element], tables: DiagramLookupTables) -> Optional[str]:
        if model is None:
            return None
        base = model.find("BaseClassifier")
        if base is None:
            return None
        target = base.find("Class")
        if target is None:
            target = first_element_child(base)
        return resolve_named_ref(target, tables.classes)

    def _collect_messages(
        self,
        root: etree._Element,
        model_map: Dict[str, str],
        tables: DiagramLookupTables,
    ) -> List[_ParsedMessage]:
        parsed: List[_ParsedMessage] = []
        dropped = 0

        for element in root.iter("Message"):
            if not any(a.tag == "ModelRelationshipContainer" for a in element.iterancestors()):
                continue

            bound_operation = self._bound_operation(element, tables)
            transition_operation = self._transition_operation(element, tables)

            source = model_map.get(element.get("EndRelationshipFromMetaModelElement") or "")
            target = model_map.get(element.get("EndRelationshipToMetaModelElement") or "")
            if not source or not target:
                dropped += 1
                parsed.append(_ParsedMessage(None, bound_operation, transition_operation))
                continue

            message = MessageModel(
                source=source,
                target=target,
                name=bound_operation or element.get("Name") or "",
                type=map_message_type(element.get("Type")),
            )
            parsed.append(_ParsedMessage(message, bound_operation, transition_operation))
            logger.debug(f"Added message: {message.name} from {source} to {target}")

        if dropped:
            logger.warning(f"Dropped {dropped} message(s) with unresolved endpoints")
        return parsed

    @staticmethod
    def _bound_operation(element: etree._Element, tables: DiagramLookupTables) -> Optional[str]:
        call = element.find("ActionType/ActionTypeCall")
        if call is None:
            return None
        operation_id = call.get("Operation")
        if operation_id:
            return tables.operations.get(operation_id)
        return resolve_named_ref(first_element_child(call), tables.operations)

    @staticmethod
    def _transition_operation(element: Optional[etree._Element], tables: DiagramLookupTables) -> Optional[str]:
        if element is None:
            return None
        operation = element.find("TransitFrom/Operation")
        if operation is not None:
            return resolve_named_ref(operation, tables.operations)
        operation_id = element.get("TransitFromOperation")
        if operation_id:
            return tables.operations.get(operation_id, operation_id)
        return None

    def _collect_references(
        self,
        occurrences: List[_Occurrence],
        parsed_messages: List[_ParsedMessage],
        tables: DiagramLookupTables,
    ) -> List[ReferenceModel]:
        """
        Resolve REF occurrences and recover operation-only references.

        Each occurrence is resolved through, in order, its transition-from
        operation, its covered interaction, a bound operation whose name
        matches the label, and finally the label itself without its "ref"
        prefix. Messages carrying a transition-from operation that no
        occurrence captured yield an extra reference named REF_<operation>.
        """
        references: List[ReferenceModel] = []
        captured = set()
        bound_operations = {p.bound_operation: p.bound_operation for p in parsed_messages if p.bound_operation}

        for occurrence in occurrences:
            label = occurrence.participant.name
            target = self._transition_operation(occurrence.model, tables)
            source = "transition"

            if not target and occurrence.model is not None:
                covered = first_element_child(occurrence.model.find("CoveredInteraction"))
                target = resolve_named_ref(covered, tables.frames)
                source = "covered interaction"

            if not target:
                match = self.matcher.find(label, bound_operations)
                target = match.key if match else None
                source = "bound operation"

            if not target:
                target = " ".join(strip_leading_token(label).split()) or label
                source = "label"

            references.append(ReferenceModel(label, target, participant_id=occurrence.participant.id))
            captured.add(target.lower())
            logger.debug(f"Reference {label!r} -> {target!r} (via {source})")

        for parsed in parsed_messages:
            operation = parsed.transition_operation
            if not operation or operation.lower() in captured:
                continue
            references.append(
                ReferenceModel(
                    f"REF_{operation}",
                    operation,
                    message_id=parsed.message.id if parsed.message else None,
                )
            )
            captured.add(operation.lower())
            logger.debug(f"Recovered operation-only reference REF_{operation}")

        return references
