"""
Sequence diagram representation module.

This module defines the normalized sequence-diagram model: participants,
ordered messages between them, and references to other interactions.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from stubdriver.core.enums import ACTOR, REF, NON_CLASS_TYPES, MessageKind
from stubdriver.utils.identifiers import generate_id


@dataclass
class ParticipantModel:
    """
    A lifeline, actor, or REF occurrence in a sequence diagram.

    The type is a class name, or one of the sentinels "ACTOR", "REF" and
    "unknown".
    """

    name: str
    type: str
    id: str = field(default_factory=generate_id)

    @property
    def is_actor(self) -> bool:
        return self.type == ACTOR

    @property
    def is_reference(self) -> bool:
        return self.type == REF

    @property
    def is_class(self) -> bool:
        return self.type not in NON_CLASS_TYPES

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "type": self.type}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ParticipantModel":
        return cls(data.get("name", ""), data.get("type", ""), data.get("id") or generate_id())


@dataclass
class MessageModel:
    """A message between two participants of the same diagram."""

    source: str
    target: str
    name: str = ""
    type: MessageKind = MessageKind.MESSAGE
    id: str = field(default_factory=generate_id)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "from": self.source,
            "to": self.target,
            "name": self.name,
            "type": self.type.value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MessageModel":
        try:
            kind = MessageKind(data.get("type", MessageKind.MESSAGE.value))
        except ValueError:
            kind = MessageKind.MESSAGE
        return cls(
            source=data.get("from", ""),
            target=data.get("to", ""),
            name=data.get("name", ""),
            type=kind,
            id=data.get("id") or generate_id(),
        )


@dataclass
class ReferenceModel:
    """
    A REF box, or an operation-linked transition treated as one.

    diagram_name is the best-effort target: another diagram's name, or an
    external operation name when no diagram matches.
    """

    name: str
    diagram_name: Optional[str] = None
    participant_id: Optional[str] = None
    message_id: Optional[str] = None
    id: str = field(default_factory=generate_id)

    def to_dict(self) -> dict[str, Any]:
        data = {"id": self.id, "name": self.name}
        if self.diagram_name is not None:
            data["diagramName"] = self.diagram_name
        if self.participant_id is not None:
            data["participantId"] = self.participant_id
        if self.message_id is not None:
            data["messageId"] = self.message_id
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ReferenceModel":
        return cls(
            name=data.get("name", ""),
            diagram_name=data.get("diagramName"),
            participant_id=data.get("participantId"),
            message_id=data.get("messageId"),
            id=data.get("id") or generate_id(),
        )


class SequenceDiagramModel:
    """
    A parsed sequence diagram.

    Created once per uploaded file and not mutated after parsing.
    """

    def __init__(
        self,
        diagram_id: str,
        name: str,
        objects: Optional[list[ParticipantModel]] = None,
        messages: Optional[list[MessageModel]] = None,
        references: Optional[list[ReferenceModel]] = None,
    ):
        self.id = diagram_id
        self.name = name
        self.objects: list[ParticipantModel] = list(objects or [])
        self.messages: list[MessageModel] = list(messages or [])
        self.references: list[ReferenceModel] = list(references or [])

    def participant(self, participant_id: str) -> Optional[ParticipantModel]:
        """Find a participant by id."""
        for obj in self.objects:
            if obj.id == participant_id:
                return obj
        return None

    def participant_index(self) -> dict[str, ParticipantModel]:
        return {obj.id: obj for obj in self.objects}

    def class_types(self) -> set[str]:
        """Names of the classes that appear as lifelines."""
        return {obj.type for obj in self.objects if obj.is_class}

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "objects": [o.to_dict() for o in self.objects],
            "messages": [m.to_dict() for m in self.messages],
            "references": [r.to_dict() for r in self.references],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SequenceDiagramModel":
        return cls(
            data.get("id") or generate_id(),
            data.get("name", ""),
            [ParticipantModel.from_dict(o) for o in data.get("objects", [])],
            [MessageModel.from_dict(m) for m in data.get("messages", [])],
            [ReferenceModel.from_dict(r) for r in data.get("references", [])],
        )

    def __repr__(self) -> str:
        return (
            f"SequenceDiagramModel({self.name!r}, objects={len(self.objects)}, "
            f"messages={len(self.messages)}, references={len(self.references)})"
        )
