"""
Generated artifact and generation session module.

Artifacts are append-only; a generation run groups its artifacts into a
GenerationSession that is never mutated after creation.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from stubdriver.core.enums import ArtifactKind
from stubdriver.utils.identifiers import generate_id


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class GeneratedArtifact:
    """A generated source file or summary."""

    file_name: str
    file_content: str
    kind: ArtifactKind
    related_class_name: str
    id: str = field(default_factory=generate_id)
    timestamp: str = field(default_factory=_utc_now)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "fileName": self.file_name,
            "fileContent": self.file_content,
            "kind": self.kind.value,
            "relatedClassName": self.related_class_name,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GeneratedArtifact":
        return cls(
            file_name=data["fileName"],
            file_content=data.get("fileContent", ""),
            kind=ArtifactKind(data.get("kind", ArtifactKind.STUB.value)),
            related_class_name=data.get("relatedClassName", ""),
            id=data.get("id") or generate_id(),
            timestamp=data.get("timestamp") or _utc_now(),
        )


@dataclass(frozen=True)
class GenerationSession:
    """One generation run: the selection and the batch it produced."""

    selected_class_names: tuple[str, ...]
    artifacts: tuple[GeneratedArtifact, ...]
    id: str = field(default_factory=generate_id)
    timestamp: str = field(default_factory=_utc_now)

    def artifacts_of_kind(self, kind: ArtifactKind) -> list[GeneratedArtifact]:
        return [a for a in self.artifacts if a.kind == kind]

    @property
    def file_names(self) -> list[str]:
        return [a.file_name for a in self.artifacts]

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "selectedClassNames": list(self.selected_class_names),
            "artifacts": [a.to_dict() for a in self.artifacts],
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GenerationSession":
        return cls(
            selected_class_names=tuple(data.get("selectedClassNames", [])),
            artifacts=tuple(GeneratedArtifact.from_dict(a) for a in data.get("artifacts", [])),
            id=data.get("id") or generate_id(),
            timestamp=data.get("timestamp") or _utc_now(),
        )
