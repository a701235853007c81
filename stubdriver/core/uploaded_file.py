"""
Uploaded file record.

Keeps the raw content of every accepted upload alongside its declared
type, so a workspace can list and remove uploads later.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from stubdriver.core.enums import FileType
from stubdriver.utils.identifiers import generate_id


@dataclass
class UploadedFile:
    """An accepted design artifact upload."""

    name: str
    type: FileType
    content: str
    size: int = 0
    id: str = field(default_factory=generate_id)
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    def __post_init__(self):
        if not self.size:
            self.size = len(self.content.encode("utf-8"))

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type.value,
            "size": self.size,
            "content": self.content,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "UploadedFile":
        return cls(
            name=data["name"],
            type=FileType(data["type"]),
            content=data.get("content", ""),
            size=data.get("size", 0),
            id=data.get("id") or generate_id(),
            timestamp=data.get("timestamp") or datetime.now(timezone.utc).isoformat(),
        )
