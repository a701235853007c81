"""
Diagram validation module.

Checks parsed or restored sequence diagrams against the model invariants
and optionally repairs them by dropping offending elements.
"""

import logging

from stubdriver.core.diagram import SequenceDiagramModel

logger = logging.getLogger(__name__)


class DiagramValidator:
    """
    Validates sequence diagrams.

    A message whose endpoints are not participants of the same diagram is
    dangling; dangling messages are dropped, never fatal. References bound
    to a missing participant lose that binding.
    """

    def __init__(self):
        self.issues: list[str] = []
        self.fixes_applied: list[str] = []

    def validate(self, diagram: SequenceDiagramModel, auto_fix: bool = True) -> bool:
        """
        Validate a diagram and optionally apply fixes in place.

        Args:
            diagram: The diagram to check
            auto_fix: Whether to drop dangling elements

        Returns:
            True if the diagram is valid (after fixes), False otherwise
        """
        self.issues = []
        self.fixes_applied = []

        self._check_duplicate_participants(diagram)
        dangling = self._check_dangling_messages(diagram)
        orphan_refs = self._check_reference_bindings(diagram)

        if auto_fix:
            if dangling:
                diagram.messages = [m for m in diagram.messages if m.id not in dangling]
                self.fixes_applied.append(
                    f"Dropped {len(dangling)} dangling message(s) from {diagram.name}"
                )
            for ref in diagram.references:
                if ref.id in orphan_refs:
                    ref.participant_id = None
            if orphan_refs:
                self.fixes_applied.append(
                    f"Unbound {len(orphan_refs)} reference(s) in {diagram.name}"
                )
            self.issues = [i for i in self.issues if not i.startswith(("Dangling", "Reference"))]

        for issue in self.issues:
            logger.warning(f"Validation issue: {issue}")
        for fix in self.fixes_applied:
            logger.info(f"Fix applied: {fix}")

        return len(self.issues) == 0

    def _check_duplicate_participants(self, diagram: SequenceDiagramModel) -> None:
        seen = set()
        for obj in diagram.objects:
            if obj.id in seen:
                self.issues.append(f"Duplicate participant id {obj.id} in {diagram.name}")
            seen.add(obj.id)

    def _check_dangling_messages(self, diagram: SequenceDiagramModel) -> set[str]:
        ids = {obj.id for obj in diagram.objects}
        dangling = set()
        for message in diagram.messages:
            if message.source not in ids or message.target not in ids:
                dangling.add(message.id)
                self.issues.append(
                    f"Dangling message {message.name!r} ({message.id}) in {diagram.name}"
                )
        return dangling

    def _check_reference_bindings(self, diagram: SequenceDiagramModel) -> set[str]:
        ids = {obj.id for obj in diagram.objects}
        orphans = set()
        for ref in diagram.references:
            if ref.participant_id is not None and ref.participant_id not in ids:
                orphans.add(ref.id)
                self.issues.append(f"Reference {ref.name!r} bound to missing participant")
        return orphans
