"""
Workspace module.

The Workspace holds every collection a host application works with:
uploaded files, parsed functions, diagrams and classes, generated
artifacts and generation sessions. It ingests uploads, keeps the
function -> class traceability current, runs generations and persists
each collection through a StateStore.
"""

import logging
import os
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

from stubdriver.analysis.matching import NameMatcher
from stubdriver.analysis.traceability import map_functions_to_classes
from stubdriver.config.settings import Settings
from stubdriver.core.artifact import GeneratedArtifact, GenerationSession
from stubdriver.core.class_catalog import ClassCatalog
from stubdriver.core.class_model import ClassModel
from stubdriver.core.diagram import SequenceDiagramModel
from stubdriver.core.enums import FileType
from stubdriver.core.errors import StorageError, StubDriverError
from stubdriver.core.function import SystemFunction
from stubdriver.core.uploaded_file import UploadedFile
from stubdriver.parsers.base import BaseParser, ParseResult
from stubdriver.parsers.class_diagram import ClassDiagramParser
from stubdriver.parsers.rtm import RequirementTableParser
from stubdriver.parsers.sequence_diagram import SequenceDiagramParser
from stubdriver.pipelines.generation import GenerationPipeline
from stubdriver.storage.state_store import InMemoryStateStore, JsonFileStateStore, StateStore
from stubdriver.utils.file_loader import diagram_name_from_file, read_file_as_text, validate_file_extension
from stubdriver.utils.validation import DiagramValidator

logger = logging.getLogger(__name__)

# Persisted collection names
UPLOADED_FILES = "uploaded_files"
SYSTEM_FUNCTIONS = "system_functions"
SEQUENCE_DIAGRAMS = "sequence_diagrams"
ALL_CLASSES = "all_classes"
GENERATED_CODES = "generated_codes"
GENERATION_SESSIONS = "generation_sessions"
CURRENT_STEP = "current_step"

_LOG_LEVELS = {
    "success": logging.INFO,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


@dataclass(frozen=True)
class Notice:
    """A user-facing notification produced by a workspace operation."""

    level: str
    message: str

    @classmethod
    def emit(cls, level: str, message: str) -> "Notice":
        """Create a notice and log it at the matching level."""
        logger.log(_LOG_LEVELS.get(level, logging.INFO), message)
        return cls(level, message)


@dataclass(frozen=True)
class ReferenceStatus:
    """Whether a REF entry of a diagram resolves to a loaded diagram."""

    name: str
    diagram_name: Optional[str]
    found: bool
    resolved_diagram: Optional[str] = None


class Workspace:
    """
    In-process state of one stub/driver generation project.

    Collections are replaced as a whole on every change and persisted
    right after; reset() swaps every collection for an empty one.
    """

    def __init__(self, settings: Optional[Settings] = None, store: Optional[StateStore] = None):
        """
        Initialize the workspace and restore persisted collections.

        Args:
            settings: Settings; defaults are used when omitted
            store: State store; built from the "storage" settings when omitted
        """
        self.settings = settings or Settings()
        self.store = store or self._default_store()
        self.matcher = NameMatcher.from_settings(self.settings)
        self.pipeline = GenerationPipeline(self.settings, matcher=self.matcher)

        self.uploaded_files: List[UploadedFile] = []
        self.functions: List[SystemFunction] = []
        self.diagrams: List[SequenceDiagramModel] = []
        self.classes = ClassCatalog()
        self.artifacts: List[GeneratedArtifact] = []
        self.sessions: List[GenerationSession] = []
        self.current_step = 1

        self.restore()

    def _default_store(self) -> StateStore:
        namespace = self.settings.get("storage", "namespace", default="stub_driver")
        path = self.settings.get("storage", "path")
        if path:
            return JsonFileStateStore(path, namespace)
        return InMemoryStateStore(namespace)

    # Persistence

    def restore(self) -> List[Notice]:
        """
        Load every collection from the store.

        A collection that cannot be read starts empty; the others are
        still restored. Restored diagrams are validated again and their
        dangling messages dropped.

        Returns:
            Notices about collections that could not be restored
        """
        notices: List[Notice] = []

        def load(collection: str, convert: Callable[[Any], Any], default: Any) -> Any:
            try:
                raw = self.store.load(collection)
                return default if raw is None else convert(raw)
            except (StorageError, KeyError, TypeError, ValueError) as e:
                notices.append(Notice.emit("warning", f"Could not restore {collection}: {e}"))
                return default

        self.uploaded_files = load(UPLOADED_FILES, lambda raw: [UploadedFile.from_dict(f) for f in raw], [])
        self.functions = load(SYSTEM_FUNCTIONS, lambda raw: [SystemFunction.from_dict(f) for f in raw], [])
        self.diagrams = load(SEQUENCE_DIAGRAMS, lambda raw: [SequenceDiagramModel.from_dict(d) for d in raw], [])
        self.classes = load(ALL_CLASSES, ClassCatalog.from_list, ClassCatalog())
        self.artifacts = load(GENERATED_CODES, lambda raw: [GeneratedArtifact.from_dict(a) for a in raw], [])
        self.sessions = load(GENERATION_SESSIONS, lambda raw: [GenerationSession.from_dict(s) for s in raw], [])
        self.current_step = load(CURRENT_STEP, int, 1)

        validator = DiagramValidator()
        for diagram in self.diagrams:
            validator.validate(diagram, auto_fix=True)

        if self.uploaded_files or self.diagrams or len(self.classes):
            logger.info(
                f"Restored {len(self.uploaded_files)} file(s), {len(self.functions)} function(s), "
                f"{len(self.diagrams)} diagram(s), {len(self.classes)} class(es)"
            )
        return notices

    def _persist(self, *collections: str) -> List[Notice]:
        """
        Save collections to the store.

        A collection that cannot be written keeps its in-memory value; the
        failure is reported as a warning notice and the others are still saved.
        """
        serializers: Dict[str, Callable[[], Any]] = {
            UPLOADED_FILES: lambda: [f.to_dict() for f in self.uploaded_files],
            SYSTEM_FUNCTIONS: lambda: [f.to_dict() for f in self.functions],
            SEQUENCE_DIAGRAMS: lambda: [d.to_dict() for d in self.diagrams],
            ALL_CLASSES: self.classes.to_list,
            GENERATED_CODES: lambda: [a.to_dict() for a in self.artifacts],
            GENERATION_SESSIONS: lambda: [s.to_dict() for s in self.sessions],
            CURRENT_STEP: lambda: self.current_step,
        }
        notices: List[Notice] = []
        for collection in collections:
            try:
                self.store.save(collection, serializers[collection]())
            except StorageError as e:
                notices.append(Notice.emit("warning", f"Could not save {collection}: {e}"))
        return notices

    # Uploads

    async def add_file(self, path: str, file_type: FileType) -> List[Notice]:
        """
        Read, parse and merge an uploaded file.

        Reading is the only awaited step; parsing and merging run
        synchronously once the content is available.

        Args:
            path: Path to the file
            file_type: Declared artifact type

        Returns:
            Notices describing the outcome
        """
        name = os.path.basename(path)
        if not validate_file_extension(name, file_type):
            return [Notice.emit("error", self._extension_message(name, file_type))]
        try:
            content = await read_file_as_text(path)
        except StubDriverError as e:
            return [Notice.emit("error", f"Failed to upload {name}: {e}")]
        return self.add_content(name, content, file_type)

    def add_content(self, name: str, content: str, file_type: FileType) -> List[Notice]:
        """
        Parse and merge already-read file content.

        A file whose parse is rejected is not added to any collection and
        leaves the loaded data untouched.

        Args:
            name: File name
            content: File text
            file_type: Declared artifact type

        Returns:
            Notices describing the outcome
        """
        if not validate_file_extension(name, file_type):
            return [Notice.emit("error", self._extension_message(name, file_type))]

        result = self._parser_for(file_type).parse(content, name)
        notices = self._result_notices(result)
        # A matrix without id or name columns still replaces the functions, with none
        columns_missing = file_type == FileType.RTM and result.value == []
        if result.value is None or (result.errors and not columns_missing):
            notices.append(Notice.emit("error", f"Failed to upload {name}"))
            return notices

        if file_type == FileType.RTM:
            self.functions = list(result.value)
            self._drop_uploads_of_type(FileType.RTM)
            changed = [SYSTEM_FUNCTIONS]
        elif file_type == FileType.SEQUENCE_DIAGRAM:
            diagram = result.value
            DiagramValidator().validate(diagram, auto_fix=True)
            self.diagrams = [d for d in self.diagrams if d.name != diagram.name] + [diagram]
            self.uploaded_files = [
                f for f in self.uploaded_files
                if not (f.type == FileType.SEQUENCE_DIAGRAM and diagram_name_from_file(f.name) == diagram.name)
            ]
            changed = [SEQUENCE_DIAGRAMS]
        else:
            self.classes = ClassCatalog(result.value)
            self._drop_uploads_of_type(FileType.CLASS_DIAGRAM)
            changed = [ALL_CLASSES]

        self.uploaded_files = self.uploaded_files + [UploadedFile(name, file_type, content)]
        self._refresh_traceability()
        persisted = self._persist(*dict.fromkeys([UPLOADED_FILES, ALL_CLASSES, *changed]))
        notices.append(Notice.emit("success", f"File {name} uploaded successfully"))
        notices.extend(persisted)
        return notices

    def remove_file(self, file_id: str) -> List[Notice]:
        """
        Remove an upload and the data parsed from it.

        Removing a sequence diagram removes the diagram of the same name;
        removing the matrix clears the functions; removing the class
        diagram clears the catalog.

        Args:
            file_id: Id of the uploaded file

        Returns:
            Notices describing the outcome
        """
        upload = next((f for f in self.uploaded_files if f.id == file_id), None)
        if upload is None:
            return [Notice.emit("warning", f"No uploaded file with id {file_id}")]

        if upload.type == FileType.RTM:
            self.functions = []
        elif upload.type == FileType.SEQUENCE_DIAGRAM:
            name = diagram_name_from_file(upload.name)
            self.diagrams = [d for d in self.diagrams if d.name != name]
        else:
            self.classes = ClassCatalog()

        self.uploaded_files = [f for f in self.uploaded_files if f.id != file_id]
        self._refresh_traceability()
        persisted = self._persist(UPLOADED_FILES, SYSTEM_FUNCTIONS, SEQUENCE_DIAGRAMS, ALL_CLASSES)
        return [Notice.emit("success", f"File {upload.name} removed")] + persisted

    def _parser_for(self, file_type: FileType) -> BaseParser:
        if file_type == FileType.RTM:
            return RequirementTableParser(self.settings)
        if file_type == FileType.SEQUENCE_DIAGRAM:
            return SequenceDiagramParser(self.matcher)
        return ClassDiagramParser()

    def _drop_uploads_of_type(self, file_type: FileType) -> None:
        self.uploaded_files = [f for f in self.uploaded_files if f.type != file_type]

    @staticmethod
    def _extension_message(name: str, file_type: FileType) -> str:
        expected = ".csv" if file_type == FileType.RTM else ".xml"
        return f"Invalid file {name}: a {file_type.value} upload must be a {expected} file"

    @staticmethod
    def _result_notices(result: ParseResult) -> List[Notice]:
        notices = [Notice("error", e) for e in result.errors]
        notices.extend(Notice("warning", w) for w in result.warnings)
        notices.extend(Notice("info", m) for m in result.messages)
        return notices

    def _refresh_traceability(self) -> None:
        if len(self.classes):
            map_functions_to_classes(self.functions, self.diagrams, self.classes, self.matcher)

    # Queries

    def classes_for_function(self, function_id: str) -> List[ClassModel]:
        """Classes taking part in the diagrams of a system function."""
        return self.classes.classes_for_function(function_id)

    def reference_status(self, diagram_name: str) -> List[ReferenceStatus]:
        """
        Report which REF entries of a diagram resolve to a loaded diagram.

        Args:
            diagram_name: Name of a loaded diagram

        Returns:
            One status per reference, empty when the diagram is not loaded
        """
        diagram_map = {d.name: d for d in self.diagrams}
        diagram = diagram_map.get(diagram_name)
        if diagram is None:
            return []

        statuses = []
        for reference in diagram.references:
            match = self.matcher.find(reference.diagram_name or reference.name, diagram_map)
            statuses.append(
                ReferenceStatus(
                    name=reference.name,
                    diagram_name=reference.diagram_name,
                    found=match is not None,
                    resolved_diagram=match.key if match else None,
                )
            )
        return statuses

    # Generation

    def generate(self, selected_class_names: List[str]) -> Tuple[Optional[GenerationSession], List[Notice]]:
        """
        Generate stubs and drivers for the selected classes.

        On failure nothing is appended to the artifact log or sessions.

        Args:
            selected_class_names: Classes under test

        Returns:
            The new session (None on failure) and notices
        """
        self.pipeline.setup(self.diagrams, self.classes)
        result = self.pipeline.execute(selected_class_names=selected_class_names)
        if not result.success:
            return None, [Notice.emit("error", e) for e in result.errors]

        session = result.outputs["session"]
        self.artifacts = self.artifacts + list(session.artifacts)
        self.sessions = self.sessions + [session]
        persisted = self._persist(GENERATED_CODES, GENERATION_SESSIONS)
        notices = [Notice.emit("success", m) for m in result.messages[-1:]]
        notices.extend(Notice.emit("warning", w) for w in result.warnings)
        notices.extend(persisted)
        return session, notices

    def set_step(self, step: int) -> List[Notice]:
        self.current_step = step
        return self._persist(CURRENT_STEP)

    def reset(self) -> List[Notice]:
        """Replace every collection with an empty one and clear the store."""
        self.uploaded_files = []
        self.functions = []
        self.diagrams = []
        self.classes = ClassCatalog()
        self.artifacts = []
        self.sessions = []
        self.current_step = 1
        self.store.clear()
        return [Notice.emit("success", "Workspace reset")]
