"""Writing the generated document into a project workspace.

The output file may already exist and hold hand-written content. Only the
marker-delimited stackdoc sections are ever rewritten:

- no file: the full document is written
- file without stackdoc markers: the stackdoc block is appended
- file with markers: each section body is replaced in place
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from stackdoc.composition.document import ComposedDocument
from stackdoc.composition.markers import MarkerManager
from stackdoc.core.logging import get_logger
from stackdoc.core.models import SECTION_ORDER, Section

LOGGER = get_logger(__name__)


class WriteAction(str, Enum):
    CREATED = "created"
    APPENDED = "appended"
    UPDATED = "updated"
    UNCHANGED = "unchanged"


@dataclass(frozen=True)
class WriteOutcome:
    """What a write did, or would do on a dry run."""

    path: Path
    action: WriteAction
    content: str


class WorkspaceWriter:
    """Merges composed documents into output files."""

    def __init__(self, markers: Optional[MarkerManager] = None) -> None:
        self._markers = markers or MarkerManager()

    def plan(self, document: ComposedDocument, path: Path) -> WriteOutcome:
        """Compute the new file content without touching the disk."""
        if not path.exists():
            return WriteOutcome(path, WriteAction.CREATED, document.render(self._markers))

        existing = path.read_text(encoding="utf-8")
        if not self._markers.has_any_section(existing):
            return WriteOutcome(path, WriteAction.APPENDED, self._append(existing, document))

        updated = existing
        for section in SECTION_ORDER:
            key = section.value
            if self._markers.has_section(updated, key):
                updated = self._markers.replace(updated, key, document.section(section))
            else:
                LOGGER.info(f"{path}: section '{key}' missing, appending it")
                updated = updated.rstrip("\n") + "\n\n" + self._markers.wrap(key, document.section(section)) + "\n"

        action = WriteAction.UNCHANGED if updated == existing else WriteAction.UPDATED
        return WriteOutcome(path, action, updated)

    def _append(self, existing: str, document: ComposedDocument) -> str:
        prefix = existing.rstrip("\n")
        block = document.render(self._markers)
        if not prefix:
            return block
        return f"{prefix}\n\n{block}"

    def write(self, document: ComposedDocument, path: Path) -> WriteOutcome:
        """Write the document to ``path`` and report what happened.

        Args:
            document: Composed document from a pipeline run.
            path: Output file path.

        Returns:
            WriteOutcome describing the change.
        """
        outcome = self.plan(document, path)
        if outcome.action != WriteAction.UNCHANGED:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(outcome.content, encoding="utf-8")
        LOGGER.info(f"{path}: {outcome.action.value}")
        return outcome

    def regenerate(self, path: Path, section: Union[Section, str], body: str) -> bool:
        """Replace one section body in an existing file.

        Args:
            path: Output file containing stackdoc markers.
            section: Section to replace.
            body: New section body.

        Returns:
            True if the file content changed.

        Raises:
            SectionNotFoundError: If the file lacks the section markers.
            FileNotFoundError: If the file does not exist.
        """
        key = Section(section).value
        existing = path.read_text(encoding="utf-8")
        updated = self._markers.replace(existing, key, body)
        if updated == existing:
            LOGGER.info(f"{path}: section '{key}' unchanged")
            return False
        path.write_text(updated, encoding="utf-8")
        LOGGER.info(f"{path}: section '{key}' regenerated")
        return True
