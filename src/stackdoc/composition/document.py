"""Composed document model and section rendering."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence

from stackdoc.core.models import (
    SECTION_ORDER,
    GuidelineFragment,
    ModuleKind,
    Section,
    StackCommands,
)
from stackdoc.composition.markers import MarkerManager
from stackdoc.detection.snapshot import ProjectSnapshot
from stackdoc.modules.base import Module

DOCUMENT_HEADER = "# Stackdoc Configuration"
GENERIC_STACK = "Generic"
NO_COMMANDS = "No specific commands detected for this project."
NO_GUIDELINES = "No specific guidelines available for the detected stack."

COMMAND_HEADINGS = (
    ("dev", "Development"),
    ("build", "Build"),
    ("test", "Testing"),
    ("lint", "Linting"),
    ("install", "Package Management"),
)

WORKFLOW_BODY = """## Workflow

### Discovery
Before changing code, build a picture of the project:

- Read the guidelines below for every detected technology
- Locate existing patterns for the feature you are touching and follow them
- Check the commands above for how to run, test and lint the project

### Implementation
- Make small, focused changes and keep them consistent with the detected stack
- Run the relevant test and lint commands after each change
- Regenerate this file with `stackdoc update` when dependencies change"""


@dataclass
class ComposedDocument:
    """The four marker-delimited sections of the generated document."""

    sections: Dict[Section, str] = field(default_factory=dict)
    header: str = DOCUMENT_HEADER

    def section(self, section: Section) -> str:
        return self.sections.get(section, "")

    def render(self, markers: Optional[MarkerManager] = None) -> str:
        """Render the header and every section in fixed order."""
        markers = markers or MarkerManager()
        parts = [self.header]
        for section in SECTION_ORDER:
            parts.append(markers.wrap(section.value, self.section(section)))
        return "\n\n".join(parts) + "\n"


def _with_version(module: Module, versions: Mapping[str, Optional[str]]) -> str:
    version = versions.get(module.id)
    return f"{module.display_name} {version}" if version else module.display_name


def render_stack(
    modules: Sequence[Module],
    versions: Mapping[str, Optional[str]],
    snapshot: ProjectSnapshot,
) -> str:
    """Render the Stack section body.

    Args:
        modules: Accepted modules in catalog order.
        versions: Resolved version per module id.
        snapshot: Project snapshot for runtime and package managers.
    """
    frameworks = [m for m in modules if m.kind == ModuleKind.FRAMEWORK]
    libraries = [m for m in modules if m.kind == ModuleKind.LIBRARY]
    languages = [m for m in modules if m.kind == ModuleKind.LANGUAGE]

    headline = ", ".join(m.display_name for m in frameworks + libraries) or GENERIC_STACK
    lines = [f"## Detected Stack: {headline}", "", "### Project Information"]
    lines.append(f"- **Runtime**: {snapshot.runtime}")
    if languages:
        lines.append(f"- **Languages**: {', '.join(_with_version(m, versions) for m in languages)}")
    if frameworks:
        lines.append(f"- **Frameworks**: {', '.join(_with_version(m, versions) for m in frameworks)}")
    if libraries:
        lines.append(f"- **Libraries**: {', '.join(_with_version(m, versions) for m in libraries)}")
    managers = snapshot.package_managers
    if managers:
        lines.append(f"- **Package Managers**: {', '.join(managers)}")
    if snapshot.config_files:
        lines.append(f"- **Config Files**: {', '.join(sorted(snapshot.config_files))}")
    return "\n".join(lines)


def render_commands(commands: StackCommands) -> str:
    """Render the Commands section body. Duplicates are shown once."""
    lines = ["## Commands"]
    if commands.is_empty():
        lines.extend(["", NO_COMMANDS])
        return "\n".join(lines)

    for bucket, heading in COMMAND_HEADINGS:
        entries: List[str] = []
        for command in getattr(commands, bucket):
            if command not in entries:
                entries.append(command)
        if not entries:
            continue
        lines.extend(["", f"### {heading}"])
        lines.extend(f"- `{command}`" for command in entries)
    return "\n".join(lines)


def render_workflow() -> str:
    return WORKFLOW_BODY


def render_guidelines(fragments: Sequence[GuidelineFragment]) -> str:
    if not fragments:
        return f"## Guidelines\n\n{NO_GUIDELINES}"
    return "\n\n".join(fragment.content.strip() for fragment in fragments)


def build_document(
    modules: Sequence[Module],
    versions: Mapping[str, Optional[str]],
    snapshot: ProjectSnapshot,
    commands: StackCommands,
    fragments: Sequence[GuidelineFragment],
) -> ComposedDocument:
    return ComposedDocument(
        sections={
            Section.STACK: render_stack(modules, versions, snapshot),
            Section.COMMANDS: render_commands(commands),
            Section.WORKFLOW: render_workflow(),
            Section.GUIDELINES: render_guidelines(fragments),
        }
    )
