"""Guideline composition and command merging.

Both operate on accepted modules in catalog order and are pure functions
of their inputs: the same accepted set, versions and content store always
give the same output.
"""

from __future__ import annotations

from typing import List, Mapping, Optional, Sequence, Set, Tuple

from stackdoc.core.errors import GuidelineNotFoundError
from stackdoc.core.logging import get_logger
from stackdoc.core.models import (
    GuidelineCategory,
    GuidelineFragment,
    GuidelineReference,
    StackCommands,
)
from stackdoc.composition.content import GuidelineSource
from stackdoc.pipeline.diagnostics import Diagnostics

LOGGER = get_logger(__name__)

PHASE_GUIDELINES = "guidelines"

# Category emission order in the Guidelines section
CATEGORY_ORDER: Tuple[GuidelineCategory, ...] = (
    GuidelineCategory.FRAMEWORK,
    GuidelineCategory.LANGUAGE,
)

ModuleReferences = Tuple[str, Sequence[GuidelineReference]]


class GuidelineComposer:
    """Loads and orders guideline fragments for accepted modules."""

    def __init__(self, source: GuidelineSource) -> None:
        self._source = source

    def compose(
        self,
        module_refs: Sequence[ModuleReferences],
        diagnostics: Optional[Diagnostics] = None,
    ) -> List[GuidelineFragment]:
        """Load references and return fragments in document order.

        Args:
            module_refs: (module id, references) pairs in catalog order,
                each module's references in the order it returned them.
            diagnostics: Collector for missing guidelines.

        Returns:
            Framework-category fragments, then language-category fragments.
            Within a category, module blocks keep catalog order and are
            never interleaved. A path already emitted is skipped.
        """
        diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        loaded: List[GuidelineFragment] = []
        for module_id, refs in module_refs:
            for ref in refs:
                try:
                    content = self._source.load(ref.relative_path)
                except GuidelineNotFoundError as e:
                    diagnostics.warning(PHASE_GUIDELINES, f"skipping guideline: {e}", module_id)
                    continue
                loaded.append(GuidelineFragment(module_id=module_id, reference=ref, content=content))
        return order_fragments(loaded)


def order_fragments(fragments: Sequence[GuidelineFragment]) -> List[GuidelineFragment]:
    """Stable category ordering with duplicate paths removed."""
    ordered: List[GuidelineFragment] = []
    seen: Set[str] = set()
    for category in CATEGORY_ORDER:
        for fragment in fragments:
            path = fragment.reference.relative_path
            if fragment.category != category or path in seen:
                continue
            seen.add(path)
            ordered.append(fragment)
    return ordered


def merge_commands(
    module_commands: Sequence[Tuple[str, StackCommands]],
) -> StackCommands:
    """Concatenate command buckets in catalog order, keeping duplicates."""
    return StackCommands.merged(commands for _, commands in module_commands)


def ordered_refs(
    module_ids: Sequence[str],
    refs_by_module: Mapping[str, Sequence[GuidelineReference]],
) -> List[ModuleReferences]:
    return [(module_id, refs_by_module[module_id]) for module_id in module_ids if module_id in refs_by_module]
