from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple

# A probe result is accepted only when its confidence is strictly above this.
ACCEPTANCE_THRESHOLD = 0.3


class ModuleKind(str, Enum):
    """The three module variants."""

    FRAMEWORK = "framework"
    LANGUAGE = "language"
    LIBRARY = "library"


class PriorityClass(str, Enum):
    """Coarse ordering class of a module, highest first in declaration order."""

    META_FRAMEWORK = "meta-framework"
    FRAMEWORK = "framework"
    CSS_FRAMEWORK = "css-framework"
    TOOL = "tool"
    SPECIALIZED_LANGUAGE = "specialized-language"
    BASE_LANGUAGE = "base-language"

    @property
    def rank(self) -> int:
        """Numeric rank; larger means higher priority."""
        return len(_PRIORITY_ORDER) - _PRIORITY_ORDER.index(self)


_PRIORITY_ORDER: Tuple[PriorityClass, ...] = tuple(PriorityClass)


class GuidelineCategory(str, Enum):
    """Category used for the framework-before-language ordering of guidelines."""

    FRAMEWORK = "framework"
    LANGUAGE = "language"


class Section(str, Enum):
    """Document sections in their fixed emission order."""

    STACK = "stack"
    COMMANDS = "commands"
    WORKFLOW = "workflow"
    GUIDELINES = "guidelines"


SECTION_ORDER: Tuple[Section, ...] = tuple(Section)


def _clamp(value: float) -> float:
    value = float(value)
    if math.isnan(value):
        return 0.0
    return max(0.0, min(1.0, value))


@dataclass(frozen=True)
class DetectionResult:
    """Outcome of one module's probe against a snapshot.

    The acceptance rule lives here, not in modules: a result is accepted
    iff its (clamped) confidence is strictly greater than
    ACCEPTANCE_THRESHOLD.
    """

    confidence: float = 0.0
    evidence: Tuple[str, ...] = ()
    excludes: FrozenSet[str] = frozenset()

    def __post_init__(self) -> None:
        object.__setattr__(self, "confidence", _clamp(self.confidence))
        object.__setattr__(self, "evidence", tuple(self.evidence))
        object.__setattr__(self, "excludes", frozenset(self.excludes))

    @property
    def accepted(self) -> bool:
        return self.confidence > ACCEPTANCE_THRESHOLD

    @classmethod
    def rejected(cls, reason: Optional[str] = None) -> "DetectionResult":
        """Build a zero-confidence result, optionally carrying a reason."""
        return cls(confidence=0.0, evidence=(reason,) if reason else ())

    def to_dict(self) -> Dict[str, object]:
        return {
            "confidence": round(self.confidence, 3),
            "accepted": self.accepted,
            "evidence": list(self.evidence),
            "excludes": sorted(self.excludes),
        }


@dataclass(frozen=True)
class ModuleMetadata:
    """Descriptive information about a module."""

    display_name: str
    description: str = ""
    supported_versions: Tuple[str, ...] = ()
    keywords: Tuple[str, ...] = ()
    homepage: str = ""


@dataclass(frozen=True)
class GuidelineReference:
    """Pointer to a unit of guideline content. Carries no content itself."""

    relative_path: str
    priority_class: PriorityClass
    category: GuidelineCategory
    version: Optional[str] = None


@dataclass(frozen=True)
class GuidelineFragment:
    """A guideline reference together with its loaded content."""

    module_id: str
    reference: GuidelineReference
    content: str

    @property
    def category(self) -> GuidelineCategory:
        return self.reference.category


COMMAND_BUCKETS: Tuple[str, ...] = ("dev", "build", "test", "lint", "install")


@dataclass
class StackCommands:
    """Suggested shell commands grouped into five buckets."""

    dev: List[str] = field(default_factory=list)
    build: List[str] = field(default_factory=list)
    test: List[str] = field(default_factory=list)
    lint: List[str] = field(default_factory=list)
    install: List[str] = field(default_factory=list)

    def extend(self, other: "StackCommands") -> None:
        """Append every bucket of ``other`` to this one, keeping duplicates."""
        for bucket in COMMAND_BUCKETS:
            getattr(self, bucket).extend(getattr(other, bucket))

    def is_empty(self) -> bool:
        return not any(getattr(self, bucket) for bucket in COMMAND_BUCKETS)

    @classmethod
    def merged(cls, parts: Iterable["StackCommands"]) -> "StackCommands":
        result = cls()
        for part in parts:
            result.extend(part)
        return result

    def to_dict(self) -> Dict[str, List[str]]:
        return {bucket: list(getattr(self, bucket)) for bucket in COMMAND_BUCKETS}
