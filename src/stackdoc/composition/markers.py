"""Section markers for idempotent regeneration.

Each section body sits between a begin and an end marker line. The markers
are Markdown link-reference comments, so they do not render:

    [//]: # (stackdoc:begin:commands)
    ...
    [//]: # (stackdoc:end:commands)

Replacing a section only rewrites the bytes strictly between its own
markers; everything else in the document is left untouched.
"""

from __future__ import annotations

import re
from typing import Dict, Optional, Tuple

from stackdoc.core.errors import SectionNotFoundError


class MarkerManager:
    """Wraps, finds and replaces marker-delimited sections."""

    BEGIN_FMT = "[//]: # (stackdoc:begin:{key})"
    END_FMT = "[//]: # (stackdoc:end:{key})"
    BEGIN_PATTERN = re.compile(r"^\[//\]: # \(stackdoc:begin:([a-z0-9_-]+)\)$", re.MULTILINE)

    def begin(self, key: str) -> str:
        return self.BEGIN_FMT.format(key=key)

    def end(self, key: str) -> str:
        return self.END_FMT.format(key=key)

    def wrap(self, key: str, body: str) -> str:
        """Wrap a section body with its markers."""
        return f"{self.begin(key)}\n{body.strip()}\n{self.end(key)}"

    def span(self, document: str, key: str) -> Optional[Tuple[int, int]]:
        """Return (start, end) offsets of the body between a section's markers."""
        begin = self.begin(key)
        end = self.end(key)
        begin_index = document.find(begin)
        if begin_index == -1:
            return None
        body_start = begin_index + len(begin)
        end_index = document.find(end, body_start)
        if end_index == -1:
            return None
        return body_start, end_index

    def has_section(self, document: str, key: str) -> bool:
        return self.span(document, key) is not None

    def has_any_section(self, document: str) -> bool:
        return self.BEGIN_PATTERN.search(document) is not None

    def replace(self, document: str, key: str, body: str) -> str:
        """Replace one section body.

        Raises:
            SectionNotFoundError: If the document lacks the section markers.
        """
        span = self.span(document, key)
        if span is None:
            raise SectionNotFoundError(key)
        start, end = span
        return f"{document[:start]}\n{body.strip()}\n{document[end:]}"

    def extract(self, document: str) -> Dict[str, str]:
        """Return a mapping of section key to its current body."""
        sections: Dict[str, str] = {}
        for match in self.BEGIN_PATTERN.finditer(document):
            key = match.group(1)
            span = self.span(document[match.start():], key)
            if span is None:
                continue
            start, end = span
            sections[key] = document[match.start() + start:match.start() + end].strip()
        return sections
