"""stackdoc - stack detection and guideline composition.

Detects the frameworks, languages and libraries a project uses and
composes a single marker-delimited guideline document from them.
"""

from __future__ import annotations

__version__ = "0.4.0"

__all__ = ["__version__"]
