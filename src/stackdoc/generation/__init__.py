"""Writing generated documents into the workspace."""

from stackdoc.generation.workspace import WorkspaceWriter, WriteAction, WriteOutcome

__all__ = ["WorkspaceWriter", "WriteAction", "WriteOutcome"]
