"""CLI commands package.

This module provides the base Command class and exports all command implementations.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from argparse import Namespace
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from stackdoc.config.models import StackdocConfig


class Command(ABC):
    """Base class for CLI commands.

    All CLI commands should inherit from this class and implement
    the execute method.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Command identifier.

        Returns:
            String name of the command.
        """

    @abstractmethod
    def execute(self, args: Namespace, config: "StackdocConfig | None" = None) -> int:
        """Execute the command.

        Args:
            args: Parsed command-line arguments.
            config: Optional stackdoc configuration.

        Returns:
            Exit code (0 for success, non-zero for error).
        """


# Import command implementations for convenience
# ruff: noqa: E402
from stackdoc.cli.commands.detect import DetectCommand
from stackdoc.cli.commands.init import InitCommand
from stackdoc.cli.commands.modules import ModulesCommand
from stackdoc.cli.commands.status import StatusCommand
from stackdoc.cli.commands.update import UpdateCommand
from stackdoc.cli.commands.validate import ValidateCommand

__all__ = [
    "Command",
    "DetectCommand",
    "InitCommand",
    "ModulesCommand",
    "StatusCommand",
    "UpdateCommand",
    "ValidateCommand",
]
