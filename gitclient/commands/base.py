# gitclient/commands/base.py

"""
Base class of the fluent command objects.

A command is a mutable bag of options plus the backend callable that
performs it. Setters only record values and return the command so calls
can be chained; ``execute()`` validates the options, marks the command as
used and hands the options to the backend exactly once.
"""

from abc import ABC
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from ..core.exceptions import CommandAlreadyExecutedError, ConfigurationError


@dataclass
class CommandOptions:
    """Options every command carries."""

    timeout: int | None = None


O = TypeVar("O", bound=CommandOptions)


class GitCommand(ABC, Generic[O]):
    """A single-shot git operation."""

    options_class: type[CommandOptions] = CommandOptions
    description: str = "git"

    def __init__(self, executor: Callable[[O], Any]) -> None:
        self.options: O = self.options_class()
        self._executor = executor
        self._executed = False

    @property
    def executed(self) -> bool:
        return self._executed

    def timeout(self, timeout: int | None) -> "GitCommand[O]":
        """Seconds the operation may take; None uses the process-wide default."""
        self.options.timeout = timeout
        return self

    def validate(self) -> None:
        """Raise ``ConfigurationError`` for invalid option combinations."""
        timeout = self.options.timeout
        if timeout is not None and (isinstance(timeout, bool) or not isinstance(timeout, int) or timeout <= 0):
            raise ConfigurationError(f"Invalid timeout for {self.description}: {timeout!r}")

    def execute(self) -> Any:
        """
        Run the command.

        Raises:
            CommandAlreadyExecutedError: If the command already ran.
            ConfigurationError: If the options are invalid; nothing has run.
        """
        if self._executed:
            raise CommandAlreadyExecutedError(f"{self.description} command was already executed")
        self.validate()
        self._executed = True
        return self._executor(self.options)


def require(value: Any, message: str) -> None:
    """Raise ``ConfigurationError(message)`` when ``value`` is missing or blank."""
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ConfigurationError(message)


def validate_depth(depth: int | None, description: str) -> None:
    if depth is not None and (isinstance(depth, bool) or not isinstance(depth, int) or depth <= 0):
        raise ConfigurationError(f"Invalid depth for {description}: {depth!r}")
