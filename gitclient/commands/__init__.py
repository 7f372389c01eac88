# gitclient/commands/__init__.py

"""
Fluent command objects shared by both backends.
"""

from .base import CommandOptions, GitCommand
from .changelog import RAW_FORMAT, ChangelogCommand, ChangelogOptions
from .checkout import CheckoutCommand, CheckoutOptions
from .clean import CleanCommand, CleanOptions
from .clone import CloneCommand, CloneOptions
from .fetch import FetchCommand, FetchOptions
from .init import InitCommand, InitOptions
from .merge import FastForwardMode, MergeCommand, MergeOptions, MergeStrategy
from .push import PushCommand, PushOptions
from .rev_list import RevListCommand, RevListOptions
from .submodule import SubmoduleUpdateCommand, SubmoduleUpdateOptions
from .support import is_supported_by_embedded, unsupported_options

__all__ = [
    "RAW_FORMAT",
    "ChangelogCommand",
    "ChangelogOptions",
    "CheckoutCommand",
    "CheckoutOptions",
    "CleanCommand",
    "CleanOptions",
    "CloneCommand",
    "CloneOptions",
    "CommandOptions",
    "FastForwardMode",
    "FetchCommand",
    "FetchOptions",
    "GitCommand",
    "InitCommand",
    "InitOptions",
    "MergeCommand",
    "MergeOptions",
    "MergeStrategy",
    "PushCommand",
    "PushOptions",
    "RevListCommand",
    "RevListOptions",
    "SubmoduleUpdateCommand",
    "SubmoduleUpdateOptions",
    "is_supported_by_embedded",
    "unsupported_options",
]
