# gitclient/commands/support.py

"""
Options the embedded backend cannot honour.

``unsupported_options`` inspects the options of one command and names the
ones the in-process backend would have to ignore. The embedded client
refuses such commands instead of silently dropping an option.
"""

from .base import CommandOptions
from .checkout import CheckoutOptions
from .clone import CloneOptions
from .fetch import FetchOptions
from .merge import FastForwardMode, MergeOptions, MergeStrategy
from .rev_list import RevListOptions
from .submodule import SubmoduleUpdateOptions


def unsupported_options(options: CommandOptions) -> list[str]:
    """Names of the options set on ``options`` that the embedded backend lacks."""
    unsupported: list[str] = []

    if isinstance(options, CheckoutOptions) and options.sparse_checkout_paths:
        unsupported.append("sparse checkout paths")

    if isinstance(options, (CloneOptions, FetchOptions)) and (options.shallow or options.depth is not None):
        unsupported.append("shallow")

    if isinstance(options, CloneOptions) and (options.reference or options.shared):
        unsupported.append("reference repository")

    if isinstance(options, SubmoduleUpdateOptions):
        if options.shallow or options.depth is not None:
            unsupported.append("shallow")
        if options.threads > 1:
            unsupported.append("threads")
        if options.remote_tracking:
            unsupported.append("remote tracking")
        if options.ref:
            unsupported.append("reference repository")
        if options.parent_credentials:
            unsupported.append("parent credentials")
        if options.submodule_branches:
            unsupported.append("submodule branches")

    if isinstance(options, RevListOptions) and options.first_parent:
        unsupported.append("first parent")

    if isinstance(options, MergeOptions):
        if options.strategy is not MergeStrategy.DEFAULT:
            unsupported.append(f"merge strategy {options.strategy.value}")
        if options.fast_forward_mode is FastForwardMode.FF_ONLY:
            unsupported.append("fast forward mode ff-only")
        if options.squash:
            unsupported.append("squash")

    return unsupported


def is_supported_by_embedded(options: CommandOptions) -> bool:
    return not unsupported_options(options)
