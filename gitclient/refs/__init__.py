# gitclient/refs/__init__.py

"""Reference names, refspecs and branch specification normalization."""

from .normalizer import extract_branch_name, normalize_branch_spec
from .refspec import RefSpec, default_fetch_refspec

__all__ = [
    "RefSpec",
    "default_fetch_refspec",
    "extract_branch_name",
    "normalize_branch_spec",
]
