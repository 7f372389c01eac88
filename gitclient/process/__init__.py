# gitclient/process/__init__.py

"""
Process execution: launching git, escaping arguments, scoped temp files.
"""

from .escaping import escape_windows_chars_for_unquoted_string
from .executor import GitCommandsExecutor
from .launcher import ProcessLauncher, ProcessRequest, ProcessResult, describe_command
from .tempfiles import ScopedTempFiles, is_safe_temp_path, workspace_temp_directory
from .versions import GitVersion

__all__ = [
    "GitCommandsExecutor",
    "GitVersion",
    "ProcessLauncher",
    "ProcessRequest",
    "ProcessResult",
    "ScopedTempFiles",
    "describe_command",
    "escape_windows_chars_for_unquoted_string",
    "is_safe_temp_path",
    "workspace_temp_directory",
]
