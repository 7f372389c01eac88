# gitclient/process/askpass.py

"""
Credential helper scripts for command line git.

git (through ``GIT_ASKPASS``) and ssh (through ``SSH_ASKPASS``) run the
helper with a single prompt argument such as ``Username for 'https://host'``
or ``Password for ...`` and read the answer from its standard output.
The ``GIT_SSH`` wrapper runs ssh with the private key, the login name and
the options chosen by the active host key verification strategy.
"""

import shlex

from .escaping import escape_windows_chars_for_unquoted_string


def unix_askpass_script(username: str, password: str) -> str:
    """POSIX shell helper answering the Username and Password prompts."""
    return (
        "#!/bin/sh\n"
        'case "$1" in\n'
        f"Username*) printf '%s\\n' {shlex.quote(username)} ;;\n"
        f"Password*) printf '%s\\n' {shlex.quote(password)} ;;\n"
        "esac\n"
    )


def windows_askpass_script(username: str, password: str) -> str:
    """Batch file helper answering the Username and Password prompts."""
    user = escape_windows_chars_for_unquoted_string(username)
    secret = escape_windows_chars_for_unquoted_string(password)
    return (
        "@ECHO OFF\r\n"
        "SET ARG=%~1\r\n"
        f"IF %ARG:~0,8%==Username ECHO {user}\r\n"
        f"IF %ARG:~0,8%==Password ECHO {secret}\r\n"
    )


def unix_passphrase_script(passphrase: str) -> str:
    """POSIX shell ``SSH_ASKPASS`` helper printing the key passphrase."""
    return f"#!/bin/sh\nprintf '%s\\n' {shlex.quote(passphrase)}\n"


def windows_passphrase_script(passphrase: str) -> str:
    """Batch file ``SSH_ASKPASS`` helper printing the key passphrase."""
    return f"@ECHO OFF\r\nECHO {escape_windows_chars_for_unquoted_string(passphrase)}\r\n"


def unix_ssh_wrapper(key_file: str, user: str, ssh_options: list[str], ssh_executable: str = "ssh") -> str:
    """POSIX shell ``GIT_SSH`` wrapper."""
    options = " ".join(shlex.quote(option) for option in ssh_options)
    command = f"{shlex.quote(ssh_executable)} -i {shlex.quote(key_file)}"
    if user:
        command += f" -l {shlex.quote(user)}"
    if options:
        command += f" {options}"
    return (
        "#!/bin/sh\n"
        # ssh ignores SSH_ASKPASS without a DISPLAY
        'if [ -z "${DISPLAY}" ]; then\n'
        "  DISPLAY=:123.456\n"
        "  export DISPLAY\n"
        "fi\n"
        f'{command} "$@"\n'
    )


def windows_ssh_wrapper(key_file: str, user: str, ssh_options: list[str], ssh_executable: str = "ssh.exe") -> str:
    """Batch file ``GIT_SSH`` wrapper."""
    command = f'"{ssh_executable}" -i "{key_file}"'
    if user:
        command += f' -l "{user}"'
    if ssh_options:
        command += " " + " ".join(ssh_options)
    return f"@ECHO OFF\r\n{command} %*\r\n"
