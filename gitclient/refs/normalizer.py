# gitclient/refs/normalizer.py

"""
Branch specification normalization.

A user may name a branch as ``master``, ``origin/master``,
``remotes/origin/master`` or a fully qualified ``refs/...`` name. The
normalizer turns that text into the ordered candidate references a
backend tries, most specific first.
"""

from collections.abc import Iterable

TAGS_PREFIX = "refs/tags/"
HEADS_PREFIX = "refs/heads/"
REMOTES_PREFIX = "refs/remotes/"
PEELED_SUFFIX = "^{}"


def _strip_remote(spec: str, remote_names: Iterable[str]) -> str | None:
    """Return ``spec`` without its leading remote name, or None if none matches."""
    candidate = spec[len("remotes/") :] if spec.startswith("remotes/") else spec
    best = None
    for remote in remote_names:
        if not remote:
            continue
        # Longest match wins so "rem4/xy" beats "rem4".
        if candidate.startswith(remote + "/") and (best is None or len(remote) > len(best)):
            best = remote
    if best is None:
        return None
    return candidate[len(best) + 1 :]


def normalize_branch_spec(branch_spec: str, remote_names: Iterable[str] = ()) -> list[str]:
    """
    Expand a branch specification into candidate fully qualified references.

    Args:
        branch_spec: Branch, tag or wildcard specification as typed by a user.
        remote_names: Names of the remotes configured in the repository.

    Returns:
        Ordered list of candidates without duplicates. The unmodified
        ``branch_spec`` is always part of the result.
    """
    remote_names = list(remote_names)
    candidates: list[str] = []

    if branch_spec.startswith(TAGS_PREFIX):
        candidates.append(branch_spec + PEELED_SUFFIX)
        candidates.append(branch_spec)
    elif branch_spec.startswith(HEADS_PREFIX) or branch_spec.startswith(REMOTES_PREFIX):
        candidates.append(branch_spec)
    else:
        local = _strip_remote(branch_spec, remote_names)
        if local:
            candidates.append(HEADS_PREFIX + local)

    candidates.append(HEADS_PREFIX + branch_spec)
    candidates.append("refs/heads" + branch_spec)
    candidates.append(branch_spec)

    return list(dict.fromkeys(candidates))


def extract_branch_name(branch_spec: str) -> str:
    """
    Turn a branch specification into the name queried with ``ls-remote``.

    ``origin/master`` and ``remotes/origin/master`` become
    ``refs/heads/master``; ``refs/remotes/origin/master`` becomes
    ``refs/heads/master``; fully qualified heads and tags and wildcard
    patterns are returned unchanged; anything else is prefixed with
    ``refs/heads/``.
    """
    if branch_spec.startswith(HEADS_PREFIX) or branch_spec.startswith(TAGS_PREFIX):
        return branch_spec
    if "*" in branch_spec:
        return branch_spec
    if branch_spec.startswith(REMOTES_PREFIX):
        rest = branch_spec[len(REMOTES_PREFIX) :]
        _, slash, name = rest.partition("/")
        return HEADS_PREFIX + (name if slash else rest)
    if branch_spec.startswith("remotes/"):
        rest = branch_spec[len("remotes/") :]
        _, slash, name = rest.partition("/")
        return HEADS_PREFIX + (name if slash else rest)
    if branch_spec.startswith("refs/"):
        return branch_spec
    _, slash, name = branch_spec.partition("/")
    if slash and name:
        return HEADS_PREFIX + name
    return HEADS_PREFIX + branch_spec
