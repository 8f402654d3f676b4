"""
Resource Identity - stable identities linking template entries to remote ones.

A stable identity is derived from the stack name and the entry's local key,
and is written to the remote resource at creation time (``stackResourceId``).
Recomputing it on the next deploy is what lets an entry be updated instead
of created again.
"""

from typing import Any, Dict, Iterable, Optional

IDENTITY_SEPARATOR = "."


def compute_identity(namespace: str, local_name: str) -> str:
    """
    Compute the stable identity of a local entry.

    Args:
        namespace: The stack name, or a parent identity for nested entries.
        local_name: Key of the entry within its kind in the template.

    Returns:
        ``"<namespace>.<local_name>"``
    """
    return f"{namespace}{IDENTITY_SEPARATOR}{local_name}"


def matches_identity(remote: Any, identity: str) -> bool:
    """Default match rule: the remote entry carries the expected identity."""
    return isinstance(remote, dict) and remote.get("stackResourceId") == identity


def find_equivalent(
    namespace: str,
    local_name: Optional[str],
    remote_entries: Iterable[Dict[str, Any]],
) -> Optional[Dict[str, Any]]:
    """
    Resolve a template reference to the remote entry created for it.

    Used where one entry points at another by local name, e.g. an autotask
    naming the relayer it runs with.

    Args:
        namespace: The stack name.
        local_name: Local key of the referenced entry, or None.
        remote_entries: Current remote entries of the referenced kind.

    Returns:
        The matching remote entry, or None if there is no reference or
        the referenced entry has not been deployed.
    """
    if not local_name:
        return None
    identity = compute_identity(namespace, local_name)
    for entry in remote_entries:
        if matches_identity(entry, identity):
            return entry
    return None
