"""
Report versioning and the correlation key shared with the DCF.

The DCF identifies amendments by the sender dataset id with the version
appended. Datasets are matched against local reports by comparing these
keys literally, hence any change to `merge_key` changes the protocol.
"""

from typing import Optional


FIRST_VERSION = "00"
VERSION_SEPARATOR = "."


def is_baseline(version: Optional[str]) -> bool:
    """Returns `True` if `version` denotes the first version."""
    return version == FIRST_VERSION


def merge_key(sender_id: str, version: str) -> str:
    """Returns the sender dataset id of the given `version`."""
    return f"{sender_id}{VERSION_SEPARATOR}{version}"


def correlation_key(
    sender_id: Optional[str], version: Optional[str]
) -> Optional[str]:
    """
    Returns the key under which the DCF lists the dataset of a report
    or `None` if `sender_id` is missing.

    Baseline versions (and reports without version) are listed with
    the plain `sender_id`.
    """
    if not sender_id:
        return None
    if not version or is_baseline(version):
        return sender_id
    return merge_key(sender_id, version)


def next_version(version: Optional[str]) -> str:
    """
    Returns the version token following `version`. Tokens are numeric
    and zero-padded to (at least) the width of `FIRST_VERSION`.
    """
    if not version:
        return f"{1:0{len(FIRST_VERSION)}d}"
    if not version.isdigit():
        raise ValueError(f"Bad version token '{version}' (not numeric).")
    return f"{int(version) + 1:0{max(len(version), len(FIRST_VERSION))}d}"


def version_order(version: Optional[str]) -> int:
    """
    Returns a sort key for `version`. Reports without version sort
    first, numeric tokens by their value.
    """
    if not version or not version.isdigit():
        return -1
    return int(version)
