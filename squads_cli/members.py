"""Parsing of `<public_key>,<permission>` member entries."""

import re
from typing import Iterable, List, Optional, Sequence

from .errors import InvalidAddress, InvalidPermissionMask, MalformedEntry
from .keys import decode_address
from .types import Member

MAX_PERMISSION_MASK = 255

PERMISSION_INITIATE = 1
PERMISSION_VOTE = 2
PERMISSION_EXECUTE = 4

_MASK_PATTERN = re.compile(r"\+?[0-9]+")


def parse_member(entry: str, index: Optional[int] = None) -> Member:
    parts = entry.split(",")
    if len(parts) != 2:
        raise MalformedEntry(entry, index, f"found {len(parts)} field(s)")

    key_text, mask_text = parts
    try:
        address = decode_address(key_text)
    except ValueError as e:
        raise InvalidAddress(entry, index, str(e)) from e

    mask_text = mask_text.strip()
    if not _MASK_PATTERN.fullmatch(mask_text):
        raise InvalidPermissionMask(entry, index)
    mask = int(mask_text)
    if mask > MAX_PERMISSION_MASK:
        raise InvalidPermissionMask(entry, index, f"{mask} is out of range")

    return Member(address=address, permissions=mask)


def parse_members(entries: Sequence[str]) -> List[Member]:
    """
    Parse member entries in order, stopping at the first invalid one.

    Duplicate addresses are not rejected here; the program validates the
    member set and threshold when the transaction executes.
    """
    return [parse_member(entry, index) for index, entry in enumerate(entries)]


def split_member_argument(values: Iterable[str]) -> List[str]:
    """Flatten `--members "a,1 b,3"` and repeated `--members` options into entries."""
    entries = []
    for value in values:
        entries.extend(value.split())
    return entries


def format_member(member: Member) -> str:
    return f"{member.address},{member.permissions}"


def describe_permissions(mask: int) -> List[str]:
    """Parse permission mask to list of permission names."""
    perms = []
    if mask & PERMISSION_INITIATE:
        perms.append("Proposer")
    if mask & PERMISSION_VOTE:
        perms.append("Voter")
    if mask & PERMISSION_EXECUTE:
        perms.append("Executor")
    if not perms:
        return ["None"] if mask == 0 else ["Unknown"]
    return perms
