from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class MemberExternalMapping:
    """Link between a local member and their DLB member id."""

    local_member_id: int
    external_member_id: int
    active: bool = True
