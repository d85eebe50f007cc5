"""Training-vs-callout classification of DLB musters.

The heuristic is fuzzy on purpose and kept as is: a muster is training when
its call type mentions "training" or its ICAD number mentions "muster";
everything else defaults to a callout.
"""

from __future__ import annotations

from typing import Optional

from ..core.enums import EventType


def classify_event_type(call_type: Optional[str], icad_number: Optional[str]) -> EventType:
    call_type_l = (call_type or "").lower()
    icad_l = (icad_number or "").lower()

    if "training" in call_type_l or "muster" in icad_l:
        return EventType.TRAINING
    return EventType.CALLOUT
