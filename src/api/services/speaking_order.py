"""Speaking-order resolution over a fixed format and a partial roster.

The format definition lists every slot; the active order keeps only the
slots someone in the room can deliver. Reply slots have no participant of
their own and are delivered by the holder of their anchor role.

Two index spaces exist and must not be mixed:
- full index: position in ``DebateFormat.speaking_order`` (persisted on the room)
- active position: position in the derived active order (never persisted)
"""

from typing import AbstractSet, Iterable, List, Optional, Sequence

from src.api.models.debate_format import DebateFormat, SpeakerSlot
from src.api.models.room import Participant


def holder_role(slot: SpeakerSlot) -> str:
    """Participant role that delivers ``slot``."""
    return slot.anchor_role or slot.role


def present_roles(participants: Iterable[Participant]) -> frozenset:
    return frozenset(p.speaker_role for p in participants)


def derive_active_order(
    format_definition: DebateFormat,
    roles: AbstractSet[str],
) -> List[SpeakerSlot]:
    """Filter the format to slots whose holder role is present, keeping order."""
    return [slot for slot in format_definition.speaking_order if holder_role(slot) in roles]


def to_full_index(format_definition: DebateFormat, slot: SpeakerSlot) -> int:
    """Index of ``slot`` in the full speaking order, matched by role.

    Raises:
        ValueError: If the slot's role is not part of the format
    """
    for index, candidate in enumerate(format_definition.speaking_order):
        if candidate.role == slot.role:
            return index
    raise ValueError(f"Role {slot.role} is not part of format {format_definition.id}")


def to_active_position(
    active_order: Sequence[SpeakerSlot],
    full_index: Optional[int],
    format_definition: DebateFormat,
) -> Optional[int]:
    """Position of the slot at ``full_index`` within ``active_order``.

    Returns None when the index is missing, out of range, or points at a slot
    that is not active.
    """
    if full_index is None:
        return None
    slots = format_definition.speaking_order
    if full_index < 0 or full_index >= len(slots):
        return None
    role = slots[full_index].role
    for position, slot in enumerate(active_order):
        if slot.role == role:
            return position
    return None


def first_active_index(
    format_definition: DebateFormat,
    roles: AbstractSet[str],
) -> Optional[int]:
    """Full index of the first slot someone present can deliver."""
    active = derive_active_order(format_definition, roles)
    if not active:
        return None
    return to_full_index(format_definition, active[0])


def participant_for_slot(
    slot: Optional[SpeakerSlot],
    participants: Iterable[Participant],
) -> Optional[Participant]:
    if slot is None:
        return None
    role = holder_role(slot)
    for participant in participants:
        if participant.speaker_role == role:
            return participant
    return None
