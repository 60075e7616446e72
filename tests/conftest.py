"""Shared pytest fixtures for all tests."""

import pytest
import shutil
import uuid
from pathlib import Path
from typing import Iterable, Optional

from src.api.models.motion import Motion
from src.api.models.room import DebateRoom, Participant
from src.api.models.debate_format import GOVERNMENT_ROLES
from src.api.services.debate_store import DebateStore


def _create_workspace_temp_dir(kind: str) -> Path:
    """Create a temporary directory under repository-local .pytest_work."""
    repo_root = Path(__file__).resolve().parents[1]
    root_dir = repo_root / ".pytest_work" / kind
    root_dir.mkdir(parents=True, exist_ok=True)
    temp_dir = root_dir / f"{kind}_{uuid.uuid4().hex[:8]}"
    temp_dir.mkdir(parents=True, exist_ok=True)
    return temp_dir


@pytest.fixture
def tmp_path():
    """Workspace-local replacement for pytest's tmp_path fixture."""
    temp_dir = _create_workspace_temp_dir("tmp_path")
    yield temp_dir
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def debate_store(tmp_path):
    """DebateStore writing to a throwaway state file."""
    return DebateStore(tmp_path / "debate_state.yaml")


def team_for(role: str) -> str:
    return "government" if role in GOVERNMENT_ROLES else "opposition"


async def seed_room(
    store: DebateStore,
    roles: Iterable[str],
    *,
    room_id: str = "room_1",
    creator_id: str = "creator",
    ready: bool = True,
    with_motion: bool = True,
    status: str = "waiting",
    current_slot_index: Optional[int] = None,
) -> DebateRoom:
    """Persist a room with one participant per role (user ids u_<role>)."""
    motion_id = None
    if with_motion:
        motion = Motion(id=f"motion_{room_id}", motion="This House would test", topic_area="politics")
        await store.add_motion(motion)
        motion_id = motion.id

    room = DebateRoom(
        id=room_id,
        room_code=room_id[-6:].upper().rjust(6, "X"),
        creator_id=creator_id,
        motion_id=motion_id,
        status=status,
        phase="debate" if status == "in_progress" else "setup",
        current_slot_index=current_slot_index,
    )
    await store.add_room(room)

    for role in roles:
        await store.add_participant(
            Participant(
                id=f"part_{room_id}_{role}",
                room_id=room_id,
                user_id=f"u_{role}",
                team=team_for(role),
                speaker_role=role,
                is_ready=ready,
            )
        )
    return room


@pytest.fixture
def seed():
    """Expose seed_room to tests as a fixture."""
    return seed_room
