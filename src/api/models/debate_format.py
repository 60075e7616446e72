"""Asian Parliamentary format definition and related vocabularies."""

from typing import Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


Team = Literal["government", "opposition"]

SpeakerRole = Literal[
    "prime_minister",
    "deputy_prime_minister",
    "government_whip",
    "leader_of_opposition",
    "deputy_leader_of_opposition",
    "opposition_whip",
]

SlotRole = Literal[
    "prime_minister",
    "leader_of_opposition",
    "deputy_prime_minister",
    "deputy_leader_of_opposition",
    "government_whip",
    "opposition_whip",
    "opposition_reply",
    "government_reply",
]

TopicArea = Literal[
    "politics", "ethics", "technology", "economics",
    "social", "environment", "education", "health",
]

Difficulty = Literal["novice", "intermediate", "advanced"]

DebateFormatId = Literal["asian_parliamentary"]


class SpeakerSlot(BaseModel):
    """One position in the fixed speaking sequence."""

    model_config = ConfigDict(frozen=True)

    role: SlotRole
    team: Team
    label: str
    time_budget_seconds: int = Field(..., gt=0)
    anchor_role: Optional[SpeakerRole] = Field(
        None,
        description="Role whose participant delivers this slot (reply speeches only)",
    )

    @property
    def is_reply(self) -> bool:
        return self.anchor_role is not None


class DebateFormat(BaseModel):
    """Static, ordered format definition."""

    model_config = ConfigDict(frozen=True)

    id: DebateFormatId
    name: str
    speaking_order: Tuple[SpeakerSlot, ...]


GOVERNMENT_ROLES: Tuple[str, ...] = ("prime_minister", "deputy_prime_minister", "government_whip")
OPPOSITION_ROLES: Tuple[str, ...] = ("leader_of_opposition", "deputy_leader_of_opposition", "opposition_whip")

TEAM_ROLES: Dict[str, Tuple[str, ...]] = {
    "government": GOVERNMENT_ROLES,
    "opposition": OPPOSITION_ROLES,
}

SUBSTANTIVE_SECONDS = 420
REPLY_SECONDS = 240

ASIAN_PARLIAMENTARY_FORMAT = DebateFormat(
    id="asian_parliamentary",
    name="Asian Parliamentary",
    speaking_order=(
        SpeakerSlot(role="prime_minister", team="government",
                    label="Prime Minister", time_budget_seconds=SUBSTANTIVE_SECONDS),
        SpeakerSlot(role="leader_of_opposition", team="opposition",
                    label="Leader of Opposition", time_budget_seconds=SUBSTANTIVE_SECONDS),
        SpeakerSlot(role="deputy_prime_minister", team="government",
                    label="Deputy Prime Minister", time_budget_seconds=SUBSTANTIVE_SECONDS),
        SpeakerSlot(role="deputy_leader_of_opposition", team="opposition",
                    label="Deputy Leader of Opposition", time_budget_seconds=SUBSTANTIVE_SECONDS),
        SpeakerSlot(role="government_whip", team="government",
                    label="Government Whip", time_budget_seconds=SUBSTANTIVE_SECONDS),
        SpeakerSlot(role="opposition_whip", team="opposition",
                    label="Opposition Whip", time_budget_seconds=SUBSTANTIVE_SECONDS),
        SpeakerSlot(role="opposition_reply", team="opposition", label="Opposition Reply",
                    time_budget_seconds=REPLY_SECONDS, anchor_role="leader_of_opposition"),
        SpeakerSlot(role="government_reply", team="government", label="Government Reply",
                    time_budget_seconds=REPLY_SECONDS, anchor_role="prime_minister"),
    ),
)

FORMATS: Dict[str, DebateFormat] = {
    ASIAN_PARLIAMENTARY_FORMAT.id: ASIAN_PARLIAMENTARY_FORMAT,
}


class LabeledOption(BaseModel):
    """Id/label pair exposed to clients for pickers."""

    id: str
    label: str


TOPIC_AREAS: List[LabeledOption] = [
    LabeledOption(id="politics", label="Politics & Governance"),
    LabeledOption(id="ethics", label="Ethics & Philosophy"),
    LabeledOption(id="technology", label="Science & Technology"),
    LabeledOption(id="economics", label="Economics & Business"),
    LabeledOption(id="social", label="Social Issues"),
    LabeledOption(id="environment", label="Environment"),
    LabeledOption(id="education", label="Education"),
    LabeledOption(id="health", label="Health & Medicine"),
]

DIFFICULTY_LEVELS: List[LabeledOption] = [
    LabeledOption(id="novice", label="Novice"),
    LabeledOption(id="intermediate", label="Intermediate"),
    LabeledOption(id="advanced", label="Advanced"),
]


def option_label(options: List[LabeledOption], option_id: str) -> str:
    for option in options:
        if option.id == option_id:
            return option.label
    return option_id


def get_format(format_id: str) -> DebateFormat:
    """Look up a format definition by id.

    Raises:
        ValueError: If the format is unknown
    """
    try:
        return FORMATS[format_id]
    except KeyError:
        raise ValueError(f"Unknown debate format: {format_id}")
