"""Wire models for split sessions.

Field names are snake_case in Python and camelCase on the wire
(``payerId``, ``participantIds``, ``doneSettlements`` ...).
"""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")


class Participant(WireModel):
    id: str
    name: str = ""


class NewParticipant(WireModel):
    name: str = ""


class Payment(WireModel):
    id: str
    payer_id: str
    amount: str = ""
    description: str = ""
    participant_ids: List[str] = Field(default_factory=list)
    created_at: Optional[int] = None  # unix ms

    @field_validator("amount", mode="before")
    @classmethod
    def _amount_as_text(cls, value):
        # amounts are kept as typed; anything that is not text becomes text
        if value is None:
            return ""
        if isinstance(value, str):
            return value
        return str(value)


class SplitSession(WireModel):
    id: str
    title: Optional[str] = None
    created_at: Optional[int] = None  # unix ms
    participants: List[Participant] = Field(default_factory=list)
    payments: List[Payment] = Field(default_factory=list)
    done_settlements: List[str] = Field(default_factory=list)
    cleared: bool = False


class CreateSessionIn(WireModel):
    title: Optional[str] = None
    participants: List[NewParticipant] = Field(default_factory=list)


class SessionPatch(WireModel):
    """Partial update; only the fields actually sent are merged."""
    title: Optional[str] = None
    participants: Optional[List[Participant]] = None
    payments: Optional[List[Payment]] = None
    done_settlements: Optional[List[str]] = None
    cleared: Optional[bool] = None

    def changes(self) -> dict:
        return self.model_dump(by_alias=True, mode="json", exclude_unset=True)


class Balance(WireModel):
    id: str
    name: str
    net: float


class Settlement(WireModel):
    from_: str = Field(alias="from")
    to: str
    amount: float
    from_id: str
    to_id: str


class Summary(WireModel):
    balances: Optional[List[Balance]] = None
    settlements: Optional[List[Settlement]] = None
