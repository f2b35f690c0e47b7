from typing import Optional
from sqlmodel import Field, SQLModel

class KVEntry(SQLModel, table=True):
    __tablename__ = "kv_entry"

    key: str = Field(primary_key=True, max_length=200)
    value: str
    # unix seconds; None means the entry never expires
    expires_at: Optional[float] = Field(default=None, index=True)
    updated_at: float
