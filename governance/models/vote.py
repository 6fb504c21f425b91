from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ExistingVote(BaseModel):
    """A vote the indexer has already recorded for a voter."""

    model_config = ConfigDict(frozen=True)

    support: str
    weight: int = Field(default=0, ge=0)
    reason: Optional[str] = None
