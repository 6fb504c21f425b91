from typing import List, Literal, Optional

from pydantic import BaseModel, Field


class DecodedArgument(BaseModel):
    name: str
    type: str
    value: str


class DecodedCall(BaseModel):
    """Result of decoding one proposal action's calldata for display."""

    status: Literal["success", "error"]
    target: str
    value: int = 0
    selector: Optional[str] = None

    # status == "success"
    function_name: Optional[str] = None
    signature: Optional[str] = None
    args: List[DecodedArgument] = Field(default_factory=list)
    category: Optional[str] = None
    summary: Optional[str] = None

    # status == "error"
    error: Optional[str] = None
    hint: Optional[str] = None
