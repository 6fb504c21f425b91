from pydantic import BaseModel, ConfigDict


class TokenMetadata(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    address: str
    symbol: str | None = None
    name: str | None = None
    decimals: int | None = None
