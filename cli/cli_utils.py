from enum import Enum
from typing import Any, Optional

import click
import orjson
from pydantic import BaseModel

from governance.mappers.dao_mapper import DaoMapper
from governance.mappers.proposal_mapper import ProposalMapper
from governance.models.dao import DAO
from governance.models.proposal import Proposal

# orjson only serializes integers that fit in 64 bits
INT64_MIN, UINT64_MAX = -(2 ** 63), 2 ** 64 - 1


def read_json_file(path: str) -> Any:
    with open(path, "rb") as f:
        try:
            return orjson.loads(f.read())
        except orjson.JSONDecodeError as e:
            raise click.BadParameter(f"{path} is not valid JSON: {e}")


def load_proposal(path: str) -> Proposal:
    return ProposalMapper.dict_to_proposal(read_json_file(path))


def load_dao(path: Optional[str]) -> Optional[DAO]:
    if path is None:
        return None
    return DaoMapper.dict_to_dao(read_json_file(path))


def to_jsonable(value: Any) -> Any:
    """Token amounts beyond 64 bits are emitted as decimal strings, bytes as 0x hex."""
    if isinstance(value, BaseModel):
        return to_jsonable(value.model_dump())
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, bool) or value is None:
        return value
    if isinstance(value, int):
        return value if INT64_MIN <= value <= UINT64_MAX else str(value)
    if isinstance(value, bytes):
        return "0x" + value.hex()
    if isinstance(value, dict):
        return {str(k): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    return value


def echo_json(value: Any) -> None:
    click.echo(orjson.dumps(to_jsonable(value), option=orjson.OPT_INDENT_2).decode())
