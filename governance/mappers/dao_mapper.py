from typing import Any, Dict

from pydantic import ValidationError

from governance.mappers._parsing import describe_validation_error, parse_uint
from governance.models.dao import DAO
from utils.exceptions import InvalidRecordError

RECORD_TYPE = "dao"


class DaoMapper(object):
    @staticmethod
    def dict_to_dao(json_dict: Dict[str, Any]) -> DAO:
        if not isinstance(json_dict, dict):
            raise InvalidRecordError(RECORD_TYPE, f"expected an object, got {type(json_dict).__name__}")

        chain_id = parse_uint(RECORD_TYPE, "chainId", json_dict.get("chainId"))
        governor = json_dict.get("governor")
        dao_id = json_dict.get("id") or f"{chain_id}_{str(governor).lower()}"

        try:
            return DAO(
                id=dao_id,
                chain_id=chain_id,
                name=json_dict.get("name"),
                governor=governor,
                token=json_dict.get("token"),
                timelock=json_dict.get("timelock"),
                manager=json_dict.get("manager"),
                total_supply=parse_uint(RECORD_TYPE, "totalSupply", json_dict.get("totalSupply"), False) or 0,
                quorum_numerator=parse_uint(RECORD_TYPE, "quorumNumerator", json_dict.get("quorumNumerator"), False),
                voting_delay=parse_uint(RECORD_TYPE, "votingDelay", json_dict.get("votingDelay"), False),
                voting_period=parse_uint(RECORD_TYPE, "votingPeriod", json_dict.get("votingPeriod"), False),
                proposal_threshold=parse_uint(
                    RECORD_TYPE, "proposalThreshold", json_dict.get("proposalThreshold"), False
                ),
                token_symbol=json_dict.get("tokenSymbol"),
                token_decimals=parse_uint(RECORD_TYPE, "tokenDecimals", json_dict.get("tokenDecimals"), False),
            )
        except ValidationError as e:
            raise InvalidRecordError(RECORD_TYPE, describe_validation_error(e)) from e
