from typing import Any, Dict, List

from pydantic import ValidationError

from governance.enums.proposal_state import ProposalState
from governance.mappers._parsing import describe_validation_error, first_present, parse_uint
from governance.models.proposal import Proposal
from utils.exceptions import InvalidRecordError
from utils.logger_utils import get_logger

logger = get_logger("Proposal Mapper")

RECORD_TYPE = "proposal"


class ProposalMapper(object):
    """
    Boundary between the indexer's loosely typed proposal records and the strict Proposal model.
    Anything malformed is rejected here so the state machine never sees missing or NaN-like values.
    """

    @staticmethod
    def dict_to_proposal(json_dict: Dict[str, Any]) -> Proposal:
        if not isinstance(json_dict, dict):
            raise InvalidRecordError(RECORD_TYPE, f"expected an object, got {type(json_dict).__name__}")

        chain_id = parse_uint(RECORD_TYPE, "chainId", json_dict.get("chainId"))
        governor = first_present(json_dict, "governor", "governorAddress")
        if governor is None and json_dict.get("daoId"):
            # daoId is "chainId_governor"
            governor = str(json_dict["daoId"]).split("_")[-1]

        try:
            return Proposal(
                chain_id=chain_id,
                governor=governor,
                proposal_id=parse_uint(RECORD_TYPE, "proposalId", json_dict.get("proposalId")),
                dao_id=json_dict.get("daoId"),
                proposer=json_dict.get("proposer"),
                description=json_dict.get("description") or "",
                targets=ProposalMapper._list_field(json_dict, "targets"),
                values=[
                    parse_uint(RECORD_TYPE, f"values[{i}]", v)
                    for i, v in enumerate(ProposalMapper._list_field(json_dict, "values"))
                ],
                calldatas=ProposalMapper._list_field(json_dict, "calldatas"),
                for_votes=parse_uint(RECORD_TYPE, "forVotes", first_present(json_dict, "forVotes", "votesFor"), False) or 0,
                against_votes=parse_uint(
                    RECORD_TYPE, "againstVotes", first_present(json_dict, "againstVotes", "votesAgainst"), False
                ) or 0,
                abstain_votes=parse_uint(
                    RECORD_TYPE, "abstainVotes", first_present(json_dict, "abstainVotes", "votesAbstain"), False
                ) or 0,
                vote_start=parse_uint(RECORD_TYPE, "voteStart", json_dict.get("voteStart")),
                vote_end=parse_uint(RECORD_TYPE, "voteEnd", json_dict.get("voteEnd")),
                eta=parse_uint(RECORD_TYPE, "eta", json_dict.get("eta"), required=False) or None,
                created_at=parse_uint(RECORD_TYPE, "createdAt", json_dict.get("createdAt"), required=False),
                state=ProposalMapper._parse_state(json_dict.get("state")),
            )
        except ValidationError as e:
            logger.debug(f"Rejected proposal record {json_dict.get('id')}: {e}")
            raise InvalidRecordError(RECORD_TYPE, describe_validation_error(e)) from e

    @staticmethod
    def _list_field(json_dict: Dict[str, Any], field: str) -> List[Any]:
        value = json_dict.get(field)
        if value is None:
            return []
        if not isinstance(value, list):
            raise InvalidRecordError(RECORD_TYPE, f"'{field}' must be a list")
        return value

    @staticmethod
    def _parse_state(value: Any) -> ProposalState:
        if value is None or value == "":
            return ProposalState.PENDING
        try:
            return ProposalState(str(value).strip().upper())
        except ValueError:
            raise InvalidRecordError(RECORD_TYPE, f"unknown state {value!r}")
