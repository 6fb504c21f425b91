from unittest.mock import AsyncMock, MagicMock, patch

import aiohttp
import orjson
import pytest

from governance.clients.pinata_client import PinataClient
from governance.models.metadata import DaoInfo, ProposalMetadata, VoteReasonMetadata
from tests.unit.factories import GOVERNOR, RECIPIENT_A, FakeResponse
from utils.exceptions import PinningError


def make_client(response: FakeResponse) -> PinataClient:
    client = PinataClient(jwt="secret-jwt", api_url="https://api.pinata.test/", gateway="gw.pinata.test")
    client.session = MagicMock()
    client.session.post = MagicMock(return_value=response)
    return client


@pytest.mark.asyncio
async def test_pin_json_returns_cid():
    client = make_client(FakeResponse(payload=b'{"IpfsHash": "bafycid", "PinSize": 10}'))

    cid = await client.pin_json({"hello": "world"}, name="doc", keyvalues={"type": "test"})

    assert cid == "bafycid"
    url = client.session.post.call_args.args[0]
    kwargs = client.session.post.call_args.kwargs
    assert url == "https://api.pinata.test/pinning/pinJSONToIPFS"
    assert kwargs["headers"]["Authorization"] == "Bearer secret-jwt"
    assert orjson.loads(kwargs["data"]) == {
        "pinataContent": {"hello": "world"},
        "pinataMetadata": {"name": "doc", "keyvalues": {"type": "test"}},
    }


@pytest.mark.asyncio
async def test_pin_json_without_jwt():
    client = PinataClient(jwt="")

    assert client.is_configured is False
    with pytest.raises(PinningError, match="PINATA_JWT"):
        await client.pin_json({}, name="doc")


@pytest.mark.asyncio
async def test_pin_json_rejected_upload():
    client = make_client(FakeResponse(status=401, payload=b"invalid key"))

    with pytest.raises(PinningError, match="401"):
        await client.pin_json({}, name="doc")


@pytest.mark.asyncio
async def test_pin_json_missing_hash():
    client = make_client(FakeResponse(payload=b"{}"))

    with pytest.raises(PinningError, match="IpfsHash"):
        await client.pin_json({}, name="doc")


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [b"<html>bad gateway</html>", b"[]"])
async def test_pin_json_rejects_non_object_responses(payload):
    client = make_client(FakeResponse(payload=payload))

    with pytest.raises(PinningError):
        await client.pin_json({}, name="doc")


@pytest.mark.asyncio
async def test_pin_json_outside_context_manager():
    client = PinataClient(jwt="secret-jwt")

    with pytest.raises(PinningError, match="session is not open"):
        await client.pin_json({}, name="doc")


@pytest.mark.asyncio
async def test_pin_json_network_failure():
    client = PinataClient(jwt="secret-jwt")
    client.session = MagicMock()

    with patch.object(client, "_post_json", AsyncMock(side_effect=aiohttp.ClientConnectionError("reset"))):
        with pytest.raises(PinningError, match="reset"):
            await client.pin_json({}, name="doc")


@pytest.mark.asyncio
async def test_upload_vote_reason_uses_camel_case_record():
    client = PinataClient(jwt="secret-jwt")
    metadata = VoteReasonMetadata(
        voter=RECIPIENT_A,
        proposal_id=f"1_{GOVERNOR}_7",
        dao_id=f"1_{GOVERNOR}",
        support="FOR",
        reason="Because",
        created_at="2025-01-01T00:00:00.000Z",
    )

    with patch.object(client, "pin_json", AsyncMock(return_value="bafyvote")) as pin_json:
        assert await client.upload_vote_reason(metadata) == "bafyvote"

    content = pin_json.await_args.args[0]
    assert content["proposalId"] == f"1_{GOVERNOR}_7"
    assert content["createdAt"] == "2025-01-01T00:00:00.000Z"
    assert pin_json.await_args.kwargs["name"] == f"vote-1_{GOVERNOR}_7-{RECIPIENT_A[:8]}"
    assert pin_json.await_args.kwargs["keyvalues"]["type"] == "vote-reason"


@pytest.mark.asyncio
async def test_upload_proposal_metadata_truncates_title_keyvalue():
    client = PinataClient(jwt="secret-jwt")
    metadata = ProposalMetadata(
        title="T" * 150,
        description="body",
        created_at="2025-01-01T00:00:00.000Z",
        created_by=RECIPIENT_A,
        dao=DaoInfo(id="1_dao", name="Grants DAO", governor=GOVERNOR, chain_id=1),
    )

    with patch.object(client, "pin_json", AsyncMock(return_value="bafyprop")) as pin_json:
        await client.upload_proposal_metadata(metadata)

    keyvalues = pin_json.await_args.kwargs["keyvalues"]
    assert keyvalues["daoId"] == "1_dao"
    assert keyvalues["title"] == "T" * 100
    assert pin_json.await_args.kwargs["name"].startswith("proposal-1_dao-")
    assert pin_json.await_args.args[0]["dao"]["chainId"] == 1


def test_get_ipfs_url():
    client = PinataClient(jwt="x", gateway="gw.pinata.test")

    assert client.get_ipfs_url("bafy") == "https://gw.pinata.test/ipfs/bafy"


@pytest.mark.asyncio
async def test_fetch_json_reads_through_gateway():
    client = PinataClient(jwt="x", gateway="gw.pinata.test")
    client.session = MagicMock()
    client.session.get = MagicMock(return_value=FakeResponse(payload=b'{"reason": "Because"}'))

    assert await client.fetch_json("bafy") == {"reason": "Because"}
    client.session.get.assert_called_once_with("https://gw.pinata.test/ipfs/bafy")


@pytest.mark.asyncio
async def test_fetch_json_missing_document():
    client = PinataClient(jwt="x", gateway="gw.pinata.test")
    client.session = MagicMock()
    client.session.get = MagicMock(return_value=FakeResponse(status=404, payload=b"", reason="Not Found"))

    with pytest.raises(PinningError, match="404"):
        await client.fetch_json("bafy")


@pytest.mark.asyncio
async def test_fetch_json_network_failure():
    client = PinataClient(jwt="x")
    client.session = MagicMock()

    with patch.object(client, "_get_json", AsyncMock(side_effect=aiohttp.ClientConnectionError("reset"))):
        with pytest.raises(PinningError, match="reset"):
            await client.fetch_json("bafy")


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [b"<html>gateway error</html>", b'"just a string"'])
async def test_fetch_json_rejects_non_object_documents(payload):
    client = PinataClient(jwt="x", gateway="gw.pinata.test")
    client.session = MagicMock()
    client.session.get = MagicMock(return_value=FakeResponse(payload=payload))

    with pytest.raises(PinningError, match="bafy"):
        await client.fetch_json("bafy")


@pytest.mark.asyncio
async def test_fetch_json_outside_context_manager():
    with pytest.raises(PinningError, match="session is not open"):
        await PinataClient(jwt="x").fetch_json("bafy")
