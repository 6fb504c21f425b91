import asyncio
import time
from typing import Any, Dict, Optional

import aiohttp
import orjson

from config.settings import settings
from governance.models.metadata import ProposalMetadata, VoteReasonMetadata
from utils.async_utils import async_retry
from utils.exceptions import PinningError
from utils.logger_utils import get_logger

logger = get_logger("Pinata Client")


class PinataClient(object):
    """
    Pins JSON documents to IPFS through Pinata and reads them back through the gateway.
    Use as an async context manager; the HTTP session lives for the duration of the block.
    """

    def __init__(
        self,
        jwt: Optional[str] = None,
        api_url: Optional[str] = None,
        gateway: Optional[str] = None,
        timeout: float = 30,
    ):
        self.jwt = jwt if jwt is not None else settings.pinata.jwt
        self.api_url = (api_url or settings.pinata.api_url).rstrip("/")
        self.gateway = gateway or settings.pinata.gateway
        self.timeout = timeout
        self.session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self):
        self.session = aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(total=self.timeout),
            headers={"User-Agent": f"{settings.app.name}/1.0"},
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self.session:
            await self.session.close()

    @property
    def is_configured(self) -> bool:
        return bool(self.jwt)

    async def pin_json(self, content: Dict[str, Any], name: str, keyvalues: Optional[Dict[str, str]] = None) -> str:
        """
        Pins `content` and returns its CID.

        Raises:
            PinningError: No JWT configured, no open session, Pinata refused the upload
                or answered with something other than JSON, or the network failed.
        """
        if not self.jwt:
            raise PinningError("PINATA_JWT is not set")
        self._require_session()

        body = {
            "pinataContent": content,
            "pinataMetadata": {"name": name, "keyvalues": keyvalues or {}},
        }
        try:
            result = await self._post_json("pinning/pinJSONToIPFS", body)
        except (aiohttp.ClientError, asyncio.TimeoutError, orjson.JSONDecodeError) as e:
            raise PinningError(f"Failed to upload to IPFS: {e}") from e

        cid = result.get("IpfsHash") if isinstance(result, dict) else None
        if not cid:
            raise PinningError(f"Pinata response has no IpfsHash: {result}")
        logger.info(f"Pinned {name} as {cid}")
        return cid

    async def upload_vote_reason(self, metadata: VoteReasonMetadata) -> str:
        return await self.pin_json(
            metadata.model_dump(by_alias=True),
            name=f"vote-{metadata.proposal_id}-{metadata.voter[:8]}",
            keyvalues={
                "type": "vote-reason",
                "proposalId": metadata.proposal_id,
                "voter": metadata.voter,
                "support": metadata.support,
            },
        )

    async def upload_proposal_metadata(self, metadata: ProposalMetadata) -> str:
        return await self.pin_json(
            metadata.model_dump(by_alias=True),
            name=f"proposal-{metadata.dao.id}-{int(time.time() * 1000)}",
            keyvalues={
                "daoId": metadata.dao.id,
                "daoName": metadata.dao.name,
                "title": metadata.title[:100],
            },
        )

    def get_ipfs_url(self, cid: str) -> str:
        return f"https://{self.gateway}/ipfs/{cid}"

    async def fetch_json(self, cid: str) -> Dict[str, Any]:
        """
        Reads a pinned document back through the gateway.

        Raises:
            PinningError: The gateway did not return a JSON object.
        """
        self._require_session()
        try:
            document = await self._get_json(self.get_ipfs_url(cid))
        except (aiohttp.ClientError, asyncio.TimeoutError, orjson.JSONDecodeError) as e:
            raise PinningError(f"Failed to fetch {cid} from IPFS: {e}") from e
        if not isinstance(document, dict):
            raise PinningError(f"IPFS document {cid} is not a JSON object")
        return document

    def _require_session(self):
        if self.session is None:
            raise PinningError("PinataClient session is not open; use it as an async context manager")

    @async_retry(max_retries=2, initial_delay=0.5)
    async def _get_json(self, url: str) -> Dict[str, Any]:
        async with self.session.get(url) as response:
            if response.status != 200:
                raise PinningError(f"Failed to fetch {url}: {response.status} {response.reason}")
            return orjson.loads(await response.read())

    @async_retry(max_retries=2, initial_delay=0.5)
    async def _post_json(self, endpoint: str, body: Dict[str, Any]) -> Dict[str, Any]:
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.jwt}",
        }
        async with self.session.post(f"{self.api_url}/{endpoint}", data=orjson.dumps(body), headers=headers) as response:
            if response.status >= 300:
                error = await response.text()
                raise PinningError(f"Failed to upload to IPFS ({response.status}): {error}")
            return orjson.loads(await response.read())
