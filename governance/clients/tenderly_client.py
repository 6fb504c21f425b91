import asyncio
from typing import Any, Dict, Optional

import aiohttp
import orjson

from config.settings import settings
from utils.exceptions import SimulationError
from utils.logger_utils import get_logger

logger = get_logger("Tenderly Client")


class TenderlyClient(object):
    """
    Thin client for the Tenderly simulation endpoint of one project.
    Use as an async context manager.
    """

    def __init__(self, api_url: Optional[str] = None, api_key: Optional[str] = None, timeout: float = 60):
        self.api_url = (api_url if api_url is not None else settings.tenderly.api_url or "").rstrip("/")
        self.api_key = api_key if api_key is not None else settings.tenderly.api_key
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
        return bool(self.api_url and self.api_key)

    async def simulate(
        self,
        network_id: str,
        from_address: str,
        to_address: str,
        calldata: str,
        value: int = 0,
        state_objects: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Runs a full simulation without saving it.

        Args:
            state_objects: Optional overrides, {address: {"storage": {slot: value}}}.

        Raises:
            SimulationError: Not configured, no open session, non-2xx or non-JSON response, or network failure.
        """
        if not self.is_configured:
            raise SimulationError("Tenderly simulation is not configured")
        if self.session is None:
            raise SimulationError("TenderlyClient session is not open; use it as an async context manager")

        body = {
            "network_id": network_id,
            "from": from_address,
            "to": to_address,
            "input": calldata,
            "value": str(value),
            "save": False,
            "save_if_fails": False,
            "simulation_type": "full",
        }
        if state_objects:
            body["state_objects"] = state_objects

        headers = {"Content-Type": "application/json", "X-Access-Key": self.api_key}
        try:
            async with self.session.post(f"{self.api_url}/simulate", data=orjson.dumps(body), headers=headers) as response:
                if response.status >= 300:
                    error = await response.text()
                    raise SimulationError(f"Simulation request failed ({response.status}): {error}")
                result = orjson.loads(await response.read())
        except (aiohttp.ClientError, asyncio.TimeoutError, orjson.JSONDecodeError) as e:
            logger.error(f"Error requesting simulation for {to_address}: {e}")
            raise SimulationError(f"Simulation request failed: {e}") from e
        if not isinstance(result, dict):
            raise SimulationError("Simulation response is not a JSON object")
        return result
