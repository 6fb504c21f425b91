import asyncio
import inspect
from typing import Awaitable, Callable, Optional, Union

from config.settings import settings
from governance.enums.proposal_state import ProposalState
from governance.models.dao import DAO
from governance.models.proposal import Proposal
from governance.service.proposal_state_service import ProposalStateService
from utils.logger_utils import get_logger

logger = get_logger("Proposal State Watcher")

StateChangeCallback = Callable[[ProposalState], Union[None, Awaitable[None]]]


class ProposalStateWatcher(object):
    """
    Re-evaluates the effective state of one observed proposal on a fixed interval.

    Owned by the observer: start() when observation begins, stop() (or leave the async with block)
    when it ends. Any number of consumers may read `current_state`; only the watcher writes it.
    """

    def __init__(
        self,
        proposal: Proposal,
        dao: Optional[DAO] = None,
        on_change: Optional[StateChangeCallback] = None,
        interval_seconds: Optional[float] = None,
        state_service: Optional[ProposalStateService] = None,
    ):
        self._proposal = proposal
        self._dao = dao
        self._on_change = on_change
        self.interval_seconds = (
            settings.governance.state_refresh_seconds if interval_seconds is None else interval_seconds
        )
        self._state_service = state_service or ProposalStateService()
        self._current_state: Optional[ProposalState] = None
        self._task: Optional[asyncio.Task] = None

    @property
    def current_state(self) -> Optional[ProposalState]:
        return self._current_state

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> ProposalState:
        """Computes the state immediately, then schedules the periodic re-evaluation."""
        if self.is_running:
            return self._current_state
        await self.refresh()
        self._task = asyncio.create_task(self._run(), name=f"proposal-state-{self._proposal.key}")
        return self._current_state

    async def update(self, proposal: Proposal, dao: Optional[DAO] = None) -> ProposalState:
        """Swaps in fresh indexer data and re-evaluates right away."""
        self._proposal = proposal
        self._dao = dao
        return await self.refresh()

    async def refresh(self) -> ProposalState:
        state = self._state_service.calculate_proposal_state(self._proposal, self._dao)
        if state != self._current_state:
            previous, self._current_state = self._current_state, state
            logger.info(
                f"Proposal {self._proposal.key} state {previous.value if previous else None} -> {state.value}"
            )
            await self._notify(state)
        return state

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        finally:
            self._task = None

    async def __aenter__(self):
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.stop()

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            try:
                await self.refresh()
            except Exception:
                logger.exception(f"Failed to re-evaluate state of proposal {self._proposal.key}")

    async def _notify(self, state: ProposalState) -> None:
        if self._on_change is None:
            return
        result = self._on_change(state)
        if inspect.isawaitable(result):
            await result
