import asyncio
import logging
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .session import PeerSession

logger = logging.getLogger(__name__)


class LivenessMonitor:
    ''' Periodic transport-level probing for one session.

    Each tick either sends a fresh probe or, when the previous probe was
    never answered, closes the session. Only the transport pong counts as
    an answer; application ``ping``/``pong`` messages never reach here.
    '''

    def __init__(self, session: "PeerSession", interval: float):
        self.session = session
        self.interval = interval
        self.responsive = True
        self._task: Optional[asyncio.Task] = None

    def start(self):
        self._task = asyncio.create_task(self._run())

    def stop(self):
        task, self._task = self._task, None
        # close() may be running inside the monitor task itself
        if task is not None and task is not asyncio.current_task():
            task.cancel()

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def acknowledge(self):
        self.responsive = True

    def _on_ack(self, waiter: asyncio.Future):
        if waiter.cancelled() or waiter.exception() is not None:
            return
        self.acknowledge()

    async def tick(self):
        if self.session.closed:
            return
        if not self.responsive:
            logger.info("%s did not answer the last probe, closing", self.session.id)
            await self.session.close()
            return
        self.responsive = False
        waiter = await self.session.probe()
        if waiter is not None:
            waiter.add_done_callback(self._on_ack)

    async def _run(self):
        while not self.session.closed:
            await asyncio.sleep(self.interval)
            await self.tick()
