"""Daily cheerful-photo broadcast.

Once a day, at a fixed wall-clock time, one photo is fetched and posted to the
incoming webhook of every installed team. Destinations are posted to
concurrently and independently; a failing team never blocks the others. The
broadcast does not go through the message queue.

Examples
--------
.. code-block:: python

    broadcast = DailyBroadcast(store, gateway, hour=7, minute=0, timezone="UTC")
    broadcast.start()          # inside a running event loop
    report = await broadcast.run()  # or trigger it by hand
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Final, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from slack_cheer.backends.base.protocol import IntegrationStore
from slack_cheer.gateway import DeliveryGateway

__all__: list[str] = ["BROADCAST_JOB_ID", "BroadcastReport", "DailyBroadcast"]

_LOG: Final[logging.Logger] = logging.getLogger(__name__)

BROADCAST_JOB_ID: Final[str] = "daily_broadcast"


@dataclass(frozen=True, slots=True)
class BroadcastReport:
    destinations: int
    delivered: int

    @property
    def failed(self) -> int:
        return self.destinations - self.delivered


class DailyBroadcast:
    """Post one photo to every installed team once a day.

    Parameters
    ----------
    store : IntegrationStore
        Source of the installed teams
    gateway : DeliveryGateway
        Fetches the photo and posts it
    hour, minute : int
        Wall-clock time of the daily run
    timezone : str
        IANA timezone the time is expressed in
    """

    def __init__(
        self,
        store: IntegrationStore,
        gateway: DeliveryGateway,
        *,
        hour: int = 7,
        minute: int = 0,
        timezone: str = "UTC",
    ) -> None:
        self._store = store
        self._gateway = gateway
        self._trigger = CronTrigger(hour=hour, minute=minute, timezone=timezone)
        self._scheduler: Optional[AsyncIOScheduler] = None

    @property
    def running(self) -> bool:
        return self._scheduler is not None and self._scheduler.running

    def start(self) -> None:
        """Register the daily job on an asyncio scheduler bound to the running loop."""
        if self.running:
            return
        self._scheduler = AsyncIOScheduler(event_loop=asyncio.get_running_loop())
        self._scheduler.add_job(
            self.run,
            trigger=self._trigger,
            id=BROADCAST_JOB_ID,
            replace_existing=True,
            coalesce=True,
            misfire_grace_time=3600,
        )
        self._scheduler.start()
        _LOG.info(f"Daily broadcast scheduled ({self._trigger})")

    def shutdown(self) -> None:
        if self._scheduler is not None and self._scheduler.running:
            self._scheduler.shutdown(wait=False)
            _LOG.info("Daily broadcast stopped")
        self._scheduler = None

    async def run(self) -> BroadcastReport:
        """Fetch one photo and post it to every installed team.

        Returns
        -------
        BroadcastReport
            How many teams were targeted and how many posts succeeded
        """
        records = await self._store.list()
        if not records:
            _LOG.info("Daily broadcast skipped, no installed teams")
            return BroadcastReport(destinations=0, delivered=0)

        photo = await self._gateway.fetch_photo()
        if photo is None:
            _LOG.warning(f"Daily broadcast skipped, no photo for {len(records)} team(s)")
            return BroadcastReport(destinations=len(records), delivered=0)

        results = await asyncio.gather(
            *(self._gateway.send_cheer(record.endpoint_url, photo) for record in records),
            return_exceptions=True,
        )
        delivered = 0
        for record, result in zip(records, results):
            if isinstance(result, BaseException):
                _LOG.warning(f"Daily broadcast to team {record.team_id} failed: {result!r}")
            elif result:
                delivered += 1

        report = BroadcastReport(destinations=len(records), delivered=delivered)
        _LOG.info(f"Daily broadcast delivered to {report.delivered}/{report.destinations} team(s)")
        return report
