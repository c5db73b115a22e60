from sparkboard.metrics.discovery import PROMETHEUS, ServiceDiscovery
from sparkboard.metrics.range_query import RangeQuery, RangeQueryClient
from sparkboard.metrics.scheduler import (
    POLL_INTERVAL_S,
    RETRY_DELAY_S,
    OnChange,
    PollScheduler,
)
from sparkboard.metrics.state import WidgetSnapshot, WidgetStateMachine


class SparklineController:
    """Everything one sparkline widget needs between mount and unmount.

    The host passes ``on_change`` and receives a fresh ``WidgetSnapshot``
    after every state change. ``stop`` is the unmount hook.
    """

    def __init__(
        self,
        query: str,
        discovery: ServiceDiscovery,
        client: RangeQueryClient,
        on_change: OnChange | None = None,
        *,
        limit: float | None = None,
        service_name: str = PROMETHEUS,
        interval_s: float = POLL_INTERVAL_S,
        retry_delay_s: float = RETRY_DELAY_S,
    ):
        self.query = RangeQuery(query)
        self.machine = WidgetStateMachine(limit=limit)
        self.scheduler = PollScheduler(
            discovery,
            client,
            self.machine,
            on_change,
            service_name=service_name,
            interval_s=interval_s,
            retry_delay_s=retry_delay_s,
        )

    @property
    def snapshot(self) -> WidgetSnapshot:
        return self.machine.snapshot()

    async def start(self) -> None:
        await self.scheduler.start(self.query)

    def stop(self) -> None:
        self.scheduler.stop()

    async def retry(self) -> bool:
        return await self.scheduler.retry()
