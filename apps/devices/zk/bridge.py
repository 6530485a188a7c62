"""Realtime event bridge between a device push capture and a stream consumer.

PyZK's live capture is a blocking loop, so it runs on a dedicated producer
thread that feeds a bounded channel. The consumer drains the channel through
``frames()`` (a generator, used by the SSE view) or ``start()`` (callback form,
used by the management command). Closing either side tears the session down.
"""

import logging
import queue
import threading
from collections.abc import Callable, Iterator

from django.conf import settings
from django.utils.translation import gettext as _

from apps.devices.constants import DeviceSessionState
from apps.devices.exceptions import DeviceError, DeviceStreamError

from .records import RealtimeEvent
from .session import DeviceSession

logger = logging.getLogger(__name__)

_END_OF_STREAM = object()


class RealtimeEventBridge:
    """Forward device-pushed punches to one consumer for the lifetime of a session.

    Events are delivered in arrival order. The channel is bounded: when it is
    full the producer waits, nothing is dropped or coalesced while the consumer
    is attached. Whatever ends the stream (consumer close, ``stop()`` or a
    fatal capture error), ``session.disconnect()`` is called exactly once before
    control returns to the caller.
    """

    def __init__(
        self,
        session: DeviceSession,
        poll_interval: float | None = None,
        channel_size: int | None = None,
    ):
        self.session = session
        self.poll_interval = poll_interval if poll_interval is not None else settings.ZK_REALTIME_POLL_INTERVAL
        channel_size = channel_size if channel_size is not None else settings.ZK_REALTIME_CHANNEL_SIZE
        self._channel: queue.Queue = queue.Queue(maxsize=channel_size)
        self._stop_requested = threading.Event()
        self._producer_done = threading.Event()
        self._producer: threading.Thread | None = None
        self._error: BaseException | None = None
        self._torn_down = False

    @property
    def stopped(self) -> bool:
        return self._stop_requested.is_set()

    def stop(self) -> None:
        """Request termination. Safe to call from any thread, any number of times."""
        if not self._stop_requested.is_set():
            logger.info(f"Stop requested for realtime stream on {self.session.endpoint.address}")
        self._stop_requested.set()

    def close(self) -> None:
        """Stop the stream and tear the session down now, from the consumer's thread."""
        self._teardown()

    def frames(self) -> Iterator[RealtimeEvent | None]:
        """Yield realtime events, or ``None`` once per idle poll interval.

        Raises:
            DeviceConnectionError: If the session cannot be connected
            DeviceStreamError: If the capture fails while streaming
        """
        if self._torn_down:
            return

        try:
            if self.session.state == DeviceSessionState.IDLE:
                self.session.connect()

            self._producer = threading.Thread(
                target=self._produce,
                name=f"zk_live_{self.session.endpoint.host}",
                daemon=True,
            )
            self._producer.start()

            while not self._stop_requested.is_set():
                try:
                    item = self._channel.get(timeout=self.poll_interval)
                except queue.Empty:
                    if self._producer_done.is_set():
                        break
                    yield None
                    continue

                if item is _END_OF_STREAM:
                    break
                yield item
        finally:
            self._teardown()

        if self._error is not None:
            if isinstance(self._error, DeviceError):
                raise self._error
            raise DeviceStreamError(
                _("Failed to get real-time logs: %(error)s") % {"error": str(self._error)}, cause=self._error
            ) from self._error

    def start(self, on_frame: Callable[[RealtimeEvent], object]) -> None:
        """Invoke ``on_frame`` for every event until stopped or the capture fails."""
        stream = self.frames()
        try:
            for event in stream:
                if event is not None:
                    on_frame(event)
        finally:
            stream.close()

    def _produce(self) -> None:
        try:
            self.session.subscribe_realtime(self._publish, self._stop_requested.is_set, self.poll_interval)
        except Exception as e:
            self._error = e
        finally:
            self._producer_done.set()
            try:
                self._channel.put_nowait(_END_OF_STREAM)
            except queue.Full:
                # The consumer notices the finished producer once the channel drains
                pass

    def _publish(self, event: RealtimeEvent) -> None:
        while not self._stop_requested.is_set():
            try:
                self._channel.put(event, timeout=self.poll_interval)
                return
            except queue.Full:
                continue

    def _teardown(self) -> None:
        if self._torn_down:
            return
        self._torn_down = True
        self._stop_requested.set()

        if self._producer is not None:
            self._producer.join(timeout=self.poll_interval + self.session.endpoint.timeout_seconds)
            if self._producer.is_alive():
                logger.warning(
                    f"Live capture thread for {self.session.endpoint.address} did not stop in time, "
                    "closing the connection under it"
                )

        self.session.disconnect()
        logger.info(f"Realtime stream closed for device at {self.session.endpoint.address}")
