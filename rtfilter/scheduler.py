"""Delayed dispatch of events to an output sink.

Pending sends live in a heap keyed by ``(fire_at, sequence)``. The sequence
number comes from a single counter, so two sends with the same fire time go out
in the order they were scheduled. A timer task sleeps until the earliest send
is due, releases everything that is due, and goes back to sleep; scheduling a
new send wakes it so an earlier deadline is never missed.

All methods are meant to be called from the event loop thread. MIDI input that
arrives on another thread must be handed over with ``call_soon_threadsafe``
first (the controller does this).
"""

import asyncio
import dataclasses
import heapq
import itertools
import logging
import math
import time
import typing

import rtfilter.event_emitter
import rtfilter.events
import rtfilter.exceptions
import rtfilter.sink


logger = logging.getLogger(__name__)


@dataclasses.dataclass(order=True)
class ScheduledSend:

	"""
	An event waiting for its fire time.
	"""

	fire_at: float
	sequence: int
	event: rtfilter.events.Event = dataclasses.field(compare=False)


class Scheduler:

	"""
	Releases events to a sink once their delay has elapsed.

	Events are emitted on ``events``:

	- ``"send_error"`` ``(event, error)`` when the sink fails a delayed send.
	  The failed send is dropped; sends before and after it are unaffected.
	"""

	def __init__ (
		self,
		sink: rtfilter.sink.OutputSink,
		clock: typing.Callable[[], float] = time.monotonic
	) -> None:

		"""
		Parameters:
			sink: Where due events are delivered.
			clock: Monotonic time source in seconds. Tests inject a fake one.
		"""

		self.sink = sink
		self._clock = clock
		self._queue: typing.List[ScheduledSend] = []
		self._counter = itertools.count()
		self._wake: typing.Optional[asyncio.Event] = None
		self.task: typing.Optional[asyncio.Task] = None
		self.running = False
		self.events = rtfilter.event_emitter.EventEmitter()


	@property
	def pending (self) -> int:

		"""Number of sends not yet released."""

		return len(self._queue)


	def now (self) -> float:

		return self._clock()


	def schedule (self, delay: float, event: rtfilter.events.Event) -> ScheduledSend:

		"""Queue ``event`` for delivery ``delay`` seconds from now.

		Never blocks. Sends queued before ``start()`` are held until the timer runs.

		Raises:
			ConfigurationError: If ``delay`` is negative.
		"""

		if delay < 0 or math.isnan(delay):
			raise rtfilter.exceptions.ConfigurationError(f"delay must be >= 0, got {delay}")

		scheduled = ScheduledSend(self._clock() + delay, next(self._counter), event)
		heapq.heappush(self._queue, scheduled)

		logger.debug(f"Scheduled {event} in {delay:.3f}s, queue size: {len(self._queue)}")

		if self._wake is not None:
			self._wake.set()

		return scheduled


	def release_due (self, now: typing.Optional[float] = None) -> int:

		"""Send every queued event whose fire time is at or before ``now``.

		Returns:
			The number of events taken off the queue, including any the sink failed.
		"""

		if now is None:
			now = self._clock()

		released = 0

		while self._queue and self._queue[0].fire_at <= now:

			scheduled = heapq.heappop(self._queue)
			released += 1

			try:
				self.sink.send(scheduled.event)

			except rtfilter.exceptions.SinkError as e:
				logger.exception(f"Delayed send of {scheduled.event} failed")
				self.events.emit("send_error", scheduled.event, e)

		return released


	async def start (self) -> None:

		"""
		Start the timer task.
		"""

		if self.running:
			return

		self._wake = asyncio.Event()
		self.running = True
		self.task = asyncio.create_task(self._run_loop())

		logger.info("Scheduler started")


	async def stop (self, drain: bool = False) -> None:

		"""Stop the timer task.

		Parameters:
			drain: When True, send everything still pending immediately.
				Otherwise pending sends are discarded.
		"""

		if not self.running:
			return

		self.running = False

		if self._wake is not None:
			self._wake.set()

		if self.task:
			await self.task
			self.task = None

		self._wake = None

		if drain:
			self.release_due(math.inf)

		elif self._queue:
			logger.info(f"Abandoning {len(self._queue)} pending sends")
			self._queue = []

		logger.info("Scheduler stopped")


	async def _run_loop (self) -> None:

		"""Release due sends, then sleep until the next deadline or a wake-up."""

		assert self._wake is not None

		while self.running:

			self.release_due()

			timeout: typing.Optional[float] = None

			if self._queue:
				timeout = max(0.0, self._queue[0].fire_at - self._clock())

			self._wake.clear()

			try:
				await asyncio.wait_for(self._wake.wait(), timeout)
			except asyncio.TimeoutError:
				pass
