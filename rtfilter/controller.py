"""A minimal real-time run loop around the filter chain.

The controller opens one MIDI input and one MIDI output, and feeds every
incoming channel message through its ``FilterChain`` in arrival order.

mido calls the input callback on its own thread. The callback only stamps the
arrival time and hands the message to the asyncio loop with
``call_soon_threadsafe``; all dispatching and scheduling happens on the loop.
"""

import asyncio
import logging
import time
import typing

import rtfilter.chain
import rtfilter.event_emitter
import rtfilter.events
import rtfilter.exceptions
import rtfilter.gate
import rtfilter.midi_utils
import rtfilter.scheduler
import rtfilter.sink
import rtfilter.transforms


logger = logging.getLogger(__name__)


class Controller:

	"""
	Connects a MIDI input to a MIDI output through a filter chain.

	Events are emitted on ``events``:

	- ``"start"`` / ``"stop"`` around the run loop.
	- ``"send_error"`` ``(event, error)`` when an immediate send fails.
	  Delayed send failures are reported on ``scheduler.events``.
	"""

	def __init__ (
		self,
		input_device_name: str,
		output_device_name: str,
		passthrough: bool = False,
		clock: typing.Callable[[], float] = time.monotonic
	) -> None:

		"""Open the output device and build the chain.

		Parameters:
			input_device_name: Exact or partial MIDI input name. Opened by ``start()``.
			output_device_name: Exact or partial MIDI output name.
			passthrough: When True, every incoming event is also forwarded unchanged
				before the filters run.
			clock: Monotonic time source used for delta-times and scheduling.
		"""

		if not input_device_name or not output_device_name:
			raise rtfilter.exceptions.ConfigurationError("Both an input and an output device name are required")

		self.input_device_name = input_device_name
		self.output_device_name = output_device_name
		self.passthrough = passthrough
		self._clock = clock

		self.midi_in: typing.Any = None
		self.midi_out: typing.Any = None
		self._init_midi_output()

		self.sink = rtfilter.sink.MidoSink(self.midi_out)
		self.scheduler = rtfilter.scheduler.Scheduler(self.sink, clock=clock)
		self.chain = rtfilter.chain.FilterChain(self.sink, self.scheduler)
		self.events = rtfilter.event_emitter.EventEmitter()

		self._input_queue: typing.Optional[asyncio.Queue] = None
		self._input_loop: typing.Optional[asyncio.AbstractEventLoop] = None
		self._last_event_time: typing.Optional[float] = None
		self.task: typing.Optional[asyncio.Task] = None
		self.running = False


	def _init_midi_output (self) -> None:

		device_name, midi_out = rtfilter.midi_utils.select_output_device(self.output_device_name)

		if device_name:
			self.output_device_name = device_name
			self.midi_out = midi_out


	def _init_midi_input (self) -> None:

		device_name, midi_in = rtfilter.midi_utils.select_input_device(self.input_device_name, self._on_midi_input)

		if device_name:
			self.input_device_name = device_name
			self.midi_in = midi_in


	def add_filter (
		self,
		name: str,
		event_kinds: typing.Union[str, typing.Iterable[str], None],
		transform: rtfilter.transforms.Transform,
		gate: typing.Optional[rtfilter.gate.Gate] = None
	) -> rtfilter.chain.FilterDescriptor:

		"""
		Register a filter on the chain. See ``FilterChain.add_filter``.
		"""

		return self.chain.add_filter(name, event_kinds, transform, gate)


	def _on_midi_input (self, message: typing.Any) -> None:

		"""Forward a message from mido's callback thread to the event loop."""

		if self._input_queue is None or self._input_loop is None:
			return

		self._input_loop.call_soon_threadsafe(
			self._input_queue.put_nowait, (self._clock(), message)
		)


	def handle_message (self, message: typing.Any, received_at: typing.Optional[float] = None) -> bool:

		"""Dispatch one incoming mido message.

		Messages without a channel (clock, sysex, transport) are ignored.

		Returns:
			False if a filter stopped the chain, True otherwise.
		"""

		event = rtfilter.events.Event.from_message(message)

		if event is None:
			return True

		if received_at is None:
			received_at = self._clock()

		dt = 0.0 if self._last_event_time is None else max(0.0, received_at - self._last_event_time)
		self._last_event_time = received_at

		try:
			if self.passthrough:
				self.sink.send(event)

			return self.chain.dispatch(self.input_device_name, dt, event)

		except rtfilter.exceptions.SinkError as e:
			logger.exception(f"Send failed while processing {event}")
			self.events.emit("send_error", event, e)
			return True


	async def start (self) -> None:

		"""Open the input device and start processing.

		The input port is opened here, once the event loop is running, so that
		``call_soon_threadsafe`` has a loop to target.
		"""

		if self.running:
			return

		self._input_loop = asyncio.get_running_loop()
		self._input_queue = asyncio.Queue()
		self._init_midi_input()

		await self.scheduler.start()

		self.running = True
		self.task = asyncio.create_task(self._run_loop())

		logger.info(f"Controller started: {self.input_device_name} → {self.output_device_name}")

		await self.events.emit_async("start")


	async def stop (self, drain: bool = False) -> None:

		"""Stop processing and close both devices.

		Parameters:
			drain: Send pending delayed events before closing the output.
		"""

		if not self.running:
			return

		logger.info("Stopping controller...")

		self.running = False

		if self._input_queue is not None:
			self._input_queue.put_nowait(None)

		if self.task:
			await self.task
			self.task = None

		if self.midi_in:
			self.midi_in.close()
			self.midi_in = None

		await self.scheduler.stop(drain=drain)

		self.sink.close()
		self.midi_out = None

		self._input_queue = None
		self._input_loop = None

		logger.info("Controller stopped")

		await self.events.emit_async("stop")


	async def run (self) -> None:

		"""
		Start the controller and process input until ``stop()`` is called.
		"""

		await self.start()

		try:
			if self.task:
				await self.task
		except asyncio.CancelledError:
			pass
		finally:
			await self.stop()


	async def _run_loop (self) -> None:

		"""Consume queued input strictly in arrival order."""

		assert self._input_queue is not None

		while self.running:

			item = await self._input_queue.get()

			if item is None:
				break

			received_at, message = item
			self.handle_message(message, received_at)
