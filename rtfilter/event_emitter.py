import asyncio
import inspect
import logging
import typing


logger = logging.getLogger(__name__)


CallbackType = typing.Callable[..., typing.Any]


class EventEmitter:

	"""
	Named notification hooks for the chain, scheduler and controller.

	Listeners may be plain functions or coroutine functions. ``emit()`` is safe
	to call from synchronous code running inside the event loop: coroutine
	listeners are started as tasks rather than awaited.
	"""

	def __init__ (self) -> None:

		self._listeners: typing.Dict[str, typing.List[CallbackType]] = {}
		self._tasks: typing.Set[asyncio.Task] = set()


	def on (self, event_name: str, callback: CallbackType) -> None:

		"""
		Register a callback for an event name.
		"""

		self._listeners.setdefault(event_name, []).append(callback)


	def off (self, event_name: str, callback: CallbackType) -> None:

		"""
		Unregister a previously registered callback.

		Raises ``ValueError`` if the callback is not registered for the event.
		"""

		if callback not in self._listeners.get(event_name, []):
			raise ValueError(f"Callback not registered for event {event_name!r}")

		self._listeners[event_name].remove(callback)


	def emit (self, event_name: str, *args: typing.Any, **kwargs: typing.Any) -> None:

		"""
		Call listeners for ``event_name`` from synchronous code.

		Coroutine listeners need a running event loop; without one they are
		skipped with a warning.
		"""

		for callback in list(self._listeners.get(event_name, [])):

			if not inspect.iscoroutinefunction(callback):
				callback(*args, **kwargs)
				continue

			try:
				loop = asyncio.get_running_loop()
			except RuntimeError:
				logger.warning(f"No running event loop - async listener for {event_name!r} skipped")
				continue

			task = loop.create_task(callback(*args, **kwargs))
			self._tasks.add(task)
			task.add_done_callback(self._tasks.discard)


	async def emit_async (self, event_name: str, *args: typing.Any, **kwargs: typing.Any) -> None:

		"""
		Emit an event and await async listeners.
		"""

		awaitables: typing.List[typing.Awaitable[typing.Any]] = []

		for callback in list(self._listeners.get(event_name, [])):

			if inspect.iscoroutinefunction(callback):
				awaitables.append(callback(*args, **kwargs))

			else:
				callback(*args, **kwargs)

		if awaitables:
			await asyncio.gather(*awaitables)
