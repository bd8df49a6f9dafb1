"""Output sinks.

A sink is anything with a ``send(event)`` method. ``MidoSink`` writes to a
mido output port; ``SendHandle`` is the narrow capability the chain hands to
each filter invocation, pairing a sink for immediate sends with a scheduler
for delayed ones.
"""

import logging
import typing

import rtfilter.events
import rtfilter.exceptions

if typing.TYPE_CHECKING:
	from rtfilter.scheduler import Scheduler


logger = logging.getLogger(__name__)


PITCHWHEEL_MIN = -8192
PITCHWHEEL_MAX = 8191


@typing.runtime_checkable
class OutputSink (typing.Protocol):

	"""
	Protocol for objects that deliver events to an output.
	"""

	def send (self, event: rtfilter.events.Event) -> None:

		"""
		Deliver ``event`` now. Raises ``SinkError`` on failure.
		"""

		...


def clamp_event (event: rtfilter.events.Event) -> typing.Optional[rtfilter.events.Event]:

	"""Fit an event into the MIDI data range.

	Values are clamped; a note (or controller) number outside 0-127 cannot be
	represented at all, so the event is dropped and ``None`` is returned.
	"""

	if event.kind in (rtfilter.events.NOTE_ON, rtfilter.events.NOTE_OFF, rtfilter.events.POLYTOUCH, rtfilter.events.CONTROL_CHANGE):
		if not 0 <= event.note <= 127:
			return None

	if event.kind == rtfilter.events.PITCHWHEEL:
		value = max(PITCHWHEEL_MIN, min(PITCHWHEEL_MAX, event.value))
	else:
		value = max(0, min(127, event.value))

	if value != event.value:
		return event.replace(value=value)

	return event


class MidoSink:

	"""
	Sends events to a mido output port.
	"""

	def __init__ (self, port: typing.Any) -> None:

		self.port = port


	def send (self, event: rtfilter.events.Event) -> None:

		"""Convert ``event`` to a mido message and send it.

		Events whose note number falls outside 0-127 are dropped; velocities and
		values are clamped into range.

		Raises:
			SinkError: If the port is missing, closed, or the backend fails.
		"""

		if self.port is None or getattr(self.port, "closed", False):
			raise rtfilter.exceptions.SinkError("MIDI output port is not open")

		clamped = clamp_event(event)

		if clamped is None:
			logger.debug(f"Dropping out-of-range event: {event}")
			return

		try:
			self.port.send(clamped.to_message())

		except Exception as e:
			raise rtfilter.exceptions.SinkError(f"MIDI send failed (device may be disconnected): {e}") from e


	def close (self) -> None:

		"""
		Close the underlying port.
		"""

		if self.port is not None:
			self.port.close()
			self.port = None


class SendHandle:

	"""
	What a filter invocation is allowed to do with its output.

	``send()`` goes to the sink straight away; ``delay_send()`` is handed to the
	scheduler and returns without waiting.
	"""

	def __init__ (self, sink: OutputSink, scheduler: "Scheduler") -> None:

		self._sink = sink
		self._scheduler = scheduler


	def send (self, event: rtfilter.events.Event) -> None:

		self._sink.send(event)


	def delay_send (self, delay: float, event: rtfilter.events.Event) -> None:

		self._scheduler.schedule(delay, event)
