"""The filter chain dispatcher.

Filters are registered under a unique name with the event kinds they react to,
a transform, and an optional gate. For each incoming event the chain visits the
matching filters in registration order:

1. A filter whose gate rejects the event is skipped and the chain moves on.
2. Otherwise its transform renders output events, which are sent immediately
   or handed to the scheduler according to the transform's send policy.
3. If the filter's ``continue_chain`` setting is False the chain stops there
   and no later filter sees this event.
"""

import dataclasses
import logging
import typing

import rtfilter.events
import rtfilter.exceptions
import rtfilter.gate
import rtfilter.scheduler
import rtfilter.sink
import rtfilter.transforms


logger = logging.getLogger(__name__)


DEFAULT_EVENT_KINDS: typing.FrozenSet[str] = frozenset({rtfilter.events.NOTE_ON, rtfilter.events.NOTE_OFF})


@dataclasses.dataclass(frozen=True)
class FilterDescriptor:

	"""
	A registered filter. Several descriptors may share one transform.
	"""

	name: str
	event_kinds: typing.Union[str, typing.FrozenSet[str]]
	transform: rtfilter.transforms.Transform
	gate: typing.Optional[rtfilter.gate.Gate] = None


	def matches (self, kind: str) -> bool:

		"""True when this filter reacts to events of ``kind``."""

		return self.event_kinds == rtfilter.events.ALL or kind in self.event_kinds


class FilterChain:

	"""
	Routes incoming events through the registered filters.
	"""

	def __init__ (self, sink: rtfilter.sink.OutputSink, scheduler: rtfilter.scheduler.Scheduler) -> None:

		"""
		Parameters:
			sink: Receives immediate sends.
			scheduler: Receives delayed sends. Usually shares ``sink``.
		"""

		self._filters: typing.List[FilterDescriptor] = []
		self._handle = rtfilter.sink.SendHandle(sink, scheduler)


	@property
	def filters (self) -> typing.Tuple[FilterDescriptor, ...]:

		return tuple(self._filters)


	def __len__ (self) -> int:

		return len(self._filters)


	def add_filter (
		self,
		name: str,
		event_kinds: typing.Union[str, typing.Iterable[str], None],
		transform: rtfilter.transforms.Transform,
		gate: typing.Optional[rtfilter.gate.Gate] = None
	) -> FilterDescriptor:

		"""Register a filter at the end of the chain.

		Parameters:
			name: Unique name within this chain.
			event_kinds: Event kinds to react to, ``"all"``, or ``None`` for
				note-on and note-off.
			transform: The configured transform to run.
			gate: Optional trigger/value constraint.

		Raises:
			DuplicateFilterName: If ``name`` is already registered.
			ConfigurationError: If the event kinds or transform are invalid.
				The chain is unchanged on failure.

		Example:
			```python
			chain.add_filter("stair", ["note_on", "note_off"], StairStep(delay=0.2, feedback=4))
			```
		"""

		if any(existing.name == name for existing in self._filters):
			raise rtfilter.exceptions.DuplicateFilterName(f"A filter named {name!r} is already registered")

		if not isinstance(transform, rtfilter.transforms.Transform):
			raise rtfilter.exceptions.ConfigurationError(
				f"Filter {name!r} needs a Transform, got {type(transform).__name__}"
			)

		kinds = DEFAULT_EVENT_KINDS if event_kinds is None else rtfilter.events.normalize_kinds(event_kinds)

		descriptor = FilterDescriptor(name=name, event_kinds=kinds, transform=transform, gate=gate)
		self._filters.append(descriptor)

		logger.info(f"Added filter {name!r} ({transform.kind}) for {kinds if kinds == rtfilter.events.ALL else sorted(kinds)}")

		return descriptor


	def dispatch (self, device: str, dt: float, event: rtfilter.events.Event) -> bool:

		"""Run ``event`` through the chain.

		Parameters:
			device: Name of the input the event came from.
			dt: Seconds since the previous event from the upstream source.
			event: The incoming event.

		Returns:
			False if a filter stopped the chain, True otherwise.

		Raises:
			SinkError: If an immediate send fails. Sends already made stay sent.
		"""

		for descriptor in self._filters:

			if not descriptor.matches(event.kind):
				continue

			if not rtfilter.gate.should_apply(descriptor.gate, event):
				continue

			params = descriptor.transform.params

			for delay, output in descriptor.transform.render(event, params):

				if descriptor.transform.send_policy == rtfilter.transforms.IMMEDIATE:
					self._handle.send(output)
				else:
					self._handle.delay_send(delay, output)

			if not params.continue_chain:
				logger.debug(f"{device}: filter {descriptor.name!r} stopped the chain for {event} (dt={dt:.3f})")
				return False

		return True
