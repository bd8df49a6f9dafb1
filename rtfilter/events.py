"""MIDI event model.

An ``Event`` is the ``(kind, channel, note, value)`` record every other module
passes around. It is immutable - transforms build new events with
``Event.replace()`` rather than mutating their input.

Field meaning depends on the kind:

- ``note_on`` / ``note_off``: ``note`` is the note number, ``value`` the velocity.
- ``control_change``: ``note`` is the controller number, ``value`` its value.
- ``polytouch``: ``note`` is the note number, ``value`` the pressure.
- ``aftertouch``, ``pitchwheel``, ``program_change``: ``note`` is unused (0).
"""

import dataclasses
import typing

import mido

import rtfilter.exceptions


NOTE_ON = "note_on"
NOTE_OFF = "note_off"
CONTROL_CHANGE = "control_change"
POLYTOUCH = "polytouch"
AFTERTOUCH = "aftertouch"
PITCHWHEEL = "pitchwheel"
PROGRAM_CHANGE = "program_change"

# Wildcard accepted wherever a set of event kinds is expected.
ALL = "all"

EVENT_KINDS: typing.FrozenSet[str] = frozenset({
	NOTE_ON,
	NOTE_OFF,
	CONTROL_CHANGE,
	POLYTOUCH,
	AFTERTOUCH,
	PITCHWHEEL,
	PROGRAM_CHANGE,
})

# Which mido attribute carries each of our two data fields.
_MESSAGE_FIELDS: typing.Dict[str, typing.Tuple[typing.Optional[str], str]] = {
	NOTE_ON: ("note", "velocity"),
	NOTE_OFF: ("note", "velocity"),
	CONTROL_CHANGE: ("control", "value"),
	POLYTOUCH: ("note", "value"),
	AFTERTOUCH: (None, "value"),
	PITCHWHEEL: (None, "pitch"),
	PROGRAM_CHANGE: (None, "program"),
}


@dataclasses.dataclass(frozen=True)
class Event:

	"""
	A single MIDI occurrence.
	"""

	kind: str
	channel: int
	note: int = 0
	value: int = 0


	def __post_init__ (self) -> None:

		if self.kind not in EVENT_KINDS:
			raise rtfilter.exceptions.ConfigurationError(f"Unknown event kind: {self.kind!r}")

		if not 0 <= self.channel <= 15:
			raise rtfilter.exceptions.ConfigurationError(f"MIDI channel must be 0-15, got {self.channel}")


	def replace (self, **changes: typing.Any) -> "Event":

		"""
		Return a copy of this event with some fields changed.
		"""

		return dataclasses.replace(self, **changes)


	@classmethod
	def from_message (cls, message: mido.Message) -> typing.Optional["Event"]:

		"""Build an event from a mido message.

		Returns ``None`` for message types without a channel (clock, sysex,
		transport) since filters never see those.

		Example:
			```python
			Event.from_message(mido.Message("note_on", channel=1, note=60, velocity=90))
			# → Event(kind="note_on", channel=1, note=60, value=90)
			```
		"""

		if message.type not in _MESSAGE_FIELDS:
			return None

		note_attr, value_attr = _MESSAGE_FIELDS[message.type]
		note = getattr(message, note_attr) if note_attr else 0

		return cls(message.type, message.channel, note, getattr(message, value_attr))


	def to_message (self) -> mido.Message:

		"""
		Convert the event into a mido message ready for an output port.
		"""

		note_attr, value_attr = _MESSAGE_FIELDS[self.kind]
		fields: typing.Dict[str, int] = {"channel": self.channel, value_attr: self.value}

		if note_attr:
			fields[note_attr] = self.note

		return mido.Message(self.kind, **fields)


def normalize_kinds (event_kinds: typing.Union[str, typing.Iterable[str]]) -> typing.Union[str, typing.FrozenSet[str]]:

	"""Validate a set of event kinds, or the ``"all"`` wildcard.

	A single kind name is accepted as shorthand for a one-element set.
	"""

	if event_kinds == ALL:
		return ALL

	if isinstance(event_kinds, str):
		event_kinds = [event_kinds]

	kinds = frozenset(event_kinds)

	if not kinds:
		raise rtfilter.exceptions.ConfigurationError("At least one event kind is required")

	unknown = kinds - EVENT_KINDS

	if unknown:
		raise rtfilter.exceptions.ConfigurationError(
			f"Unknown event kinds: {sorted(unknown)}. Available: {sorted(EVENT_KINDS)} or {ALL!r}"
		)

	return kinds
