"""Trigger/value gates deciding whether a filter reacts to an event."""

import dataclasses
import typing

import rtfilter.events
import rtfilter.exceptions


@dataclasses.dataclass(frozen=True)
class Gate:

	"""
	Optional constraints on an event's note and value.

	``trigger`` must equal the event's ``note`` and ``value`` must equal the
	event's ``value``. A field left as ``None`` places no constraint on that axis.
	"""

	trigger: typing.Optional[int] = None
	value: typing.Optional[int] = None


	def __post_init__ (self) -> None:

		for name in ("trigger", "value"):
			field_value = getattr(self, name)
			if field_value is not None and (isinstance(field_value, bool) or not isinstance(field_value, int)):
				raise rtfilter.exceptions.ConfigurationError(f"Gate {name} must be None or an integer, got {field_value!r}")


def should_apply (gate: typing.Optional[Gate], event: rtfilter.events.Event) -> bool:

	"""Return True when ``event`` passes ``gate``.

	A missing gate accepts every event.

	Example:
		```python
		should_apply(Gate(trigger=60), Event("note_on", 0, 60, 100))  # → True
		should_apply(Gate(trigger=60), Event("note_on", 0, 62, 100))  # → False
		```
	"""

	if gate is None:
		return True

	if gate.trigger is not None and event.note != gate.trigger:
		return False

	if gate.value is not None and event.value != gate.value:
		return False

	return True
