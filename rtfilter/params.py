"""Per-transform configuration.

Each transform owns one of these dataclasses. Values are validated when the
object is built, so an invalid setting is rejected before any event is
dispatched. Use ``dataclasses.replace`` (or ``Transform.update``) to change
values - the replacement is validated the same way.
"""

import dataclasses
import math
import numbers
import typing

import rtfilter.chords
import rtfilter.exceptions
import rtfilter.intervals


def _require_channel (channel: typing.Optional[int]) -> None:

	if channel is None:
		return

	if isinstance(channel, bool) or not isinstance(channel, int) or not 0 <= channel <= 15:
		raise rtfilter.exceptions.ConfigurationError(f"channel must be None or an integer 0-15, got {channel!r}")


def _require_delay (delay: float) -> None:

	if isinstance(delay, bool) or not isinstance(delay, numbers.Real) or math.isnan(delay) or delay < 0:
		raise rtfilter.exceptions.ConfigurationError(f"delay must be a non-negative number of seconds, got {delay!r}")


def _require_feedback (feedback: int) -> None:

	if isinstance(feedback, bool) or not isinstance(feedback, int) or feedback < 1:
		raise rtfilter.exceptions.ConfigurationError(f"feedback must be an integer >= 1, got {feedback!r}")


def _require_int (name: str, value: typing.Any) -> None:

	if isinstance(value, bool) or not isinstance(value, int):
		raise rtfilter.exceptions.ConfigurationError(f"{name} must be an integer, got {value!r}")


@dataclasses.dataclass(frozen=True)
class FilterParams:

	"""Settings shared by every transform.

	Parameters:
		channel: Output channel (0-15). ``None`` keeps the input event's channel.
		continue_chain: The filter's continue/stop signal. ``False`` (the default)
			stops the chain after this filter reacts to an event.
	"""

	channel: typing.Optional[int] = None
	continue_chain: bool = False


	def __post_init__ (self) -> None:

		_require_channel(self.channel)

		if not isinstance(self.continue_chain, bool):
			raise rtfilter.exceptions.ConfigurationError(f"continue_chain must be a bool, got {self.continue_chain!r}")


@dataclasses.dataclass(frozen=True)
class StairStepParams (FilterParams):

	"""
	Stair-step arpeggio settings: ``feedback`` notes, ``delay`` seconds apart,
	alternating ``up`` and ``down`` movement.
	"""

	delay: float = 0.1
	feedback: int = 1
	up: int = 2
	down: int = -1


	def __post_init__ (self) -> None:

		super().__post_init__()
		_require_delay(self.delay)
		_require_feedback(self.feedback)
		_require_int("up", self.up)
		_require_int("down", self.down)


@dataclasses.dataclass(frozen=True)
class PedalToneParams (FilterParams):

	"""
	Pedal-tone settings: the held ``pedal`` note and the spacing ``delay``.
	"""

	pedal: int = 55
	delay: float = 0.1


	def __post_init__ (self) -> None:

		super().__post_init__()
		_require_int("pedal", self.pedal)
		_require_delay(self.delay)


@dataclasses.dataclass(frozen=True)
class ChordToneParams (FilterParams):

	"""
	Diatonic chord settings: ``key`` name, ``scale`` mode, and whether to add the seventh.
	"""

	key: str = "C"
	scale: str = "major"
	seventh: bool = False


	def __post_init__ (self) -> None:

		super().__post_init__()

		if not isinstance(self.key, str) or self.key not in rtfilter.chords.NOTE_NAME_TO_PC:
			raise rtfilter.exceptions.ConfigurationError(
				f"Unknown key name: {self.key!r}. Expected e.g. 'C', 'F#', 'Bb'."
			)

		if not isinstance(self.scale, str) or self.scale not in rtfilter.intervals.MODE_MAP:
			raise rtfilter.exceptions.ConfigurationError(
				f"Unknown scale: {self.scale!r}. Available: {sorted(rtfilter.intervals.MODE_MAP)}"
			)

		if not isinstance(self.seventh, bool):
			raise rtfilter.exceptions.ConfigurationError(f"seventh must be a bool, got {self.seventh!r}")


@dataclasses.dataclass(frozen=True)
class DelayEchoParams (FilterParams):

	"""
	Echo settings: ``feedback`` repeats, ``delay`` seconds apart, each
	``decrement`` quieter than the last.
	"""

	delay: float = 0.1
	feedback: int = 1
	decrement: int = 10


	def __post_init__ (self) -> None:

		super().__post_init__()
		_require_delay(self.delay)
		_require_feedback(self.feedback)
		_require_int("decrement", self.decrement)

		if self.decrement < 0:
			raise rtfilter.exceptions.ConfigurationError(f"decrement must be >= 0, got {self.decrement}")


@dataclasses.dataclass(frozen=True)
class OffsetToneParams (FilterParams):

	"""
	Interval settings: the semitone ``offset`` added alongside the played note.
	"""

	offset: int = -12


	def __post_init__ (self) -> None:

		super().__post_init__()
		_require_int("offset", self.offset)


def replace_params (params: FilterParams, **changes: typing.Any) -> FilterParams:

	"""Return a validated copy of ``params`` with ``changes`` applied.

	Raises:
		ConfigurationError: If a name is unknown or a value is out of range.
			``params`` itself is never modified.
	"""

	known = {field.name for field in dataclasses.fields(params)}
	unknown = set(changes) - known

	if unknown:
		raise rtfilter.exceptions.ConfigurationError(
			f"Unknown parameters for {type(params).__name__}: {sorted(unknown)}"
		)

	return dataclasses.replace(params, **changes)
