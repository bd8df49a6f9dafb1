"""Note transforms.

Each transform turns one input note into an ordered list of output notes.
The note rules live in plain functions (``stair_step_notes``, ``pedal_notes``
and so on) that depend only on their arguments. The ``Transform`` classes pair
a rule with its validated parameters and a send policy:

- ``IMMEDIATE``: every note is sent straight away, in order.
- ``CUMULATIVE_DELAY``: note *k* (1-based) is scheduled ``k * delay`` seconds
  after the input event.

Output notes are not clamped to the MIDI range here; the sink decides what to
do with notes outside 0-127.
"""

import logging
import typing

import rtfilter.chords
import rtfilter.events
import rtfilter.exceptions
import rtfilter.intervals
import rtfilter.params


logger = logging.getLogger(__name__)


IMMEDIATE = "immediate"
CUMULATIVE_DELAY = "cumulative_delay"

# (delay seconds, event) pairs in generation order.
Emission = typing.Tuple[float, rtfilter.events.Event]


def stair_step_notes (note: int, feedback: int, up: int, down: int) -> typing.List[int]:

	"""Walk away from ``note`` in alternating up and down steps.

	Step ``i`` (1-based) moves by ``i * up`` when ``i`` is odd and by
	``(i - 1) * down`` when ``i`` is even, so each pair of steps climbs a
	little further than the last.

	Example:
		```python
		stair_step_notes(60, feedback=3, up=2, down=-1)  # → [62, 61, 67]
		```
	"""

	notes: typing.List[int] = []
	current = note

	for i in range(1, feedback + 1):

		if i % 2 == 0:
			factor = (i - 1) * down
		else:
			factor = i * up

		current += factor
		notes.append(current)

	return notes


def pedal_notes (note: int, pedal: int) -> typing.List[int]:

	"""
	Return the pedal note, the played note, then a fifth above it.
	"""

	return [pedal, note, note + 7]


def echo_notes (note: int, feedback: int) -> typing.List[int]:

	"""
	Repeat ``note`` once per unit of feedback.
	"""

	return [note] * feedback


def offset_notes (note: int, offset: int) -> typing.List[int]:

	"""
	Return ``note`` and, unless ``offset`` is zero, ``note + offset``.
	"""

	if offset == 0:
		return [note]

	return [note, note + offset]


def diatonic_chord_intervals (note: int, key_pc: int, mode: str, seventh: bool = False) -> typing.Optional[typing.Tuple[int, typing.List[int]]]:

	"""Find the diatonic chord built on ``note`` in a key.

	Returns:
		``(degree, intervals)`` where ``degree`` is the zero-based scale degree
		and ``intervals`` are semitones above the root, or ``None`` when the
		note's pitch class is not in the scale.
	"""

	scale_pcs = rtfilter.intervals.scale_pitch_classes(key_pc, mode)
	degree = rtfilter.intervals.scale_degree(note, scale_pcs)

	if degree is None:
		return None

	stack = rtfilter.intervals.SEVENTH_DEGREES if seventh else rtfilter.intervals.TRIAD_DEGREES
	chord_pcs = rtfilter.intervals.get_diatonic_intervals(scale_pcs, stack)[degree]

	return degree, [(pc - chord_pcs[0]) % 12 for pc in chord_pcs]


def chord_notes (note: int, key_pc: int, mode: str, seventh: bool = False) -> typing.List[int]:

	"""Harmonize ``note`` with the diatonic chord rooted on it.

	Notes outside the scale pass through unchanged.

	Example:
		```python
		chord_notes(62, key_pc=0, mode="major")  # → [62, 65, 69]  (D minor)
		chord_notes(61, key_pc=0, mode="major")  # → [61]
		```
	"""

	found = diatonic_chord_intervals(note, key_pc, mode, seventh)

	if found is None:
		logger.debug(f"Note {note} is outside the scale - passing through")
		return [note]

	degree, intervals = found

	if logger.isEnabledFor(logging.DEBUG):
		quality = rtfilter.chords.quality_for_intervals(intervals)
		if quality is not None:
			chord = rtfilter.chords.Chord(root_pc=note % 12, quality=quality)
			key_name = rtfilter.chords.PC_TO_NOTE_NAME[key_pc % 12]
			logger.debug(f"Note {note} → {chord.name()} ({chord.roman(degree)} in {key_name} {mode})")

	return [note + interval for interval in intervals]


class Transform:

	"""
	Base class pairing a note rule with its parameters and send policy.

	Subclasses set ``kind`` (the registry name), ``send_policy`` and
	``params_class`` and implement ``apply()``.
	"""

	kind: str = ""
	send_policy: str = IMMEDIATE
	params_class: typing.Type[rtfilter.params.FilterParams] = rtfilter.params.FilterParams


	def __init__ (self, params: typing.Optional[rtfilter.params.FilterParams] = None, **kwargs: typing.Any) -> None:

		"""Create a transform from a params object or keyword settings.

		Raises:
			ConfigurationError: If a setting is unknown or out of range.
		"""

		if params is None:
			params = rtfilter.params.replace_params(self.params_class(), **kwargs)

		elif kwargs:
			raise rtfilter.exceptions.ConfigurationError("Pass either a params object or keyword settings, not both")

		if not isinstance(params, self.params_class):
			raise rtfilter.exceptions.ConfigurationError(
				f"{type(self).__name__} expects {self.params_class.__name__}, got {type(params).__name__}"
			)

		self.params = params


	def __repr__ (self) -> str:

		return f"{type(self).__name__}({self.params!r})"


	def update (self, **changes: typing.Any) -> None:

		"""Change some settings.

		The new settings are validated as a whole before they replace the old
		ones, so a rejected update leaves the transform exactly as it was.
		"""

		self.params = rtfilter.params.replace_params(self.params, **changes)

		logger.debug(f"{type(self).__name__} updated: {changes}")


	def apply (self, note: int, params: typing.Optional[rtfilter.params.FilterParams] = None) -> typing.List[int]:

		"""
		Return the output notes for ``note``. Uses the current params when none are given.
		"""

		raise NotImplementedError


	def _delay_for (self, position: int, params: rtfilter.params.FilterParams) -> float:

		"""Return the delay in seconds for the 1-based ``position``-th note."""

		if self.send_policy == CUMULATIVE_DELAY:
			return position * params.delay  # type: ignore[attr-defined]

		return 0.0


	def _value_for (self, position: int, value: int, params: rtfilter.params.FilterParams) -> int:

		"""Return the velocity/value for the 1-based ``position``-th note."""

		return value


	def render (self, event: rtfilter.events.Event, params: typing.Optional[rtfilter.params.FilterParams] = None) -> typing.List[Emission]:

		"""Turn an input event into delayed output events.

		Each output event copies the input's kind and value, takes its channel
		from the params (or the input when unset), and carries one produced note.
		"""

		if params is None:
			params = self.params

		channel = event.channel if params.channel is None else params.channel
		emissions: typing.List[Emission] = []

		for position, note in enumerate(self.apply(event.note, params), start=1):
			output = event.replace(
				channel = channel,
				note = note,
				value = self._value_for(position, event.value, params)
			)
			emissions.append((self._delay_for(position, params), output))

		return emissions


class StairStep (Transform):

	"""
	Notes played from the event note in up-down, stair-step fashion.
	"""

	kind = "stair_step"
	send_policy = CUMULATIVE_DELAY
	params_class = rtfilter.params.StairStepParams


	def apply (self, note: int, params: typing.Optional[rtfilter.params.FilterParams] = None) -> typing.List[int]:

		p = typing.cast(rtfilter.params.StairStepParams, params or self.params)

		return stair_step_notes(note, p.feedback, p.up, p.down)


class PedalTone (Transform):

	"""
	The pedal note, the played note and its fifth, one after another.
	"""

	kind = "pedal_tone"
	send_policy = CUMULATIVE_DELAY
	params_class = rtfilter.params.PedalToneParams


	def apply (self, note: int, params: typing.Optional[rtfilter.params.FilterParams] = None) -> typing.List[int]:

		p = typing.cast(rtfilter.params.PedalToneParams, params or self.params)

		return pedal_notes(note, p.pedal)


class ChordTone (Transform):

	"""
	The diatonic chord built on the played note, sounded all at once.
	"""

	kind = "chord_tone"
	send_policy = IMMEDIATE
	params_class = rtfilter.params.ChordToneParams


	def apply (self, note: int, params: typing.Optional[rtfilter.params.FilterParams] = None) -> typing.List[int]:

		p = typing.cast(rtfilter.params.ChordToneParams, params or self.params)
		return chord_notes(note, rtfilter.chords.key_name_to_pc(p.key), p.scale, p.seventh)


class DelayEcho (Transform):

	"""
	Repeats of the played note, each one quieter than the last.
	"""

	kind = "delay_echo"
	send_policy = CUMULATIVE_DELAY
	params_class = rtfilter.params.DelayEchoParams


	def apply (self, note: int, params: typing.Optional[rtfilter.params.FilterParams] = None) -> typing.List[int]:

		p = typing.cast(rtfilter.params.DelayEchoParams, params or self.params)

		return echo_notes(note, p.feedback)


	def _value_for (self, position: int, value: int, params: rtfilter.params.FilterParams) -> int:

		p = typing.cast(rtfilter.params.DelayEchoParams, params)

		return value - (position - 1) * p.decrement


class OffsetTone (Transform):

	"""
	The played note plus a fixed interval, sounded together.
	"""

	kind = "offset_tone"
	send_policy = IMMEDIATE
	params_class = rtfilter.params.OffsetToneParams


	def apply (self, note: int, params: typing.Optional[rtfilter.params.FilterParams] = None) -> typing.List[int]:

		p = typing.cast(rtfilter.params.OffsetToneParams, params or self.params)

		return offset_notes(note, p.offset)


TRANSFORMS: typing.Dict[str, typing.Type[Transform]] = {
	cls.kind: cls for cls in (StairStep, PedalTone, ChordTone, DelayEcho, OffsetTone)
}


def create (kind: str, **settings: typing.Any) -> Transform:

	"""Build a transform by registry name, e.g. ``create("stair_step", feedback=4)``.

	Raises:
		ConfigurationError: If ``kind`` is unknown or a setting is invalid.
	"""

	if kind not in TRANSFORMS:
		raise rtfilter.exceptions.ConfigurationError(f"Unknown transform: {kind!r}. Available: {sorted(TRANSFORMS)}")

	return TRANSFORMS[kind](**settings)
