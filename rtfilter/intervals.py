"""Scale tables and diatonic lookups used by the chord-tone transform."""

import typing


SCALE_INTERVALS: typing.Dict[str, typing.List[int]] = {
	"major_ionian": [0, 2, 4, 5, 7, 9, 11],
	"dorian_mode": [0, 2, 3, 5, 7, 9, 10],
	"phrygian_mode": [0, 1, 3, 5, 7, 8, 10],
	"lydian": [0, 2, 4, 6, 7, 9, 11],
	"mixolydian": [0, 2, 4, 5, 7, 9, 10],
	"natural_minor": [0, 2, 3, 5, 7, 8, 10],
	"locrian_mode": [0, 1, 3, 5, 6, 8, 10],
	"harmonic_minor": [0, 2, 3, 5, 7, 8, 11],
	"melodic_minor": [0, 2, 3, 5, 7, 9, 11],
}


# Scale names accepted by the chord-tone transform, mapped to interval keys.
MODE_MAP: typing.Dict[str, str] = {
	"ionian":         "major_ionian",
	"major":          "major_ionian",
	"dorian":         "dorian_mode",
	"phrygian":       "phrygian_mode",
	"lydian":         "lydian",
	"mixolydian":     "mixolydian",
	"aeolian":        "natural_minor",
	"minor":          "natural_minor",
	"locrian":        "locrian_mode",
	"harmonic_minor": "harmonic_minor",
	"melodic_minor":  "melodic_minor",
}


TRIAD_DEGREES: typing.List[int] = [0, 2, 4]
SEVENTH_DEGREES: typing.List[int] = [0, 2, 4, 6]


def get_intervals (name: str) -> typing.List[int]:

	"""
	Return a named scale interval list from the registry.
	"""

	if name not in SCALE_INTERVALS:
		raise ValueError(f"Unknown interval set: {name}")

	return list(SCALE_INTERVALS[name])


def scale_pitch_classes (key_pc: int, mode: str = "ionian") -> typing.List[int]:

	"""
	Return the pitch classes (0–11) that belong to a key and mode.

	Parameters:
		key_pc: Root pitch class (0 = C, 1 = C#/Db, …, 11 = B).
		mode: Scale mode name, any key of ``MODE_MAP``.

	Returns:
		Pitch classes in scale order, starting from the key.

	Example:
		```python
		scale_pitch_classes(0, "ionian")   # → [0, 2, 4, 5, 7, 9, 11]
		scale_pitch_classes(9, "aeolian")  # → [9, 11, 0, 2, 4, 5, 7]
		```
	"""

	if mode not in MODE_MAP:
		raise ValueError(f"Unknown mode '{mode}'. Available: {sorted(MODE_MAP)}")

	intervals = get_intervals(MODE_MAP[mode])
	return [(key_pc + i) % 12 for i in intervals]


def scale_degree (pitch: int, scale_pcs: typing.Sequence[int]) -> typing.Optional[int]:

	"""Return the zero-based degree of a MIDI pitch within a scale.

	Returns ``None`` when the pitch class is not part of the scale.

	Example:
		```python
		scale = scale_pitch_classes(0, "ionian")
		scale_degree(62, scale)  # → 1  (D is the second degree of C major)
		scale_degree(61, scale)  # → None
		```
	"""

	pc = pitch % 12

	if pc not in scale_pcs:
		return None

	return list(scale_pcs).index(pc)


def get_diatonic_intervals (
	scale_notes: typing.Sequence[int],
	intervals: typing.Optional[typing.List[int]] = None
) -> typing.List[typing.List[int]]:

	"""
	Construct diatonic chords from a scale by stacking scale steps.

	Each returned chord lists pitch classes, one chord per scale degree.
	The default ``intervals`` of ``[0, 2, 4]`` gives triads; ``[0, 2, 4, 6]``
	gives seventh chords.
	"""

	if intervals is None:
		intervals = TRIAD_DEGREES

	diatonic_intervals: typing.List[typing.List[int]] = []
	num_scale_notes = len(scale_notes)

	for i in range(num_scale_notes):
		chord = [scale_notes[(i + offset) % num_scale_notes] for offset in intervals]
		diatonic_intervals.append(chord)

	return diatonic_intervals
