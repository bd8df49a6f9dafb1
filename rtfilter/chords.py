"""Chord definitions and pitch class utilities.

Module-level constants:
- `NOTE_NAME_TO_PC`: Maps note names (e.g., `"C"`, `"F#"`, `"Bb"`) to pitch classes (0-11)
- `PC_TO_NOTE_NAME`: Maps pitch classes to note names
- `CHORD_INTERVALS`: Maps chord quality names to interval lists (semitones from root)
- `CHORD_SUFFIX`: Maps chord quality names to human-readable suffixes (e.g., `"m"`, `"7"`)

Module-level helpers:
- `key_name_to_pc(key_name)`: Validate a key name and return its pitch class (0–11).
- `quality_for_intervals(intervals)`: Reverse lookup of a chord quality.
"""

import dataclasses
import typing


NOTE_NAME_TO_PC: typing.Dict[str, int] = {
	"C": 0,
	"C#": 1,
	"Db": 1,
	"D": 2,
	"D#": 3,
	"Eb": 3,
	"E": 4,
	"F": 5,
	"F#": 6,
	"Gb": 6,
	"G": 7,
	"G#": 8,
	"Ab": 8,
	"A": 9,
	"A#": 10,
	"Bb": 10,
	"B": 11,
}

PC_TO_NOTE_NAME: typing.List[str] = [
	"C",
	"C#",
	"D",
	"D#",
	"E",
	"F",
	"F#",
	"G",
	"G#",
	"A",
	"A#",
	"B",
]


def key_name_to_pc (key_name: str) -> int:

	"""Validate a key name and return its pitch class (0–11).

	Parameters:
		key_name: Note name (e.g. ``"C"``, ``"F#"``, ``"Bb"``).

	Returns:
		Pitch class integer (0–11).

	Raises:
		ValueError: If the key name is not recognised.

	Example:
		```python
		key_name_to_pc("C")   # → 0
		key_name_to_pc("F#")  # → 6
		key_name_to_pc("Bb")  # → 10
		```
	"""

	if key_name not in NOTE_NAME_TO_PC:
		raise ValueError(
			f"Unknown key name: {key_name!r}. Expected e.g. 'C', 'F#', 'Bb'."
		)

	return NOTE_NAME_TO_PC[key_name]


CHORD_INTERVALS: typing.Dict[str, typing.List[int]] = {
	"major": [0, 4, 7],
	"minor": [0, 3, 7],
	"diminished": [0, 3, 6],
	"augmented": [0, 4, 8],
	"dominant_7th": [0, 4, 7, 10],
	"major_7th": [0, 4, 7, 11],
	"minor_7th": [0, 3, 7, 10],
	"half_diminished_7th": [0, 3, 6, 10],
	"diminished_7th": [0, 3, 6, 9],
	"minor_major_7th": [0, 3, 7, 11],
	"augmented_major_7th": [0, 4, 8, 11],
}

CHORD_SUFFIX: typing.Dict[str, str] = {
	"major": "",
	"minor": "m",
	"diminished": "dim",
	"augmented": "+",
	"dominant_7th": "7",
	"major_7th": "maj7",
	"minor_7th": "m7",
	"half_diminished_7th": "m7b5",
	"diminished_7th": "dim7",
	"minor_major_7th": "m(maj7)",
	"augmented_major_7th": "+maj7",
}

# Qualities written with a lower-case roman numeral, and their numeral suffix.
_MINOR_FAMILY: typing.Set[str] = {"minor", "diminished", "minor_7th", "half_diminished_7th", "diminished_7th", "minor_major_7th"}

_ROMAN_SUFFIX: typing.Dict[str, str] = {
	"major": "",
	"minor": "",
	"diminished": "°",
	"augmented": "+",
	"dominant_7th": "7",
	"major_7th": "maj7",
	"minor_7th": "7",
	"half_diminished_7th": "ø7",
	"diminished_7th": "°7",
	"minor_major_7th": "maj7",
	"augmented_major_7th": "+maj7",
}

ROMAN_NUMERALS: typing.List[str] = ["I", "II", "III", "IV", "V", "VI", "VII"]


def quality_for_intervals (intervals: typing.Sequence[int]) -> typing.Optional[str]:

	"""
	Return the chord quality whose intervals match, or ``None``.
	"""

	target = list(intervals)

	for quality, chord_intervals in CHORD_INTERVALS.items():
		if chord_intervals == target:
			return quality

	return None


@dataclasses.dataclass(frozen=True)
class Chord:

	"""
	Represents a chord as a root pitch class and quality.
	"""

	root_pc: int
	quality: str


	def name (self) -> str:

		"""
		Return a human-friendly chord name.
		"""

		root_name = PC_TO_NOTE_NAME[self.root_pc % 12]
		suffix = CHORD_SUFFIX.get(self.quality, "")

		return f"{root_name}{suffix}"


	def roman (self, degree: int) -> str:

		"""Return the roman-numeral name of this chord at a scale degree.

		Upper case for major-family qualities, lower case for minor-family
		ones (``"ii"``, ``"vii°"``, ``"V7"``).
		"""

		numeral = ROMAN_NUMERALS[degree % len(ROMAN_NUMERALS)]

		if self.quality in _MINOR_FAMILY:
			numeral = numeral.lower()

		return f"{numeral}{_ROMAN_SUFFIX.get(self.quality, '')}"
