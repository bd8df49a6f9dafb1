import dataclasses

import mido
import pytest

import rtfilter.events
import rtfilter.exceptions


def test_structural_equality_and_hash () -> None:

	"""Events with the same fields are equal and hash alike."""

	a = rtfilter.events.Event("note_on", 0, 60, 100)
	b = rtfilter.events.Event("note_on", 0, 60, 100)

	assert a == b
	assert hash(a) == hash(b)
	assert len({a, b}) == 1


def test_events_are_immutable () -> None:

	event = rtfilter.events.Event("note_on", 0, 60, 100)

	with pytest.raises(dataclasses.FrozenInstanceError):
		event.note = 61  # type: ignore[misc]


def test_replace_returns_new_event () -> None:

	event = rtfilter.events.Event("note_on", 0, 60, 100)
	moved = event.replace(note=67)

	assert moved.note == 67
	assert event.note == 60


def test_rejects_bad_channel_and_kind () -> None:

	with pytest.raises(rtfilter.exceptions.ConfigurationError):
		rtfilter.events.Event("note_on", 16, 60, 100)

	with pytest.raises(rtfilter.exceptions.ConfigurationError):
		rtfilter.events.Event("clock", 0)


def test_from_note_message () -> None:

	message = mido.Message("note_on", channel=2, note=64, velocity=90)

	assert rtfilter.events.Event.from_message(message) == rtfilter.events.Event("note_on", 2, 64, 90)


def test_from_control_change_message () -> None:

	"""The controller number travels in the note field."""

	message = mido.Message("control_change", channel=0, control=1, value=33)

	assert rtfilter.events.Event.from_message(message) == rtfilter.events.Event("control_change", 0, 1, 33)


def test_from_channelless_message_is_none () -> None:

	assert rtfilter.events.Event.from_message(mido.Message("clock")) is None
	assert rtfilter.events.Event.from_message(mido.Message("sysex", data=[1, 2])) is None


def test_to_message () -> None:

	assert rtfilter.events.Event("note_off", 1, 60, 0).to_message() == mido.Message("note_off", channel=1, note=60, velocity=0)
	assert rtfilter.events.Event("pitchwheel", 3, 0, -200).to_message() == mido.Message("pitchwheel", channel=3, pitch=-200)
	assert rtfilter.events.Event("program_change", 0, 0, 5).to_message() == mido.Message("program_change", channel=0, program=5)


def test_normalize_kinds () -> None:

	assert rtfilter.events.normalize_kinds("all") == "all"
	assert rtfilter.events.normalize_kinds("note_on") == frozenset({"note_on"})
	assert rtfilter.events.normalize_kinds(["note_on", "note_off", "note_on"]) == frozenset({"note_on", "note_off"})


def test_normalize_kinds_rejects_unknown_and_empty () -> None:

	with pytest.raises(rtfilter.exceptions.ConfigurationError, match="note_onn"):
		rtfilter.events.normalize_kinds(["note_onn"])

	with pytest.raises(rtfilter.exceptions.ConfigurationError):
		rtfilter.events.normalize_kinds([])


def test_event_has_only_its_four_fields () -> None:

	event = rtfilter.events.Event(kind=rtfilter.events.NOTE_ON, channel=0, note=60, value=100)

	assert [field.name for field in dataclasses.fields(event)] == ["kind", "channel", "note", "value"]
	assert not hasattr(event, "is_note")
