import logging

import pytest

import rtfilter.events
import rtfilter.exceptions
import rtfilter.params
import rtfilter.transforms


def _note_on (note: int = 60, velocity: int = 100, channel: int = 0) -> rtfilter.events.Event:

	return rtfilter.events.Event(rtfilter.events.NOTE_ON, channel, note, velocity)


# --- Note rules ---


def test_stair_step_example () -> None:

	"""Odd steps climb by i * up, even steps move by (i - 1) * down."""

	assert rtfilter.transforms.stair_step_notes(60, feedback=3, up=2, down=-1) == [62, 61, 67]


def test_stair_step_longer_walk () -> None:

	"""The fourth step moves by 3 * down and the fifth by 5 * up."""

	assert rtfilter.transforms.stair_step_notes(60, feedback=5, up=2, down=-1) == [62, 61, 67, 64, 74]


@pytest.mark.parametrize("feedback", [1, 2, 3, 7, 16])
def test_stair_step_length_matches_feedback (feedback: int) -> None:

	"""Stair-step produces exactly one note per unit of feedback."""

	assert len(rtfilter.transforms.stair_step_notes(48, feedback, 3, -2)) == feedback


def test_pedal_notes () -> None:

	"""Pedal, played note, fifth above."""

	assert rtfilter.transforms.pedal_notes(60, pedal=55) == [55, 60, 67]


def test_echo_notes () -> None:

	assert rtfilter.transforms.echo_notes(64, feedback=4) == [64, 64, 64, 64]


def test_offset_notes_zero_is_identity () -> None:

	assert rtfilter.transforms.offset_notes(72, 0) == [72]


def test_offset_notes_keeps_order () -> None:

	assert rtfilter.transforms.offset_notes(72, -12) == [72, 60]
	assert rtfilter.transforms.offset_notes(60, 7) == [60, 67]


def test_chord_notes_major_degrees () -> None:

	"""Each degree of C major gets its diatonic triad, rooted on the played note."""

	assert rtfilter.transforms.chord_notes(60, 0, "major") == [60, 64, 67]
	assert rtfilter.transforms.chord_notes(62, 0, "major") == [62, 65, 69]
	assert rtfilter.transforms.chord_notes(67, 0, "major") == [67, 71, 74]
	assert rtfilter.transforms.chord_notes(71, 0, "major") == [71, 74, 77]


def test_chord_notes_keeps_octave () -> None:

	"""The chord is built in the octave of the played note."""

	assert rtfilter.transforms.chord_notes(38, 0, "major") == [38, 41, 45]


def test_chord_notes_seventh () -> None:

	"""The fifth degree of C major with a seventh is G7."""

	assert rtfilter.transforms.chord_notes(67, 0, "major", seventh=True) == [67, 71, 74, 77]


def test_chord_notes_minor_key () -> None:

	"""A natural minor: the tonic is minor, the third degree (C) is major."""

	assert rtfilter.transforms.chord_notes(57, 9, "minor") == [57, 60, 64]
	assert rtfilter.transforms.chord_notes(60, 9, "minor") == [60, 64, 67]


def test_chord_notes_outside_scale_passes_through () -> None:

	"""A note whose pitch class is not in the scale comes back unchanged."""

	assert rtfilter.transforms.chord_notes(61, 0, "major") == [61]
	assert rtfilter.transforms.chord_notes(66, 0, "major", seventh=True) == [66]


# --- Transform objects ---


def test_stair_step_render_schedules_cumulatively () -> None:

	"""Note k is delayed by k * delay and keeps the input velocity."""

	transform = rtfilter.transforms.StairStep(up=2, down=-1, feedback=3, delay=0.1)
	emissions = transform.render(_note_on(60, 90))

	assert [event.note for _, event in emissions] == [62, 61, 67]
	assert [delay for delay, _ in emissions] == pytest.approx([0.1, 0.2, 0.3])
	assert all(event.value == 90 for _, event in emissions)
	assert transform.send_policy == rtfilter.transforms.CUMULATIVE_DELAY


def test_pedal_tone_render () -> None:

	transform = rtfilter.transforms.PedalTone(pedal=55, delay=0.1)
	emissions = transform.render(_note_on(60))

	assert [event.note for _, event in emissions] == [55, 60, 67]
	assert [delay for delay, _ in emissions] == pytest.approx([0.1, 0.2, 0.3])


def test_pedal_tone_ignores_channel_and_velocity () -> None:

	"""The note sequence does not depend on the input's channel or velocity."""

	transform = rtfilter.transforms.PedalTone(pedal=55)

	for channel, velocity in [(0, 1), (9, 64), (15, 127)]:
		emissions = transform.render(_note_on(60, velocity, channel))
		assert [event.note for _, event in emissions] == [55, 60, 67]


def test_delay_echo_velocity_decreases () -> None:

	"""The k-th echo has velocity initial - (k - 1) * decrement."""

	transform = rtfilter.transforms.DelayEcho(feedback=4, delay=0.25, decrement=15)
	emissions = transform.render(_note_on(64, 100))

	assert [event.note for _, event in emissions] == [64, 64, 64, 64]
	assert [event.value for _, event in emissions] == [100, 85, 70, 55]
	assert [delay for delay, _ in emissions] == pytest.approx([0.25, 0.5, 0.75, 1.0])


def test_delay_echo_does_not_clamp_velocity () -> None:

	"""Velocities below zero are left for the sink to deal with."""

	transform = rtfilter.transforms.DelayEcho(feedback=3, decrement=40)
	emissions = transform.render(_note_on(64, 50))

	assert [event.value for _, event in emissions] == [50, 10, -30]


def test_offset_tone_is_immediate () -> None:

	transform = rtfilter.transforms.OffsetTone(offset=-12)
	emissions = transform.render(_note_on(72))

	assert [event.note for _, event in emissions] == [72, 60]
	assert [delay for delay, _ in emissions] == [0.0, 0.0]
	assert transform.send_policy == rtfilter.transforms.IMMEDIATE


def test_chord_tone_is_immediate () -> None:

	transform = rtfilter.transforms.ChordTone(key="F", scale="major")
	emissions = transform.render(_note_on(65))

	assert [event.note for _, event in emissions] == [65, 69, 72]
	assert all(delay == 0.0 for delay, _ in emissions)


def test_render_uses_configured_channel () -> None:

	"""A configured channel overrides the input's; None keeps it."""

	event = _note_on(60, channel=3)

	kept = rtfilter.transforms.OffsetTone(offset=12).render(event)
	moved = rtfilter.transforms.OffsetTone(offset=12, channel=9).render(event)

	assert {e.channel for _, e in kept} == {3}
	assert {e.channel for _, e in moved} == {9}


def test_render_keeps_event_kind () -> None:

	"""Note-off input produces note-off output."""

	event = rtfilter.events.Event(rtfilter.events.NOTE_OFF, 0, 60, 0)
	emissions = rtfilter.transforms.StairStep(feedback=2).render(event)

	assert {e.kind for _, e in emissions} == {rtfilter.events.NOTE_OFF}


def test_render_does_not_mutate_input () -> None:

	event = _note_on(60, 100)
	rtfilter.transforms.DelayEcho(feedback=3).render(event)

	assert event == _note_on(60, 100)


def test_apply_is_deterministic () -> None:

	"""Repeated invocations with the same params give the same notes."""

	transform = rtfilter.transforms.StairStep(feedback=6, up=3, down=-2)

	assert transform.apply(50) == transform.apply(50)


def test_zero_delay_schedules_at_zero () -> None:

	emissions = rtfilter.transforms.StairStep(feedback=3, delay=0).render(_note_on())

	assert [delay for delay, _ in emissions] == [0, 0, 0]


def test_update_changes_params () -> None:

	transform = rtfilter.transforms.StairStep()
	transform.update(feedback=4, delay=0.2)

	assert transform.params.feedback == 4
	assert transform.params.delay == 0.2
	assert len(transform.apply(60)) == 4


def test_rejected_update_keeps_previous_params () -> None:

	"""An invalid update raises and leaves every setting as it was."""

	transform = rtfilter.transforms.StairStep(feedback=3, delay=0.2)
	before = transform.params

	with pytest.raises(rtfilter.exceptions.ConfigurationError):
		transform.update(delay=0.5, feedback=0)

	assert transform.params is before


def test_update_rejects_unknown_name () -> None:

	transform = rtfilter.transforms.PedalTone()

	with pytest.raises(rtfilter.exceptions.ConfigurationError, match="feedback"):
		transform.update(feedback=2)


def test_constructor_rejects_wrong_params_class () -> None:

	with pytest.raises(rtfilter.exceptions.ConfigurationError):
		rtfilter.transforms.StairStep(rtfilter.params.PedalToneParams())


def test_create_by_name () -> None:

	transform = rtfilter.transforms.create("delay_echo", feedback=2)

	assert isinstance(transform, rtfilter.transforms.DelayEcho)
	assert transform.params.feedback == 2


def test_create_unknown_name () -> None:

	with pytest.raises(rtfilter.exceptions.ConfigurationError, match="arpeggio"):
		rtfilter.transforms.create("arpeggio")


def test_chord_tone_matches_chord_notes () -> None:

	"""ChordTone resolves its key and defers to chord_notes."""

	transform = rtfilter.transforms.ChordTone(key="C", scale="major", seventh=True)

	for note in (60, 61, 67, 71):
		assert transform.apply(note) == rtfilter.transforms.chord_notes(note, 0, "major", seventh=True)


def test_chord_notes_logs_chord_name (caplog: pytest.LogCaptureFixture) -> None:

	"""At debug level each harmonized note is named with its roman numeral."""

	with caplog.at_level(logging.DEBUG, logger="rtfilter.transforms"):
		rtfilter.transforms.chord_notes(67, 0, "major", seventh=True)

	assert "G7 (V7 in C major)" in caplog.text
