import typing

import mido
import pytest

import rtfilter.events
import rtfilter.exceptions


class FakeMidiOut:

	"""MIDI output stub that records what it is sent."""

	def __init__ (self) -> None:

		self.sent: typing.List[mido.Message] = []
		self.closed = False

	def send (self, message: mido.Message) -> None:

		"""Record outgoing MIDI messages."""

		self.sent.append(message)

	def close (self) -> None:

		self.closed = True


class FakeMidiIn:

	"""Minimal MIDI input stub for tests."""

	def __init__ (self, callback: typing.Optional[typing.Callable] = None) -> None:

		"""Store the callback for injecting test messages."""

		self.callback = callback
		self.closed = False

	def close (self) -> None:

		self.closed = True

	def inject (self, message: mido.Message) -> None:

		"""Simulate receiving a MIDI message by calling the stored callback."""

		if self.callback is not None:
			self.callback(message)


class RecordingSink:

	"""Sink that keeps every event it is given, optionally failing on some."""

	def __init__ (self, fail_on: typing.Optional[typing.Callable[[rtfilter.events.Event], bool]] = None) -> None:

		self.sent: typing.List[rtfilter.events.Event] = []
		self.fail_on = fail_on

	def send (self, event: rtfilter.events.Event) -> None:

		if self.fail_on is not None and self.fail_on(event):
			raise rtfilter.exceptions.SinkError(f"refused {event}")

		self.sent.append(event)

	@property
	def notes (self) -> typing.List[int]:

		return [event.note for event in self.sent]


class FakeClock:

	"""Manually advanced clock for deterministic scheduling tests."""

	def __init__ (self, start: float = 100.0) -> None:

		self.now = start

	def __call__ (self) -> float:

		return self.now

	def advance (self, seconds: float) -> None:

		self.now += seconds


def _fake_get_output_names () -> list[str]:

	"""Return a fixed list of MIDI output names for tests."""

	return ["Dummy MIDI Out", "FLUID Synth (1234):Synth input port (1234:0) 128:0"]


# Module-level references so tests can reach the most recently opened fake ports.
_current_fake_output: typing.Optional[FakeMidiOut] = None
_current_fake_input: typing.Optional[FakeMidiIn] = None


def _fake_open_output (name: str) -> FakeMidiOut:

	"""Return a fake MIDI output regardless of the name."""

	global _current_fake_output
	fake = FakeMidiOut()
	_current_fake_output = fake
	return fake


def _fake_get_input_names () -> list[str]:

	"""Return a fixed list of MIDI input names for tests."""

	return ["Dummy MIDI In", "TEMPOpad MIDI 1"]


def _fake_open_input (name: str, callback: typing.Optional[typing.Callable] = None) -> FakeMidiIn:

	"""Return a fake MIDI input regardless of the name."""

	global _current_fake_input
	fake = FakeMidiIn(callback=callback)
	_current_fake_input = fake
	return fake


@pytest.fixture
def patch_midi (monkeypatch: pytest.MonkeyPatch) -> None:

	"""Patch mido to use fake MIDI output and input for all tests that need it."""

	monkeypatch.setattr(mido, "get_output_names", _fake_get_output_names)
	monkeypatch.setattr(mido, "open_output", _fake_open_output)
	monkeypatch.setattr(mido, "get_input_names", _fake_get_input_names)
	monkeypatch.setattr(mido, "open_input", _fake_open_input)


@pytest.fixture
def sink () -> RecordingSink:

	return RecordingSink()


@pytest.fixture
def clock () -> FakeClock:

	return FakeClock()
