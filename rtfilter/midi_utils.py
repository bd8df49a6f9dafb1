import logging
import typing

import mido


logger = logging.getLogger(__name__)


def find_port_name (requested: str, available: typing.Sequence[str]) -> typing.Optional[str]:

	"""Pick a port name matching ``requested``.

	An exact match wins; otherwise the first port whose name contains
	``requested`` (case-insensitive) is used, so short names like ``"fluid"``
	find ``"FLUID Synth (1234):Synth input port (1234:0) 128:0"``.
	"""

	if requested in available:
		return requested

	lowered = requested.lower()

	for name in available:
		if lowered in name.lower():
			return name

	return None


def select_output_device (device_name: str) -> typing.Tuple[typing.Optional[str], typing.Optional[typing.Any]]:

	"""
	Open a MIDI output device by exact or partial name.

	Returns:
		A tuple of (device_name, midi_out_object) or (None, None) on failure.
	"""

	try:
		outputs = mido.get_output_names()
		logger.info(f"Available MIDI outputs: {outputs}")

		selected_name = find_port_name(device_name, outputs)

		if selected_name is None:
			logger.error(f"MIDI output device '{device_name}' not found. Available devices: {outputs}")
			return None, None

		midi_out = mido.open_output(selected_name)
		logger.info(f"Opened MIDI output: {selected_name}")
		return selected_name, midi_out

	except Exception as e:
		logger.error(f"Failed to open MIDI output: {e}")
		return None, None


def select_input_device (device_name: str, callback: typing.Optional[typing.Callable] = None) -> typing.Tuple[typing.Optional[str], typing.Optional[typing.Any]]:

	"""
	Open a MIDI input device by exact or partial name.

	``callback`` is invoked by mido on its own thread for every message.

	Returns:
		A tuple of (device_name, midi_in_object) or (None, None) on failure.
	"""

	try:
		inputs = mido.get_input_names()
		logger.info(f"Available MIDI inputs: {inputs}")

		selected_name = find_port_name(device_name, inputs)

		if selected_name is None:
			logger.error(f"MIDI input device '{device_name}' not found. Available devices: {inputs}")
			return None, None

		midi_in = mido.open_input(selected_name, callback=callback)
		logger.info(f"Opened MIDI input: {selected_name}")
		return selected_name, midi_in

	except Exception as e:
		logger.error(f"Failed to open MIDI input: {e}")
		return None, None
