import asyncio
import logging
import sys

import rtfilter.config
import rtfilter.controller


# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def main () -> None:

	"""
	Run a controller described by a YAML file.

	Usage: ``python -m rtfilter [config.yaml]``
	"""

	config_path = sys.argv[1] if len(sys.argv) > 1 else rtfilter.config.DEFAULT_CONFIG_PATH
	config = rtfilter.config.load_config(config_path)

	midi = config.get('midi') or {}

	controller = rtfilter.controller.Controller(
		input_device_name = midi.get('input', 'tempopad'),
		output_device_name = midi.get('output', 'fluid'),
		passthrough = midi.get('passthrough', False)
	)

	if rtfilter.config.build_filters(config, controller.chain) == 0:
		logger.warning("No filters configured - input will be ignored unless passthrough is enabled")

	try:
		asyncio.run(controller.run())
	except KeyboardInterrupt:
		logger.info("Stopping...")


if __name__ == "__main__":
	main()
