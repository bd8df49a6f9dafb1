"""YAML configuration for the command-line controller.

Example ``rtfilter.yaml``::

	midi:
	  input: tempopad
	  output: fluid
	  passthrough: false

	filters:
	  - name: stair
	    transform: stair_step
	    event_kinds: [note_on, note_off]
	    params:
	      delay: 0.2
	      feedback: 4
	  - name: pedal
	    transform: pedal_tone
	    gate:
	      trigger: 48
"""

import logging
import os
import typing

import yaml

import rtfilter.chain
import rtfilter.events
import rtfilter.exceptions
import rtfilter.gate
import rtfilter.transforms


logger = logging.getLogger(__name__)


DEFAULT_CONFIG_PATH = "rtfilter.yaml"


def load_config (config_path: str = DEFAULT_CONFIG_PATH) -> typing.Dict[str, typing.Any]:

	"""
	Load configuration from a YAML file. A missing or empty file gives ``{}``.
	"""

	if not os.path.exists(config_path):
		logger.warning(f"Config file {config_path} not found. Using defaults.")
		return {}

	with open(config_path, 'r') as f:
		config = yaml.safe_load(f)

	if config is None:
		return {}

	if not isinstance(config, dict):
		raise rtfilter.exceptions.ConfigurationError(f"{config_path}: expected a mapping at the top level")

	return config


def build_filters (config: typing.Dict[str, typing.Any], chain: rtfilter.chain.FilterChain) -> int:

	"""Register every entry of ``config["filters"]`` on ``chain``.

	Entries are registered in file order, which is also their dispatch order.
	Every entry is checked before any is registered, so a bad entry leaves
	``chain`` unchanged.

	Returns:
		The number of filters added.

	Raises:
		ConfigurationError: For a malformed entry, unknown transform, invalid
			parameter or duplicate name.
	"""

	entries = config.get('filters') or []

	if not isinstance(entries, list):
		raise rtfilter.exceptions.ConfigurationError("'filters' must be a list")

	pending: typing.List[typing.Tuple[str, typing.Any, rtfilter.transforms.Transform, typing.Optional[rtfilter.gate.Gate]]] = []
	names = {descriptor.name for descriptor in chain.filters}

	for index, entry in enumerate(entries):

		if not isinstance(entry, dict) or 'transform' not in entry:
			raise rtfilter.exceptions.ConfigurationError(f"Filter #{index} needs at least a 'transform' key")

		kind = entry['transform']

		if not isinstance(kind, str):
			raise rtfilter.exceptions.ConfigurationError(f"Filter #{index}: 'transform' must be a name, got {kind!r}")

		name = entry.get('name', kind)

		if not isinstance(name, str):
			raise rtfilter.exceptions.ConfigurationError(f"Filter #{index}: 'name' must be a string, got {name!r}")

		params = entry.get('params') or {}
		gate_config = entry.get('gate')

		if not isinstance(params, dict) or not all(isinstance(key, str) for key in params):
			raise rtfilter.exceptions.ConfigurationError(f"Filter {name!r}: 'params' must be a mapping, got {params!r}")

		if gate_config is not None and (not isinstance(gate_config, dict) or not all(isinstance(key, str) for key in gate_config)):
			raise rtfilter.exceptions.ConfigurationError(f"Filter {name!r}: 'gate' must be a mapping, got {gate_config!r}")

		if name in names:
			raise rtfilter.exceptions.DuplicateFilterName(f"A filter named {name!r} is already registered")

		names.add(name)

		transform = rtfilter.transforms.create(kind, **params)

		try:
			gate = rtfilter.gate.Gate(**gate_config) if gate_config else None
		except TypeError as e:
			raise rtfilter.exceptions.ConfigurationError(
				f"Filter {name!r}: unknown gate keys in {list(gate_config)}. Expected 'trigger' and/or 'value'"
			) from e

		event_kinds = entry.get('event_kinds')

		if event_kinds is not None:
			try:
				event_kinds = rtfilter.events.normalize_kinds(event_kinds)
			except TypeError as e:
				raise rtfilter.exceptions.ConfigurationError(f"Filter {name!r}: 'event_kinds' must be a list of names or 'all'") from e

		pending.append((name, event_kinds, transform, gate))

	for name, event_kinds, transform, gate in pending:
		chain.add_filter(name, event_kinds, transform, gate)

	return len(pending)
