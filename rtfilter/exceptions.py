"""Errors raised by the filter engine.

Transforms are total over validated parameters, so the only failures a caller
sees at runtime are registration conflicts and sink delivery problems.
"""


class ConfigurationError (ValueError):

	"""
	An invalid parameter was supplied at construction or update time.
	"""


class DuplicateFilterName (ConfigurationError):

	"""
	A filter with the same name is already registered on the chain.
	"""


class SinkError (Exception):

	"""
	The output sink rejected or failed to deliver an event.
	"""
