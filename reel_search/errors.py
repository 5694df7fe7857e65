"""
Error taxonomy shared by the adapters, the gateway and the view layer.
Every error carries the Outcome the gateway reports for it and a message.
"""

from typing import Optional

from .models import Outcome


class ReelSearchError(Exception):
	"""Base class; subclasses pick an outcome and a default message."""
	outcome = Outcome.NOT_FOUND
	default_message = "Something went wrong."

	def __init__(self, message: Optional[str] = None):
		self.message = message or self.default_message
		super().__init__(self.message)


class ValidationError(ReelSearchError):
	"""Empty query, missing id or an unknown type filter."""
	outcome = Outcome.INVALID
	default_message = "Type a movie or series name to search."


class NotFound(ReelSearchError):
	"""The upstream reports no matches, or the record is absent."""
	outcome = Outcome.NOT_FOUND
	default_message = "Nothing found. Try another name."


class UpstreamError(ReelSearchError):
	"""The upstream answered with an error payload (bad key, too many results, ...)."""
	outcome = Outcome.NOT_FOUND
	default_message = "The movie API returned an error."


class UpstreamUnreachable(ReelSearchError):
	"""Transport failure, or a body that is not JSON."""
	outcome = Outcome.UPSTREAM_UNREACHABLE
	default_message = "Could not reach the movie API."


class ConfigurationError(ReelSearchError):
	"""Credentials missing or the upstream family is unknown."""
	outcome = Outcome.SERVER_MISCONFIGURED
	default_message = "Server: set the upstream API key when starting the server."
