from __future__ import annotations
from typing import Optional


class CopilotError(Exception):
	"""Base class for copilot failures; ``message`` is safe to show to users."""

	status_code = 500

	def __init__(self, message: str) -> None:
		super().__init__(message)
		self.message = message


class ConfigurationError(CopilotError):
	"""A required setting (the upstream credential) is missing."""


class UpstreamError(CopilotError):
	"""The generation endpoint failed, timed out, or could not be reached."""

	def __init__(self, message: str, status_code: Optional[int] = None) -> None:
		super().__init__(message)
		self.status_code = status_code or 502


class ValidationError(CopilotError):
	"""Malformed request to the HTTP surface."""

	def __init__(self, message: str, status_code: int = 400) -> None:
		super().__init__(message)
		self.status_code = status_code


class ParseError(CopilotError):
	# Internal only: no known response shape matched
	pass
