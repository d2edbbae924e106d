# cloudlocker/core/errors.py
from __future__ import annotations


class CloudLockerError(Exception):
	"""Base for every failure the client surfaces to the user."""

	def __init__(self, message: str = ""):
		super().__init__(message)
		self.message = message

	def __str__(self) -> str:
		return self.message or self.__class__.__name__


class ValidationFailure(CloudLockerError):
	"""Rejected client-side before any request was issued."""


class NetworkOrServerFailure(CloudLockerError):
	def __init__(self, message: str = "", *, status_code: int | None = None, detail: str = ""):
		super().__init__(message)
		self.status_code = status_code
		self.detail = detail


class AuthFailure(CloudLockerError):
	"""Login did not produce a session."""


class RegistrationFailure(CloudLockerError):
	pass


class CorruptSessionRecord(CloudLockerError):
	pass
