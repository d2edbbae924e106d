# cloudlocker/core/auth.py
from __future__ import annotations

import re
import threading
from typing import Callable, List, Optional

from .api_client import APIClient
from .errors import (
	AuthFailure, CorruptSessionRecord, NetworkOrServerFailure,
	RegistrationFailure, ValidationFailure,
)
from .models import Session, User
from .session_store import SessionStore
from ..logutil import get_logger, redacts

log = get_logger("auth")

MIN_PASSWORD_LENGTH = 6
_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

Listener = Callable[["AuthSession"], None]


def validate_login_form(username: str, password: str) -> None:
	if not (username or "").strip() or not password:
		raise ValidationFailure("Please fill in all fields")


def validate_registration_form(username: str, email: str, password: str, confirm: str) -> None:
	if not (username or "").strip() or not (email or "").strip() or not password or not confirm:
		raise ValidationFailure("Please fill in all fields")
	if not _EMAIL_RE.match(email.strip()):
		raise ValidationFailure("Please enter a valid email address")
	if password != confirm:
		raise ValidationFailure("Passwords do not match")
	if len(password) < MIN_PASSWORD_LENGTH:
		raise ValidationFailure(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")


class AuthSession:
	"""
	Owns the authentication state of the running client.

	Built once at startup and handed to whatever needs it. Consumers read
	``user`` / ``is_authenticated`` / ``loading`` and subscribe for changes;
	only login(), logout() and rehydrate() change the state.
	"""

	def __init__(self, api: APIClient, store: SessionStore):
		self.api = api
		self.store = store
		self._user: Optional[User] = None
		self._loading = True
		self._listeners: List[Listener] = []
		self._lock = threading.RLock()

	# ---------- state ----------
	@property
	def user(self) -> Optional[User]:
		return self._user

	@property
	def is_authenticated(self) -> bool:
		return self._user is not None

	@property
	def loading(self) -> bool:
		return self._loading

	def subscribe(self, cb: Listener) -> None:
		if cb not in self._listeners:
			self._listeners.append(cb)

	def unsubscribe(self, cb: Listener) -> None:
		if cb in self._listeners:
			self._listeners.remove(cb)

	def _emit(self) -> None:
		for cb in list(self._listeners):
			try:
				cb(self)
			except Exception:
				log.exception("auth listener failed")

	# ---------- lifecycle ----------
	def rehydrate(self) -> Optional[User]:
		"""Install the persisted session, if any. Ends the loading phase."""
		with self._lock:
			session = None
			try:
				session = self.store.load()
			except CorruptSessionRecord:
				log.warning("stored session unreadable, clearing")
				self.store.clear()
			if session is None:
				session = self.store.migrate_legacy()
			self._user = session.user if session else None
			self._loading = False
		log.info("session rehydrated", extra={"authenticated": self.is_authenticated})
		self._emit()
		return self._user

	def login(self, username: str, password: str) -> User:
		try:
			data = self.api.login(username, password)
			user = User(id=int(data["id"]), username=str(data["username"]), email=str(data.get("email") or ""))
			session = Session(token=str(data["token"]), user=user)
		except NetworkOrServerFailure as e:
			log.info("login rejected", extra={"username": username, "status": e.status_code})
			if e.status_code is None or e.status_code >= 500:
				raise AuthFailure("Unable to reach the server. Please try again.") from e
			raise AuthFailure("Invalid username or password") from e
		except (KeyError, TypeError, ValueError) as e:
			log.warning("malformed login response", extra={"error": str(e)})
			raise AuthFailure("Invalid username or password") from e

		with self._lock:
			self.store.save(session)
			self._user = user
		log.info("logged in", extra={"username": user.username, "token": redacts(session.token)})
		self._emit()
		return user

	def register(self, username: str, email: str, password: str) -> None:
		try:
			self.api.register(username, email, password)
		except NetworkOrServerFailure as e:
			log.info("registration rejected", extra={"username": username, "status": e.status_code})
			raise RegistrationFailure("Registration failed. Please try again.") from e
		log.info("registered", extra={"username": username})

	def logout(self) -> None:
		with self._lock:
			self.store.clear()
			self._user = None
		log.info("logged out")
		self._emit()
