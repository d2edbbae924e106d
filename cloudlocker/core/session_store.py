# cloudlocker/core/session_store.py
from __future__ import annotations

import json
from typing import Optional

from .errors import CorruptSessionRecord
from .models import Session, User
from .storage import KeyValueStorage
from ..logutil import get_logger

log = get_logger("session_store")

SESSION_KEY = "session"
# written by older clients as two separate keys
LEGACY_TOKEN_KEY = "token"
LEGACY_USER_KEY = "user"


class SessionStore:
	"""
	Persists the token and cached user as one JSON record, so the pair is
	always written and cleared together.
	"""

	def __init__(self, storage: KeyValueStorage):
		self.storage = storage

	def load(self) -> Optional[Session]:
		raw = self.storage.get(SESSION_KEY)
		if raw is None:
			return None
		try:
			return Session.from_dict(json.loads(raw))
		except (ValueError, KeyError, TypeError) as e:
			raise CorruptSessionRecord(f"Stored session is unreadable: {e}") from e

	def save(self, session: Session) -> None:
		self.storage.set(SESSION_KEY, json.dumps(session.to_dict(), separators=(",", ":")))

	def clear(self) -> None:
		self.storage.remove(SESSION_KEY)
		self.storage.remove(LEGACY_TOKEN_KEY)
		self.storage.remove(LEGACY_USER_KEY)

	def token(self) -> Optional[str]:
		"""Read from storage on every call; never cached."""
		try:
			s = self.load()
		except CorruptSessionRecord:
			return None
		return s.token if s else None

	def migrate_legacy(self) -> Optional[Session]:
		"""
		Fold the old token/user key pair into the session record.
		A lone or unparseable legacy key is removed.
		"""
		token = self.storage.get(LEGACY_TOKEN_KEY)
		raw_user = self.storage.get(LEGACY_USER_KEY)
		if token is None and raw_user is None:
			return None

		session = None
		if token and raw_user:
			try:
				session = Session(token=token, user=User.from_dict(json.loads(raw_user)))
			except (ValueError, KeyError, TypeError):
				log.warning("discarding unparseable legacy user record")
		else:
			log.info("discarding incomplete legacy session", extra={
				"has_token": token is not None, "has_user": raw_user is not None})

		self.storage.remove(LEGACY_TOKEN_KEY)
		self.storage.remove(LEGACY_USER_KEY)
		if session:
			self.save(session)
		return session
