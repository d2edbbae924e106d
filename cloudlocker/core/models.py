# cloudlocker/core/models.py
from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict


@dataclass(frozen=True)
class User:
	id: int
	username: str
	email: str

	def to_dict(self) -> Dict[str, Any]:
		return asdict(self)

	@classmethod
	def from_dict(cls, d: Dict[str, Any]) -> "User":
		return cls(id=int(d["id"]), username=str(d["username"]), email=str(d["email"]))


@dataclass(frozen=True)
class Session:
	token: str
	user: User

	def to_dict(self) -> Dict[str, Any]:
		return {"token": self.token, "user": self.user.to_dict()}

	@classmethod
	def from_dict(cls, d: Dict[str, Any]) -> "Session":
		token = d["token"]
		if not isinstance(token, str) or not token:
			raise ValueError("session token missing")
		return cls(token=token, user=User.from_dict(d["user"]))


@dataclass(frozen=True)
class FileInfo:
	"""Server-side file metadata; wire names are camelCase."""
	id: int
	file_name: str
	file_type: str
	file_size: int
	upload_date: str

	@classmethod
	def from_api(cls, d: Dict[str, Any]) -> "FileInfo":
		return cls(
			id=int(d["id"]),
			file_name=str(d.get("fileName") or ""),
			file_type=str(d.get("fileType") or "application/octet-stream"),
			file_size=int(d.get("fileSize") or 0),
			upload_date=str(d.get("uploadDate") or ""),
		)
