# cloudlocker/core/file_kinds.py
from __future__ import annotations

import datetime
from enum import Enum
from typing import Tuple


class FileKind(str, Enum):
	IMAGE = "image"
	PDF = "pdf"
	VIDEO = "video"
	AUDIO = "audio"
	TEXT = "text"
	DOCUMENT = "document"


# Entries ending in "/" match as a prefix, the rest exactly.
PREVIEWABLE_TYPES = (
	"image/",
	"application/pdf",
	"video/mp4", "video/webm", "video/ogg",
	"audio/mpeg", "audio/mp3", "audio/wav", "audio/ogg",
)

KIND_LABELS = {
	FileKind.IMAGE: "Image",
	FileKind.PDF: "PDF",
	FileKind.VIDEO: "Video",
	FileKind.AUDIO: "Audio",
	FileKind.TEXT: "Text",
	FileKind.DOCUMENT: "Document",
}

# badge colors (light, dark)
KIND_COLORS = {
	FileKind.IMAGE: ("#7c3aed", "#a78bfa"),
	FileKind.PDF: ("#dc2626", "#f87171"),
	FileKind.VIDEO: ("#db2777", "#f472b6"),
	FileKind.AUDIO: ("#d97706", "#fbbf24"),
	FileKind.TEXT: ("#2563eb", "#60a5fa"),
	FileKind.DOCUMENT: ("#4b5563", "#9ca3af"),
}


def _norm(mime: str) -> str:
	return (mime or "").split(";", 1)[0].strip().lower()


def classify(mime: str) -> FileKind:
	m = _norm(mime)
	if m.startswith("image/"):
		return FileKind.IMAGE
	if m == "application/pdf":
		return FileKind.PDF
	if m.startswith("video/"):
		return FileKind.VIDEO
	if m.startswith("audio/"):
		return FileKind.AUDIO
	if m.startswith("text/") or m in ("application/json", "application/xml"):
		return FileKind.TEXT
	return FileKind.DOCUMENT


def is_previewable(mime: str) -> bool:
	m = _norm(mime)
	for t in PREVIEWABLE_TYPES:
		if (t.endswith("/") and m.startswith(t)) or m == t:
			return True
	return False


def split_name(name: str) -> Tuple[str, str]:
	"""'report.pdf' -> ('report', 'pdf'); no dot -> (name, '')."""
	name = name or ""
	if "." not in name:
		return name, ""
	base, ext = name.rsplit(".", 1)
	return base, ext


def join_name(base: str, ext: str) -> str:
	return f"{base}.{ext}" if ext else base


def badge_label(file_name: str, kind: FileKind) -> str:
	_, ext = split_name(file_name)
	return ext.upper()[:5] if ext else KIND_LABELS[kind].upper()


def format_size(n: int | float | None) -> str:
	"""1024-based: 0 -> '0 Bytes', 1536 -> '1.5 KB'. Two decimals, trailing zeros trimmed."""
	n = float(n or 0)
	if n <= 0:
		return "0 Bytes"
	units = ["Bytes", "KB", "MB", "GB", "TB"]
	i = 0
	while n >= 1024 and i < len(units) - 1:
		n /= 1024.0; i += 1
	return f"{round(n, 2):g} {units[i]}"


def format_date(value: str) -> str:
	if not value:
		return ""
	try:
		dt = datetime.datetime.fromisoformat(value.replace("Z", "+00:00"))
	except ValueError:
		return value
	if dt.tzinfo is not None:
		dt = dt.astimezone()
	return dt.strftime("%Y-%m-%d %H:%M")
