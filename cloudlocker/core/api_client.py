# cloudlocker/core/api_client.py
from __future__ import annotations

import os
import re
import mimetypes
from typing import Any, Callable, Dict, List, Optional

import requests

from .errors import NetworkOrServerFailure
from .models import FileInfo
from .. import config
from ..logutil import get_logger

log = get_logger("api")

TokenProvider = Callable[[], Optional[str]]


def normalize_base_url(s: str) -> str:
    s = (s or "").strip()
    if not s:
        return ""
    if not re.match(r"^https?://", s, re.I):
        s = "http://" + s
    return s.rstrip("/")


def _error_detail(r: requests.Response) -> str:
    try:
        body = r.json()
    except ValueError:
        return (r.text or "").strip()
    if isinstance(body, dict):
        for key in ("message", "detail", "error"):
            if body.get(key):
                return str(body[key])
    return str(body)


class APIClient:
    """
    Thin wrapper over the storage backend's REST API.

    The bearer token is looked up through ``token_provider`` right before each
    request, so a login or logout elsewhere takes effect on the next call.
    No retries, no caching: a failed call raises NetworkOrServerFailure and the
    caller decides what to show.
    """

    def __init__(self, base_url: str = config.API_URL, token_provider: TokenProvider | None = None,
                 timeout: float | None = config.HTTP_TIMEOUT):
        self.base_url = normalize_base_url(base_url)
        self.token_provider = token_provider or (lambda: None)
        self.timeout = timeout

    def _headers(self) -> Dict[str, str]:
        token = self.token_provider()
        return {"Authorization": f"Bearer {token}"} if token else {}

    def _request(self, method: str, path: str, **kw) -> requests.Response:
        url = f"{self.base_url}{path}"
        headers = self._headers()
        headers.update(kw.pop("headers", {}) or {})
        try:
            r = requests.request(method, url, headers=headers, timeout=self.timeout, **kw)
        except requests.RequestException as e:
            log.warning("request failed", extra={"method": method, "path": path, "error": str(e)})
            raise NetworkOrServerFailure(f"Could not reach server: {e}") from e
        if not r.ok:
            detail = _error_detail(r)
            log.info("request rejected", extra={"method": method, "path": path, "status": r.status_code})
            raise NetworkOrServerFailure(
                detail or f"Server returned {r.status_code}",
                status_code=r.status_code,
                detail=detail,
            )
        log.debug("request ok", extra={"method": method, "path": path, "status": r.status_code})
        return r

    def _json(self, r: requests.Response) -> Any:
        if not r.content:
            return None
        try:
            return r.json()
        except ValueError:
            return r.text

    # ---------- auth ----------
    def login(self, username: str, password: str) -> Dict[str, Any]:
        r = self._request("POST", "/auth/login", json={"username": username, "password": password})
        data = self._json(r)
        if not isinstance(data, dict) or not data.get("token"):
            raise NetworkOrServerFailure("Login response did not contain a token", status_code=r.status_code)
        return data

    def register(self, username: str, email: str, password: str) -> Any:
        r = self._request("POST", "/auth/register",
                          json={"username": username, "email": email, "password": password})
        return self._json(r)

    # ---------- files ----------
    def list_files(self) -> List[FileInfo]:
        r = self._request("GET", "/files")
        data = self._json(r) or []
        return [FileInfo.from_api(d) for d in data]

    def upload_file(self, local_path: str) -> FileInfo:
        name = os.path.basename(local_path)
        ctype = mimetypes.guess_type(name)[0] or "application/octet-stream"
        with open(local_path, "rb") as fp:
            files = {"file": (name, fp, ctype)}
            r = self._request("POST", "/files/upload", files=files)
        return FileInfo.from_api(self._json(r))

    def download_file(self, file_id: int) -> bytes:
        return self._request("GET", f"/files/download/{file_id}").content

    def view_file(self, file_id: int) -> bytes:
        return self._request("GET", f"/files/view/{file_id}").content

    def delete_file(self, file_id: int) -> Any:
        return self._json(self._request("DELETE", f"/files/{file_id}"))

    def rename_file(self, file_id: int, new_name: str) -> FileInfo:
        r = self._request("PUT", f"/files/{file_id}/rename", json={"newName": new_name})
        return FileInfo.from_api(self._json(r))

    def batch_download(self, file_ids: List[int]) -> bytes:
        r = self._request("POST", "/files/batch-download", json={"fileIds": [int(i) for i in file_ids]})
        return r.content
