"""HTTP wrapper utilities for the recruiting backend API."""

from typing import Optional

import requests

from hiring_board.config import get_settings


def _error_message(resp: requests.Response) -> str:
    """Best-effort human readable message from an error response."""
    try:
        body = resp.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        for key in ("error", "message"):
            if isinstance(body.get(key), str) and body[key]:
                return body[key]
    return f"Server returned {resp.status_code}"


def _make_request(method: str, path: str, timeout: Optional[int], error_code: Optional[str], **kwargs) -> dict:
    """Generic request with error handling. Never raises, errors come back as dicts."""
    settings = get_settings()
    headers = {"Content-Type": "application/json", **kwargs.pop("headers", {})}
    if settings.api_token:
        headers["Authorization"] = f"Bearer {settings.api_token}"
    if timeout is None:
        timeout = settings.request_timeout

    try:
        resp = getattr(requests, method)(f"{settings.api_url}{path}", timeout=timeout, headers=headers, **kwargs)
        resp.raise_for_status()
        if not resp.content:
            return {}
        data = resp.json()
        # Wrap bare lists so callers can always .get()
        return data if isinstance(data, dict) else {"data": data}
    except requests.exceptions.HTTPError:
        err = {"status": "error", "error": _error_message(resp), "http_status": resp.status_code}
        if error_code:
            err["code"] = error_code
        return err
    except requests.exceptions.JSONDecodeError:
        body = resp.text[:200] if resp.text else "(empty)"
        err = {"status": "error", "error": f"Invalid response ({resp.status_code}): {body}"}
        if error_code:
            err["code"] = error_code
        return err
    except requests.RequestException as e:
        err = {"status": "error", "error": str(e) or e.__class__.__name__}
        if error_code:
            err["code"] = error_code
        return err


def get(path: str, timeout: Optional[int] = None, error_code: Optional[str] = None, **kwargs) -> dict:
    return _make_request("get", path, timeout, error_code, **kwargs)


def post(path: str, timeout: Optional[int] = None, error_code: Optional[str] = None, **kwargs) -> dict:
    return _make_request("post", path, timeout, error_code, **kwargs)


def put(path: str, timeout: Optional[int] = None, error_code: Optional[str] = None, **kwargs) -> dict:
    return _make_request("put", path, timeout, error_code, **kwargs)
