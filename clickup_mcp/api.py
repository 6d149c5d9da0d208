"""
HTTP request layer and security helpers for clickup-mcp.
"""

import hashlib
import json
import re
import sys
import time
import urllib.parse
import uuid

import httpx

from clickup_mcp import config
from clickup_mcp.exceptions import HTTPError, NotFoundError, RemoteFailure, SetupError

_RETRYABLE_HTTP_CODES = frozenset({429, 502, 503, 504})


# ---------------------------------------------------------------------------
# Security helpers
# ---------------------------------------------------------------------------


def _sanitize_error(body, max_len=500):
    """Truncate and clean error body for safe display."""
    if not body:
        return ""
    cleaned = re.sub(r"<[^>]+>", "", body)
    cleaned = re.sub(r"\s+", " ", cleaned).strip()
    if len(cleaned) > max_len:
        return cleaned[:max_len] + "... [truncated]"
    return cleaned


def _api_error_message(body):
    """Pull ClickUp's ``err``/``ECODE`` fields out of an error body if it is JSON."""
    try:
        parsed = json.loads(body) if body else None
    except json.JSONDecodeError:
        parsed = None
    if isinstance(parsed, dict) and parsed.get("err"):
        code = parsed.get("ECODE")
        return f"{parsed['err']} ({code})" if code else str(parsed["err"])
    return _sanitize_error(body)


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


def _sanitize_url_for_log(url):
    """Mask sensitive query params in URLs before logging."""
    parsed = urllib.parse.urlsplit(url)
    if not parsed.query:
        return url
    pairs = urllib.parse.parse_qsl(parsed.query, keep_blank_values=True)
    masked = []
    for key, value in pairs:
        if key.lower() in {"token", "api_key", "access_token"}:
            masked.append((key, "***"))
        else:
            masked.append((key, value))
    safe_query = urllib.parse.urlencode(masked, doseq=True)
    return urllib.parse.urlunsplit(
        (parsed.scheme, parsed.netloc, parsed.path, safe_query, parsed.fragment)
    )


def _log_http_event(**fields):
    """Emit structured HTTP logs to stderr when enabled."""
    if not config.HTTP_LOG_ENABLED:
        return
    print("[HTTP] " + json.dumps(fields, ensure_ascii=False, sort_keys=True), file=sys.stderr)


def _is_sampled_request(request_id):
    """Decide if a request should be logged based on sample rate."""
    rate = config.HTTP_LOG_SAMPLE_RATE
    if rate <= 0:
        return False
    if rate >= 1:
        return True
    if not request_id:
        return False
    digest = hashlib.sha256(request_id.encode("utf-8")).digest()
    bucket = int.from_bytes(digest[:4], "big") / 4294967295.0
    return bucket < rate


# ---------------------------------------------------------------------------
# Error shaping
# ---------------------------------------------------------------------------


def _error_envelope(message, status=None, request_id=None, retryable=None, detail=None):
    """Build a consistent agent-readable HTTP error message."""
    meta = []
    if status is not None:
        meta.append(f"status={status}")
    if request_id:
        meta.append(f"request_id={request_id}")
    if retryable is not None:
        meta.append(f"retryable={'yes' if retryable else 'no'}")
    suffix = f" ({', '.join(meta)})" if meta else ""
    body = f"[ERROR] {message}{suffix}"
    if detail:
        body += f"\n{detail}"
    return body


def _expect_object_response(result, operation):
    """Ensure API helpers only return JSON objects (dict)."""
    if isinstance(result, dict):
        return result
    raise RemoteFailure(
        f"[ERROR] Unexpected {operation} response shape: "
        f"expected JSON object, got {type(result).__name__}."
    )


def _parse_retry_after(headers):
    """Return Retry-After seconds from response headers, or None."""
    if not headers:
        return None
    value = headers.get("Retry-After")
    if value is None:
        return None
    try:
        secs = int(str(value).strip())
    except ValueError:
        return None
    return max(0, secs)


# ---------------------------------------------------------------------------
# HTTP request layer
# ---------------------------------------------------------------------------


async def _http_request(http, url, method="GET", params=None, data=None, headers=None):
    """Make one HTTP request with standard error handling.

    Returns parsed JSON on success (``{}`` for empty bodies).
    Raises HTTPError for HTTP errors (caller maps specific codes) and
    RemoteFailure for timeouts, connection and parse errors. Never retries.
    """
    request_id = (headers or {}).get("X-Request-Id")
    safe_url = _sanitize_url_for_log(url)
    sampled = _is_sampled_request(request_id)
    timeout = max(1, config.HTTP_TIMEOUT_SECONDS)
    start = time.perf_counter()
    if sampled:
        _log_http_event(
            phase="request",
            method=method,
            url=safe_url,
            request_id=request_id,
            timeout_seconds=timeout,
        )
    try:
        resp = await http.request(
            method, url, params=params, json=data, headers=headers or {}, timeout=timeout
        )
    except httpx.TimeoutException as e:
        if sampled:
            _log_http_event(phase="error", method=method, url=safe_url, error="timeout")
        raise RemoteFailure(
            _error_envelope(
                f"Request timed out after {timeout} seconds. Is the ClickUp API reachable?",
                request_id=request_id,
                retryable=True,
            ),
            retryable=True,
        ) from e
    except httpx.TransportError as e:
        if sampled:
            _log_http_event(
                phase="error", method=method, url=safe_url, error=f"transport_error: {e}"
            )
        raise RemoteFailure(
            _error_envelope(f"Connection failed: {e}", request_id=request_id, retryable=True),
            retryable=True,
        ) from e

    if sampled:
        _log_http_event(
            phase="response",
            method=method,
            url=safe_url,
            status=resp.status_code,
            bytes=len(resp.content),
            latency_ms=round((time.perf_counter() - start) * 1000, 2),
            request_id=request_id,
        )
    if resp.status_code >= 400:
        raise HTTPError(resp.status_code, resp.reason_phrase, resp.text, resp.headers)
    if resp.status_code == 204 or not resp.content:
        return {}
    try:
        return resp.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        content_type = resp.headers.get("Content-Type", "")
        if content_type and "json" not in content_type.lower():
            raise RemoteFailure(
                f"[ERROR] Unexpected Content-Type from server ({content_type}). "
                "This may be a proxy or network issue."
            ) from None
        raise RemoteFailure(
            "[ERROR] Unexpected response from ClickUp API (not valid JSON)."
        ) from None


def _auth_headers():
    if not config.API_TOKEN:
        raise SetupError(
            "[SETUP_NEEDED] CLICKUP_API_TOKEN is not set. "
            "Create a personal token in ClickUp (Settings > Apps) and add it to .env."
        )
    return {
        "Authorization": config.API_TOKEN,
        "Content-Type": "application/json",
        "Accept": "application/json",
        "X-Request-Id": str(uuid.uuid4()),
    }


async def request(http, method, path, params=None, data=None, api_version="v2"):
    """Make an authenticated ClickUp request and map HTTP failures to tool errors."""
    base = config.BASE_URL_V3 if api_version == "v3" else config.BASE_URL
    try:
        return await _http_request(http, base + path, method, params, data, _auth_headers())
    except HTTPError as e:
        if e.code in (401, 403):
            raise SetupError(
                "[TOKEN_REJECTED] ClickUp rejected the API token "
                f"(HTTP {e.code}: {_api_error_message(e.body)}). "
                "Check CLICKUP_API_TOKEN and its workspace permissions."
            ) from e
        if e.code == 404:
            raise NotFoundError(
                f"[ERROR] Not found: {method} {path} ({_api_error_message(e.body)})"
            ) from e
        retryable = e.code in _RETRYABLE_HTTP_CODES
        if e.code == 429:
            wait = _parse_retry_after(e.headers)
            hint = f" Retry after {wait}s." if wait is not None else " Wait a moment and retry."
            raise RemoteFailure(
                "[ERROR] Rate limit reached (ClickUp allows ~100 req/min per token)." + hint,
                status=429,
                retryable=True,
            ) from e
        raise RemoteFailure(
            _error_envelope(
                f"HTTP {e.code}: {e.reason}",
                status=e.code,
                request_id=e.headers.get("X-Request-Id") if e.headers else None,
                retryable=retryable,
                detail=_api_error_message(e.body),
            ),
            status=e.code,
            retryable=retryable,
        ) from e


async def get_object(http, path, params=None, api_version="v2"):
    """GET that must return a JSON object."""
    result = await request(http, "GET", path, params=params, api_version=api_version)
    return _expect_object_response(result, f"GET {path}")
