"""Shared HTTP helpers used by the repository clients.

Encapsulates request/timeout error handling so the resolvers avoid
duplicating try/except blocks. Failures never raise: callers receive a
status code of 0 and decide for themselves what "no answer" means.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple

import requests

from gvc.constants import Constants
from gvc.common.logging_utils import extra_context, is_debug_enabled, safe_url, Timer

logger = logging.getLogger(__name__)


class ResponseTooLarge(Exception):
    """Raised internally when a body exceeds the configured ceiling."""


def _read_bounded(response: requests.Response, max_bytes: int) -> str:
    """Read a streamed body, refusing anything larger than ``max_bytes``."""
    declared = response.headers.get("Content-Length")
    if declared is not None:
        try:
            if int(declared) > max_bytes:
                raise ResponseTooLarge(f"declared size {declared} exceeds {max_bytes}")
        except ValueError:
            pass

    chunks = []
    received = 0
    for chunk in response.iter_content(chunk_size=65536):
        if not chunk:
            continue
        received += len(chunk)
        if received > max_bytes:
            raise ResponseTooLarge(f"body exceeds {max_bytes} bytes")
        chunks.append(chunk)

    body = b"".join(chunks)
    encoding = response.encoding or "utf-8"
    try:
        return body.decode(encoding, errors="replace")
    except LookupError:
        return body.decode("utf-8", errors="replace")


def robust_get(
    url: str,
    *,
    headers: Optional[Dict[str, str]] = None,
    timeout: Optional[float] = None,
    max_bytes: Optional[int] = None,
    **kwargs: Any
) -> Tuple[int, Dict[str, str], str]:
    """Perform a bounded GET request with timeout and retries.

    Args:
        url: Target URL.
        headers: Optional request headers; a User-Agent is always supplied.
        timeout: Per-attempt timeout in seconds (defaults to Constants.REQUEST_TIMEOUT).
        max_bytes: Body size ceiling (defaults to Constants.MAX_RESPONSE_BYTES).
        **kwargs: Passed through to requests.get.

    Returns:
        Tuple of (status_code, headers_dict, text). A status code of 0 means
        the request failed or the body was rejected; text then carries the reason.
    """
    safe_target = safe_url(url)
    timeout = Constants.REQUEST_TIMEOUT if timeout is None else timeout
    max_bytes = Constants.MAX_RESPONSE_BYTES if max_bytes is None else max_bytes
    request_headers = {"User-Agent": Constants.USER_AGENT}
    if headers:
        request_headers.update(headers)

    last_exception = None
    attempts = max(1, int(Constants.HTTP_RETRY_MAX))

    for attempt in range(attempts):
        with Timer() as t:
            try:
                if is_debug_enabled(logger):
                    logger.debug(
                        "HTTP request",
                        extra=extra_context(
                            event="http_request",
                            component="http_client",
                            action="GET",
                            target=safe_target,
                            attempt=attempt + 1
                        )
                    )

                response = requests.get(
                    url,
                    timeout=timeout,
                    headers=request_headers,
                    stream=True,
                    **kwargs
                )
                try:
                    text = _read_bounded(response, max_bytes)
                    status_code = response.status_code
                    response_headers = dict(response.headers)
                finally:
                    response.close()

                if is_debug_enabled(logger):
                    logger.debug(
                        "HTTP response ok",
                        extra=extra_context(
                            event="http_response",
                            component="http_client",
                            action="GET",
                            outcome="success",
                            status_code=status_code,
                            duration_ms=t.duration_ms(),
                            target=safe_target
                        )
                    )
                return status_code, response_headers, text

            except ResponseTooLarge as exc:
                # Oversized bodies are not retried.
                logger.debug(
                    "HTTP response rejected",
                    extra=extra_context(
                        event="http_exception",
                        component="http_client",
                        action="GET",
                        outcome="too_large",
                        target=safe_target
                    )
                )
                return 0, {}, f"Response rejected: {exc}"
            except requests.Timeout:
                last_exception = "timeout"
                if is_debug_enabled(logger):
                    logger.debug(
                        "HTTP timeout",
                        extra=extra_context(
                            event="http_exception",
                            component="http_client",
                            action="GET",
                            outcome="timeout",
                            attempt=attempt + 1,
                            target=safe_target
                        )
                    )
                continue
            except requests.RequestException as exc:
                last_exception = str(exc)
                if is_debug_enabled(logger):
                    logger.debug(
                        "HTTP request exception",
                        extra=extra_context(
                            event="http_exception",
                            component="http_client",
                            action="GET",
                            outcome="request_exception",
                            attempt=attempt + 1,
                            target=safe_target
                        )
                    )
                continue

    return 0, {}, f"Request failed after {attempts} attempts: {last_exception}"
