from typing import Any, Dict, Optional
import json

try:
    import httpx
except ModuleNotFoundError as exc:  # pragma: no cover - user environment dependency
    raise ModuleNotFoundError(
        "Missing dependency 'httpx'. Install with: pip install httpx"
    ) from exc

from endpoints import BASE_URL
from .models import Credential
from .utils import append_log_line, get_logger, redact_payload, redacted_headers, truncate_text


class PinataError(RuntimeError):
    """A Pinata call failed; ``detail`` holds the response body text when there was one."""

    def __init__(self, message: str, status_code: Optional[int] = None, detail: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail


class PinataClient:
    def __init__(
        self,
        credential: Credential,
        base_url: str = BASE_URL,
        timeout: float = 60.0,
        http_log_path: Optional[str] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = base_url.rstrip('/')
        self.credential = credential
        self.timeout = timeout
        self.logger = get_logger('dvault')
        self._client = httpx.Client(base_url=self.base_url, timeout=self.timeout, transport=transport)
        self.http_log_path = http_log_path

    def _default_headers(self) -> Dict[str, str]:
        return {
            "pinata_api_key": self.credential.api_key,
            "pinata_secret_api_key": self.credential.api_secret,
        }

    def _log(self, line: str) -> None:
        if not self.http_log_path:
            return
        try:
            append_log_line(self.http_log_path, line)
        except OSError as exc:
            self.logger.warning("HTTP log %s not writable: %s", self.http_log_path, exc)

    def request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        url = path if path.startswith('http') else f"{self.base_url}{path}"
        headers = dict(self._default_headers())
        headers.update(kwargs.get('headers', {}) or {})
        kwargs['headers'] = headers
        redacted = redacted_headers(headers)
        payload = None
        if "json" in kwargs:
            payload = redact_payload(kwargs.get("json"))
        elif "data" in kwargs:
            payload = redact_payload(kwargs.get("data"))
        self.logger.debug('HTTP %s %s headers=%s', method, url, redacted)
        if payload is not None:
            self._log(f"{method} {url} headers={redacted} payload={payload}")
        else:
            self._log(f"{method} {url} headers={redacted}")
        try:
            resp = self._client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            self._log(f"{method} {url} error={exc!r}")
            raise PinataError(f"Request to Pinata failed: {exc}") from exc
        response_body: Any = None
        try:
            response_body = redact_payload(resp.json())
        except ValueError:
            response_body = truncate_text(resp.text or "")
        self._log(
            f"{method} {url} status={resp.status_code} response={json.dumps(response_body, ensure_ascii=True)}",
        )
        if not resp.is_success:
            detail = resp.text or ""
            raise PinataError(
                f"{resp.status_code} - {truncate_text(detail, 500)}",
                status_code=resp.status_code,
                detail=detail,
            )
        return resp

    def close(self) -> None:
        self._client.close()
