from typing import Any, Dict, List
import json

import httpx

from endpoints import AUTH, GATEWAY_URL, PINS
from .client import PinataClient, PinataError
from .models import FileRecord, LocalFile, PinDescriptor
from .utils import truncate_text


def _json_or_raise(resp: httpx.Response) -> Dict[str, Any]:
    try:
        payload = resp.json()
    except ValueError as exc:
        raise PinataError(f"Non-JSON response: {resp.text[:200]}", resp.status_code, resp.text) from exc
    if not isinstance(payload, dict):
        raise PinataError(f"Unexpected response: {payload!r}", resp.status_code, resp.text)
    return payload


def _to_int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def record_from_row(row: Dict[str, Any], position: int, gateway_url: str = GATEWAY_URL) -> FileRecord:
    """Map one ``pinList`` row to a FileRecord; ``position`` is 1-based."""
    ipfs_hash = str(row.get("ipfs_pin_hash") or "")
    metadata = row.get("metadata")
    if not isinstance(metadata, dict):
        metadata = {}
    keyvalues = metadata.get("keyvalues")
    if not isinstance(keyvalues, dict):
        keyvalues = {}
    return FileRecord(
        id=ipfs_hash,
        name=metadata.get("name") or f"File {position}",
        size_bytes=_to_int(row.get("size")),
        media_type=keyvalues.get("type") or "unknown",
        uploaded_at=row.get("date_pinned"),
        upload=PinDescriptor.for_hash(ipfs_hash, gateway_url),
    )


def check_authentication(client: PinataClient) -> str:
    resp = client.request(AUTH["test_authentication"]["method"], AUTH["test_authentication"]["path"])
    payload = _json_or_raise(resp)
    return str(payload.get("message", ""))


def list_pins(client: PinataClient, page_limit: int = 100, gateway_url: str = GATEWAY_URL) -> List[FileRecord]:
    rows: List[Dict[str, Any]] = []
    offset = 0
    while True:
        params = {"status": "pinned", "pageLimit": page_limit, "pageOffset": offset}
        resp = client.request(PINS["list"]["method"], PINS["list"]["path"], params=params)
        payload = _json_or_raise(resp)
        page = payload.get("rows") or []
        if not isinstance(page, list) or not all(isinstance(row, dict) for row in page):
            raise PinataError(f"Unexpected pinList rows: {truncate_text(repr(page), 200)}", resp.status_code, resp.text)
        rows.extend(page)
        offset += len(page)
        count = _to_int(payload.get("count"))
        if len(page) < page_limit or offset >= count:
            break
    return [record_from_row(row, index, gateway_url) for index, row in enumerate(rows, start=1)]


def pin_file(client: PinataClient, local: LocalFile) -> str:
    metadata = {"name": local.name, "keyvalues": {"type": local.media_type}}
    with open(local.path, 'rb') as f:
        files = {"file": (local.name, f, local.media_type)}
        data = {"pinataMetadata": json.dumps(metadata, separators=(",", ":"), ensure_ascii=True)}
        resp = client.request(PINS["pin_file"]["method"], PINS["pin_file"]["path"], files=files, data=data)
    payload = _json_or_raise(resp)
    ipfs_hash = payload.get("IpfsHash")
    if not ipfs_hash:
        raise PinataError("Missing IpfsHash from pinFileToIPFS", resp.status_code, resp.text)
    return str(ipfs_hash)


def unpin(client: PinataClient, ipfs_hash: str) -> None:
    path = PINS["unpin"]["path"].format(hash=ipfs_hash)
    client.request(PINS["unpin"]["method"], path)
