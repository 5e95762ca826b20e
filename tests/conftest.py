import hashlib
import json
from typing import Callable, Dict, List, Optional, Tuple

import httpx
import pytest

from dvault.client import PinataClient
from dvault.config import Settings
from dvault.models import Credential, LocalFile
from dvault.registry import FileRegistry

API_KEY = "test-key"
API_SECRET = "test-secret"


def parse_multipart(request: httpx.Request) -> Dict[str, Tuple[Optional[str], bytes]]:
    content_type = request.headers["content-type"]
    boundary = content_type.split("boundary=", 1)[1].encode("ascii")
    body = request.read()
    parts: Dict[str, Tuple[Optional[str], bytes]] = {}
    for chunk in body.split(b"--" + boundary)[1:]:
        if chunk.startswith(b"--"):
            break
        if chunk.startswith(b"\r\n"):
            chunk = chunk[2:]
        if chunk.endswith(b"\r\n"):
            chunk = chunk[:-2]
        head, _, content = chunk.partition(b"\r\n\r\n")
        disposition = head.decode("utf-8").split("\r\n")[0]
        name = disposition.split('name="', 1)[1].split('"', 1)[0]
        filename = None
        if 'filename="' in disposition:
            filename = disposition.split('filename="', 1)[1].split('"', 1)[0]
        parts[name] = (filename, content)
    return parts


class FakePinata:
    """Just enough of the Pinata API to exercise the client, backed by a list of pin rows."""

    def __init__(self) -> None:
        self.rows: List[dict] = []
        self.calls: List[Tuple[str, str]] = []
        self.failures: Dict[str, Tuple[int, str]] = {}
        self.hooks: Dict[str, Callable[[], None]] = {}

    def add_row(self, ipfs_hash: str, name: Optional[str] = None, size=1024, media_type: Optional[str] = None) -> dict:
        metadata: dict = {"keyvalues": {"type": media_type} if media_type else None}
        if name is not None:
            metadata["name"] = name
        row = {
            "id": f"pin-{len(self.rows)}",
            "ipfs_pin_hash": ipfs_hash,
            "size": size,
            "date_pinned": "2026-10-18T09:30:00.000Z",
            "metadata": metadata,
        }
        self.rows.append(row)
        return row

    def count(self, method: str, path: str) -> int:
        return sum(1 for call in self.calls if call == (method, path))

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        self.calls.append((request.method, path))
        hook = self.hooks.pop(path, None)
        if hook is not None:
            hook()
        for prefix, (status, text) in self.failures.items():
            if path.startswith(prefix):
                return httpx.Response(status, text=text)
        if (
            request.headers.get("pinata_api_key") != API_KEY
            or request.headers.get("pinata_secret_api_key") != API_SECRET
        ):
            return httpx.Response(401, json={"error": {"reason": "INVALID_CREDENTIALS"}})

        if path == "/data/testAuthentication":
            return httpx.Response(200, json={"message": "Congratulations! You are communicating with the Pinata API!"})

        if path == "/data/pinList":
            limit = int(request.url.params.get("pageLimit", 10))
            offset = int(request.url.params.get("pageOffset", 0))
            return httpx.Response(200, json={"count": len(self.rows), "rows": self.rows[offset:offset + limit]})

        if path == "/pinning/pinFileToIPFS":
            parts = parse_multipart(request)
            filename, content = parts["file"]
            metadata = json.loads(parts["pinataMetadata"][1]) if "pinataMetadata" in parts else {}
            ipfs_hash = "Qm" + hashlib.sha256(content).hexdigest()[:44]
            self.rows.insert(0, {
                "id": f"pin-{len(self.rows)}",
                "ipfs_pin_hash": ipfs_hash,
                "size": len(content),
                "date_pinned": "2026-10-18T10:00:00.000Z",
                "metadata": {"name": metadata.get("name", filename), "keyvalues": metadata.get("keyvalues")},
            })
            return httpx.Response(200, json={"IpfsHash": ipfs_hash, "PinSize": len(content), "Timestamp": "2026-10-18T10:00:00.000Z"})

        if request.method == "DELETE" and path.startswith("/pinning/unpin/"):
            ipfs_hash = path.rsplit("/", 1)[1]
            before = len(self.rows)
            self.rows = [row for row in self.rows if row["ipfs_pin_hash"] != ipfs_hash]
            if len(self.rows) == before:
                return httpx.Response(404, json={"error": {"reason": "CURRENT_USER_HAS_NOT_PINNED_CID"}})
            return httpx.Response(200, text="OK")

        return httpx.Response(404, text="not found")


@pytest.fixture
def pinata() -> FakePinata:
    return FakePinata()


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        credentials_path=str(tmp_path / "dvault" / "credentials.json"),
        http_log_path=str(tmp_path / "http.log"),
        page_limit=2,
    )


@pytest.fixture
def make_client(settings, pinata):
    def factory(credential: Credential) -> PinataClient:
        return PinataClient(
            credential,
            base_url=settings.api_url,
            http_log_path=settings.http_log_path,
            transport=httpx.MockTransport(pinata.handler),
        )

    return factory


@pytest.fixture
def notes() -> list:
    return []


@pytest.fixture
def clipboard() -> list:
    return []


@pytest.fixture
def registry(settings, make_client, notes, clipboard) -> FileRegistry:
    reg = FileRegistry(settings, client_factory=make_client, clipboard=clipboard.append)
    reg.subscribe(on_notify=notes.append)
    return reg


@pytest.fixture
def signed_in(registry) -> FileRegistry:
    registry.credential = Credential(API_KEY, API_SECRET)
    return registry


@pytest.fixture
def make_file(tmp_path):
    def factory(name: str, size: int = 16) -> LocalFile:
        path = tmp_path / "files" / name
        path.parent.mkdir(parents=True, exist_ok=True)
        seed = name.encode("utf-8")
        path.write_bytes((seed * (size // len(seed) + 1))[:size])
        return LocalFile.from_path(str(path))

    return factory
