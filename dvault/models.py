import mimetypes
import os
from dataclasses import dataclass
from typing import Optional

PROVIDER = "Pinata"

NOTIFY_KINDS = ("info", "success", "warning", "error")


@dataclass(frozen=True)
class Credential:
    api_key: str = ""
    api_secret: str = ""

    @property
    def usable(self) -> bool:
        # Partial credentials count as absent.
        return bool(self.api_key.strip()) and bool(self.api_secret.strip())

    def cleaned(self) -> "Credential":
        return Credential(self.api_key.strip(), self.api_secret.strip())


@dataclass
class PinDescriptor:
    hash: str
    url: str
    gateway: str
    provider: str = PROVIDER

    @classmethod
    def for_hash(cls, ipfs_hash: str, gateway_url: str) -> "PinDescriptor":
        link = f"{gateway_url.rstrip('/')}/ipfs/{ipfs_hash}"
        return cls(hash=ipfs_hash, url=link, gateway=link)


@dataclass
class FileRecord:
    id: str
    name: str
    size_bytes: int
    media_type: str
    uploaded_at: Optional[str]
    upload: PinDescriptor


@dataclass
class LocalFile:
    path: str
    name: str
    size_bytes: int
    media_type: str

    @classmethod
    def from_path(cls, path: str, name: Optional[str] = None) -> "LocalFile":
        filename = name or os.path.basename(path)
        media_type, _encoding = mimetypes.guess_type(filename)
        return cls(
            path=path,
            name=filename,
            size_bytes=os.path.getsize(path),
            media_type=media_type or "application/octet-stream",
        )


@dataclass
class Notification:
    kind: str
    title: str
    message: str

    def __post_init__(self) -> None:
        if self.kind not in NOTIFY_KINDS:
            raise ValueError(f"Unknown notification kind: {self.kind!r}")
