"""In-memory view of the account's pinned files, kept in sync with Pinata.

Every mutation (upload, delete, credential save) is followed by a full
re-fetch of the remote listing; nothing is ever inserted into ``files``
locally. Operations block, so front-ends run them off their UI thread and
listen for ``on_change`` / ``on_notify`` callbacks.
"""
import threading
from dataclasses import dataclass, field, replace
from typing import Callable, Dict, List, Optional, TypeVar

from .api import check_authentication, list_pins, pin_file, unpin
from .client import PinataClient, PinataError
from .config import Settings, load_settings
from .credential_store import load_credentials, save_credentials
from .models import Credential, FileRecord, LocalFile, Notification
from .utils import get_logger

T = TypeVar("T")

ClientFactory = Callable[[Credential], PinataClient]
ChangeCallback = Callable[[], None]
NotifyCallback = Callable[[Notification], None]


@dataclass
class RegistryState:
    files: List[FileRecord] = field(default_factory=list)
    selected_file: Optional[LocalFile] = None
    uploading: bool = False
    progress: int = 0
    deleting: Optional[str] = None
    listing: bool = False
    stale: bool = False


class FileRegistry:
    def __init__(
        self,
        settings: Optional[Settings] = None,
        client_factory: Optional[ClientFactory] = None,
        clipboard: Optional[Callable[[str], None]] = None,
    ) -> None:
        self.settings = settings or load_settings()
        self.logger = get_logger("dvault")
        self._client_factory = client_factory or self._default_client
        self._clipboard = clipboard
        self._state = RegistryState()
        self._state_lock = threading.RLock()
        self._upload_lock = threading.Lock()
        self._delete_lock = threading.Lock()
        self._refresh_lock = threading.Lock()
        self._refresh_pending = False
        self._change_listeners: List[ChangeCallback] = []
        self._notify_listeners: List[NotifyCallback] = []
        self.credential = load_credentials(self.settings.credentials_path)

    # -- observers -------------------------------------------------------

    def subscribe(
        self,
        on_change: Optional[ChangeCallback] = None,
        on_notify: Optional[NotifyCallback] = None,
    ) -> None:
        if on_change:
            self._change_listeners.append(on_change)
        if on_notify:
            self._notify_listeners.append(on_notify)

    def _changed(self) -> None:
        for listener in list(self._change_listeners):
            listener()

    def _notify(self, kind: str, title: str, message: str) -> None:
        note = Notification(kind=kind, title=title, message=message)
        self.logger.debug("Notify %s: %s - %s", kind, title, message)
        for listener in list(self._notify_listeners):
            listener(note)

    def _set(self, **changes) -> None:
        with self._state_lock:
            self._state = replace(self._state, **changes)
        self._changed()

    # -- read helpers ----------------------------------------------------

    def snapshot(self) -> RegistryState:
        with self._state_lock:
            return replace(self._state, files=list(self._state.files))

    @property
    def files(self) -> List[FileRecord]:
        with self._state_lock:
            return list(self._state.files)

    def find(self, identifier: str) -> Optional[FileRecord]:
        with self._state_lock:
            return next((item for item in self._state.files if item.id == identifier), None)

    # -- remote plumbing -------------------------------------------------

    def _default_client(self, credential: Credential) -> PinataClient:
        return PinataClient(
            credential,
            base_url=self.settings.api_url,
            timeout=self.settings.timeout,
            http_log_path=self.settings.http_log_path,
        )

    def _call(self, fn: Callable[[PinataClient], T]) -> T:
        client = self._client_factory(self.credential)
        try:
            return fn(client)
        finally:
            client.close()

    # -- credentials -----------------------------------------------------

    def reload_credentials(self) -> Credential:
        self.credential = load_credentials(self.settings.credentials_path)
        return self.credential

    def save_credentials(self, credential: Credential) -> None:
        credential = credential.cleaned()
        save_credentials(self.settings.credentials_path, credential)
        self.credential = credential
        self._notify("success", "Settings Saved", "API keys saved successfully!")
        self.refresh()

    def verify_credentials(self) -> str:
        """Ask Pinata whether the current keys are accepted; raises PinataError if not."""
        return self._call(check_authentication)

    # -- operations ------------------------------------------------------

    def select_file(self, file: Optional[LocalFile]) -> None:
        self._set(selected_file=file)

    def select_path(self, path: str) -> LocalFile:
        local = LocalFile.from_path(path)
        self.select_file(local)
        return local

    def refresh(self) -> List[FileRecord]:
        if not self.credential.usable:
            self._set(files=[], stale=False)
            return []

        with self._state_lock:
            self._refresh_pending = True
        while True:
            if not self._refresh_lock.acquire(blocking=False):
                # The running refresh picks up the pending flag and fetches again.
                self.logger.debug("Refresh already in flight; coalesced")
                return self.files
            try:
                self._set(listing=True)
                while True:
                    with self._state_lock:
                        if not self._refresh_pending:
                            break
                        self._refresh_pending = False
                    self._refresh_once()
            finally:
                self._refresh_lock.release()
                self._set(listing=False)
            with self._state_lock:
                if not self._refresh_pending:
                    break
        return self.files

    def _refresh_once(self) -> None:
        settings = self.settings
        try:
            records = self._call(
                lambda client: list_pins(client, page_limit=settings.page_limit, gateway_url=settings.gateway_url)
            )
        except PinataError as exc:
            self.logger.error("Error loading files from Pinata: %s", exc)
            if settings.clear_on_refresh_error:
                self._set(files=[], stale=False)
            else:
                self._set(stale=True)
            self._notify("error", "Refresh Failed", f"Failed to load files: {exc}")
            return
        self._set(files=_unique_by_id(records), stale=False)
        self.logger.info("Loaded %d pinned file(s)", len(records))

    def upload(self, file: Optional[LocalFile] = None) -> Optional[str]:
        local = file or self.snapshot().selected_file
        if local is None:
            self._notify("warning", "No File Selected", "Please select a file first!")
            return None
        if not self.credential.usable:
            self._notify("warning", "Missing API Keys", "Please provide both Pinata API Key and Secret Key!")
            return None
        if not self._upload_lock.acquire(blocking=False):
            self._notify("warning", "Upload In Progress", "Another upload is still running.")
            return None
        try:
            self._set(uploading=True, progress=0)
            # Fixed midpoint: the pin call reports no byte-level progress.
            self._set(progress=50)
            try:
                ipfs_hash = self._call(lambda client: pin_file(client, local))
            except (PinataError, OSError) as exc:
                self.logger.error("Upload of %s failed: %s", local.name, exc)
                self._notify("error", "Upload Failed", f"Upload failed: {exc}")
                return None
            self._set(progress=100, selected_file=None)
            self.logger.info("Pinned %s as %s", local.name, ipfs_hash)
            self._notify("success", "Upload Successful", f"{local.name} uploaded successfully to Pinata!")
            self.refresh()
            return ipfs_hash
        finally:
            self._set(uploading=False, progress=0)
            self._upload_lock.release()

    def delete(self, identifier: str) -> bool:
        record = self.find(identifier)
        if record is None:
            return False
        if not self.credential.usable:
            self._notify("warning", "Missing API Keys", "Please provide both Pinata API Key and Secret Key!")
            return False
        if not self._delete_lock.acquire(blocking=False):
            self._notify("warning", "Delete In Progress", "Another delete is still running.")
            return False
        try:
            self._set(deleting=identifier)
            try:
                self._call(lambda client: unpin(client, record.upload.hash))
            except PinataError as exc:
                self.logger.error("Unpin of %s failed: %s", record.upload.hash, exc)
                self._notify("error", "Delete Failed", f"Failed to delete file: {exc}")
                return False
            self._notify("success", "File Deleted", f"{record.name} was unpinned from Pinata.")
            self.refresh()
            return True
        finally:
            self._set(deleting=None)
            self._delete_lock.release()

    def copy_link(self, url: str) -> None:
        if self._clipboard is not None:
            self._clipboard(url)
        self._notify("info", "Link Copied", "Link copied to clipboard!")


def _unique_by_id(records: List[FileRecord]) -> List[FileRecord]:
    seen: Dict[str, FileRecord] = {}
    for record in records:
        seen.setdefault(record.id, record)
    return list(seen.values())
