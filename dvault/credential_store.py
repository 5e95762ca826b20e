import json
import os
from pathlib import Path

from .models import Credential

KEY_FIELD = "pinata_api_key"
SECRET_FIELD = "pinata_secret_api_key"


def load_credentials(path: str) -> Credential:
    store_path = Path(path)
    if not store_path.exists():
        return Credential()
    data = json.loads(store_path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError("Credentials file must be a JSON object")
    return Credential(
        api_key=str(data.get(KEY_FIELD) or ""),
        api_secret=str(data.get(SECRET_FIELD) or ""),
    ).cleaned()


def save_credentials(path: str, credential: Credential) -> None:
    # Plaintext on disk; only the file mode protects it.
    store_path = Path(path)
    store_path.parent.mkdir(parents=True, exist_ok=True)
    credential = credential.cleaned()
    payload = {KEY_FIELD: credential.api_key, SECRET_FIELD: credential.api_secret}
    store_path.write_text(json.dumps(payload, indent=2, ensure_ascii=True) + "\n", encoding="utf-8")
    os.chmod(store_path, 0o600)
