import argparse
import json
import sys
from dataclasses import asdict
from typing import List, Optional

from .client import PinataError
from .config import load_settings
from .models import Credential, Notification
from .registry import FileRegistry
from .utils import format_bytes, format_timestamp

COMMANDS = ('auth', 'ls', 'upload', 'rm', 'link')


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog='dvault', description='Pin files to IPFS through Pinata.')
    p.add_argument('--credentials', help='Path to the credentials file')
    sub = p.add_subparsers(dest='cmd', required=True)

    auth = sub.add_parser('auth')
    auth_sub = auth.add_subparsers(dest='auth_cmd', required=True)
    auth_save = auth_sub.add_parser('save')
    auth_save.add_argument('--key', required=True)
    auth_save.add_argument('--secret', required=True)
    auth_sub.add_parser('show')
    auth_sub.add_parser('check')

    ls = sub.add_parser('ls')
    ls.add_argument('--json', action='store_true')

    upload = sub.add_parser('upload')
    upload.add_argument('path')

    rm = sub.add_parser('rm')
    rm.add_argument('file_id')

    link = sub.add_parser('link')
    link.add_argument('file_id')

    return p


def _mask(value: str) -> str:
    if not value:
        return '(not set)'
    if len(value) <= 4:
        return '*' * len(value)
    return f"{value[:4]}{'*' * (len(value) - 4)}"


class _Reporter:
    """Prints registry notifications; remembers whether any was a failure."""

    def __init__(self) -> None:
        self.failed = False

    def __call__(self, note: Notification) -> None:
        if note.kind in ('warning', 'error'):
            self.failed = True
            print(f"{note.kind.upper()}: {note.message}", file=sys.stderr)
        else:
            print(note.message)


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = load_settings()
    if args.credentials:
        settings.credentials_path = args.credentials
    registry = FileRegistry(settings)
    reporter = _Reporter()
    registry.subscribe(on_notify=reporter)

    if args.cmd == 'auth':
        if args.auth_cmd == 'save':
            registry.save_credentials(Credential(args.key, args.secret))
            return 1 if reporter.failed else 0
        credential = registry.credential
        if args.auth_cmd == 'show':
            print(f"api key:    {_mask(credential.api_key)}")
            print(f"api secret: {_mask(credential.api_secret)}")
            print(f"usable:     {'yes' if credential.usable else 'no'}")
            return 0
        if args.auth_cmd == 'check':
            if not credential.usable:
                print('WARNING: Please provide both Pinata API Key and Secret Key!', file=sys.stderr)
                return 1
            try:
                message = registry.verify_credentials()
            except PinataError as exc:
                print(f"ERROR: {exc}", file=sys.stderr)
                return 1
            print(message or 'OK')
            return 0

    if not registry.credential.usable:
        print('WARNING: Please provide both Pinata API Key and Secret Key!', file=sys.stderr)
        return 1

    if args.cmd == 'ls':
        items = registry.refresh()
        if reporter.failed:
            return 1
        if args.json:
            print(json.dumps([asdict(item) for item in items], indent=2))
        else:
            for item in items:
                print(f"{item.id}\t{format_bytes(item.size_bytes)}\t{format_timestamp(item.uploaded_at)}\t{item.name}")
        return 0

    if args.cmd == 'upload':
        try:
            registry.select_path(args.path)
        except OSError as exc:
            print(f"ERROR: {exc}", file=sys.stderr)
            return 1
        ipfs_hash = registry.upload()
        if ipfs_hash is None:
            return 1
        record = registry.find(ipfs_hash)
        print(record.upload.url if record else ipfs_hash)
        return 0

    if args.cmd in ('rm', 'link'):
        registry.refresh()
        if reporter.failed:
            return 1
        record = registry.find(args.file_id)
        if record is None:
            print(f"ERROR: no pinned file with id {args.file_id}", file=sys.stderr)
            return 1
        if args.cmd == 'link':
            print(record.upload.url)
            return 0
        return 0 if registry.delete(record.id) else 1

    return 1


if __name__ == '__main__':
    raise SystemExit(main())
