"""
Checks run on an incoming snapshot before anything touches the database.

A rejected payload is never partially applied: ``parse_snapshot_body`` either
returns the decoded snapshot or raises ``SnapshotRejected``.
"""

import json

from utils.constants import MAX_PAYLOAD_BYTES, MAX_DECKS, MAX_FOLDERS


class SnapshotRejected(Exception):
    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


def parse_snapshot_body(body: bytes, max_bytes: int = MAX_PAYLOAD_BYTES,
                        max_decks: int = MAX_DECKS, max_folders: int = MAX_FOLDERS) -> dict:
    if len(body) > max_bytes:
        raise SnapshotRejected(413, 'Payload too large.')

    try:
        data = json.loads(body)
    except ValueError:
        raise SnapshotRejected(400, 'Invalid data format.')

    if not isinstance(data, dict):
        raise SnapshotRejected(400, 'Invalid data format.')

    check_counts(data, max_decks=max_decks, max_folders=max_folders)
    return data


def check_counts(data: dict, max_decks: int = MAX_DECKS, max_folders: int = MAX_FOLDERS) -> None:
    decks = data.get('decks') or []
    folders = data.get('folders') or []

    if not isinstance(decks, list) or not isinstance(folders, list):
        raise SnapshotRejected(400, 'Invalid data format.')
    if len(decks) > max_decks:
        raise SnapshotRejected(400, f'Too many decks (max {max_decks}).')
    if len(folders) > max_folders:
        raise SnapshotRejected(400, f'Too many folders (max {max_folders}).')
