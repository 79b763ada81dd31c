"""
One sync attempt between the local context and the remote store.

    IDLE -> AUTHENTICATING -> PROBING -> DOWNLOADING | UPLOADING -> DONE
                                                                 -> FAILED

Remote data wins: if the remote snapshot has at least one folder or deck it
replaces the local data, otherwise the local snapshot is uploaded. Failures
are logged and end the attempt in FAILED; nothing is raised and the local
data stays usable. There are no retries.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from utils.constants import SyncState


@dataclass
class SyncResult:
    state: SyncState
    direction: Optional[SyncState] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.state == SyncState.DONE


def remote_has_data(snapshot: dict) -> bool:
    return bool(snapshot.get('folders')) or bool(snapshot.get('decks'))


class SyncCoordinator:
    def __init__(self, context, client):
        self.context = context
        self.client = client
        self.state = SyncState.IDLE
        self.direction: Optional[SyncState] = None

    def _move(self, state: SyncState) -> None:
        logging.debug(f"Sync state {self.state.name} -> {state.name}")
        self.state = state

    def _fail(self, step: str) -> SyncResult:
        error = getattr(self.client, 'last_error', None) or f'{step} failed'
        logging.warning(f"Sync failed while {step}: {error}. Continuing with local data.")
        self._move(SyncState.FAILED)
        return SyncResult(SyncState.FAILED, self.direction, error)

    def run(self) -> SyncResult:
        self.direction = None
        self._move(SyncState.AUTHENTICATING)
        if self.client.ensure_user() is None:
            return self._fail('authenticating')

        self._move(SyncState.PROBING)
        remote = self.client.fetch_snapshot()
        if remote is None:
            return self._fail('probing')

        if remote_has_data(remote):
            self.direction = SyncState.DOWNLOADING
            self._move(SyncState.DOWNLOADING)
            try:
                replaced = self.context.replace_from_snapshot(remote)
            except Exception as e:
                logging.exception(f"Could not apply the remote snapshot: {e}")
                replaced = False
            if not replaced:
                return self._fail('writing the local cache')
            logging.info(f"Downloaded {len(remote.get('decks') or [])} decks, "
                         f"{len(remote.get('folders') or [])} folders from the cloud")
        else:
            self.direction = SyncState.UPLOADING
            self._move(SyncState.UPLOADING)
            snapshot = self.context.snapshot()
            if not self.client.push_snapshot(snapshot):
                return self._fail('uploading')
            logging.info(f"Uploaded {len(snapshot['decks'])} decks, "
                         f"{len(snapshot['folders'])} folders to the cloud")

        self._move(SyncState.DONE)
        return SyncResult(SyncState.DONE, self.direction)
