"""
In-memory application state backed by the local cache.

The UI layer keeps a reference to one ``AppContext`` and hands the same
object to the sync coordinator; nothing here knows about rendering.
"""

import copy
import logging
import random
import string
import time
from datetime import datetime, timezone

from utils.constants import (
    DECKS_KEY, FOLDERS_KEY, MUTED_KEY, SETTINGS_KEY, STATS_KEY,
    DEFAULT_SETTINGS, DEFAULT_VISIBILITY, DECK_NAME_MAX, FOLDER_NAME_MAX,
)

_BASE36 = string.digits + string.ascii_lowercase


def _base36(number: int) -> str:
    if number == 0:
        return '0'
    digits = []
    while number:
        number, rem = divmod(number, 36)
        digits.append(_BASE36[rem])
    return ''.join(reversed(digits))


def generate_id(prefix: str) -> str:
    """Client-side id: ``<prefix>_<millis in base36>_<6 random chars>``."""
    suffix = ''.join(random.choice(_BASE36) for _ in range(6))
    return f"{prefix}_{_base36(int(time.time() * 1000))}_{suffix}"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _clean_name(name, limit: int) -> str:
    final = (name or '').strip()
    if not final:
        raise ValueError('Name must not be empty')
    if len(final) > limit:
        raise ValueError(f'Name must be at most {limit} characters')
    return final


class AppContext:
    def __init__(self, cache):
        self.cache = cache
        self.decks: list[dict] = []
        self.folders: list[dict] = []
        self.settings: dict = dict(DEFAULT_SETTINGS)
        self.stats: dict = {'studySessions': []}
        self.muted = False

    # ── Persistence ───────────────────────────────────────────

    def load(self) -> 'AppContext':
        self.decks = self.cache.load(DECKS_KEY, [])
        self.folders = self.cache.load(FOLDERS_KEY, [])
        self.settings = {**DEFAULT_SETTINGS, **self.cache.load(SETTINGS_KEY, {})}
        stats = self.cache.load(STATS_KEY, {})
        sessions = stats.get('studySessions')
        self.stats = {'studySessions': sessions if isinstance(sessions, list) else []}
        self.muted = self.cache.load(MUTED_KEY, False)
        return self

    def save_decks(self) -> bool:
        return self.cache.save(DECKS_KEY, self.decks)

    def save_folders(self) -> bool:
        return self.cache.save(FOLDERS_KEY, self.folders)

    def save_settings(self) -> bool:
        return self.cache.save(SETTINGS_KEY, self.settings)

    def save_stats(self) -> bool:
        return self.cache.save(STATS_KEY, self.stats)

    def save_all(self) -> bool:
        results = [self.save_folders(), self.save_decks(), self.save_settings(), self.save_stats()]
        return all(results)

    def has_data(self) -> bool:
        return bool(self.decks) or bool(self.folders)

    def snapshot(self) -> dict:
        return copy.deepcopy({
            'folders': self.folders,
            'decks': self.decks,
            'settings': self.settings,
            'stats': self.stats,
        })

    def replace_from_snapshot(self, snapshot: dict) -> bool:
        """Overwrite local state with ``snapshot`` (no merge) and persist it.

        All-or-nothing: the new documents are built before anything is
        touched, and if any key fails to save the previous state is put back
        in memory and rewritten to the keys already saved.
        """
        data = copy.deepcopy(snapshot)
        staged = {
            'folders': data.get('folders') or [],
            'decks': data.get('decks') or [],
            'settings': {**DEFAULT_SETTINGS, **(data.get('settings') or {})},
            'stats': {'studySessions': (data.get('stats') or {}).get('studySessions') or []},
        }
        previous = {name: getattr(self, name) for name in staged}

        for name, value in staged.items():
            setattr(self, name, value)
        savers = {'folders': self.save_folders, 'decks': self.save_decks,
                  'settings': self.save_settings, 'stats': self.save_stats}
        saved = []
        for name, save in savers.items():
            if not save():
                logging.warning(f"Could not save {name}; restoring the previous local data")
                for prev_name, value in previous.items():
                    setattr(self, prev_name, value)
                for prev_name in saved:
                    savers[prev_name]()
                return False
            saved.append(name)
        return True

    # ── Folders ───────────────────────────────────────────────

    def get_folder(self, folder_id):
        if folder_id is None:
            return None
        return next((f for f in self.folders if f.get('id') == folder_id), None)

    def find_folder_by_name(self, name: str, exclude_id=None):
        wanted = name.strip().lower()
        return next(
            (f for f in self.folders
             if f.get('id') != exclude_id and (f.get('name') or '').lower() == wanted),
            None
        )

    def add_folder(self, name, parent_folder_id=None):
        """Create a folder; a case-insensitive name clash returns the existing one."""
        final = _clean_name(name, FOLDER_NAME_MAX)
        existing = self.find_folder_by_name(final)
        if existing:
            logging.info(f'A folder named "{final}" already exists')
            return existing
        if parent_folder_id is not None and self.get_folder(parent_folder_id) is None:
            return None

        folder = {
            'id': generate_id('f'),
            'name': final,
            'parentFolderId': parent_folder_id,
            'created': _now(),
        }
        self.folders.append(folder)
        self.save_folders()
        return folder

    def rename_folder(self, folder_id, name) -> bool:
        folder = self.get_folder(folder_id)
        if folder is None:
            return False
        final = _clean_name(name, FOLDER_NAME_MAX)
        if self.find_folder_by_name(final, exclude_id=folder_id):
            logging.info(f'A folder named "{final}" already exists')
            return False
        folder['name'] = final
        return self.save_folders()

    def delete_folder(self, folder_id) -> bool:
        """Remove a folder, moving its decks and subfolders up to its parent."""
        folder = self.get_folder(folder_id)
        if folder is None:
            return False
        new_parent = folder.get('parentFolderId')

        for deck in self.decks:
            if deck.get('folderId') == folder_id:
                deck['folderId'] = new_parent
        for child in self.folders:
            if child.get('parentFolderId') == folder_id:
                child['parentFolderId'] = new_parent

        self.folders = [f for f in self.folders if f.get('id') != folder_id]
        saved_folders = self.save_folders()
        saved_decks = self.save_decks()
        return saved_folders and saved_decks

    def folder_path(self, folder_id) -> list[str]:
        """Names from the root down to ``folder_id``; stops on cycles."""
        names = []
        seen = set()
        folder = self.get_folder(folder_id)
        while folder is not None and folder.get('id') not in seen:
            seen.add(folder.get('id'))
            names.append(folder.get('name'))
            folder = self.get_folder(folder.get('parentFolderId'))
        return list(reversed(names))

    # ── Decks & cards ─────────────────────────────────────────

    def get_deck(self, deck_id):
        return next((d for d in self.decks if d.get('id') == deck_id), None)

    def add_deck(self, name, category='', folder_id=None, cards=None):
        final = _clean_name(name, DECK_NAME_MAX)
        if folder_id is not None and self.get_folder(folder_id) is None:
            return None
        deck = {
            'id': generate_id('d'),
            'name': final,
            'category': (category or '').strip(),
            'visibility': DEFAULT_VISIBILITY,
            'folderId': folder_id,
            'cards': [dict(c) for c in (cards or [])],
            'created': _now(),
        }
        self.decks.append(deck)
        self.save_decks()
        return deck

    def move_deck(self, deck_id, folder_id) -> bool:
        deck = self.get_deck(deck_id)
        if deck is None:
            return False
        if folder_id is not None and self.get_folder(folder_id) is None:
            return False
        deck['folderId'] = folder_id
        return self.save_decks()

    def delete_deck(self, deck_id) -> bool:
        if self.get_deck(deck_id) is None:
            return False
        self.decks = [d for d in self.decks if d.get('id') != deck_id]
        return self.save_decks()

    def add_card(self, deck_id, front, back, media_url=None):
        deck = self.get_deck(deck_id)
        if deck is None:
            return None
        card = {'front': front, 'back': back}
        if media_url:
            card['mediaUrl'] = media_url
        deck.setdefault('cards', []).append(card)
        self.save_decks()
        return card

    # ── Settings & stats ──────────────────────────────────────

    def update_settings(self, **values) -> bool:
        unknown = set(values) - set(DEFAULT_SETTINGS)
        if unknown:
            raise ValueError(f"Unknown settings: {', '.join(sorted(unknown))}")
        self.settings.update(values)
        return self.save_settings()

    def set_muted(self, muted: bool) -> bool:
        self.muted = bool(muted)
        return self.cache.save(MUTED_KEY, self.muted)

    def record_study_session(self, deck_name: str, cards_studied: int):
        if not self.settings.get('statsEnabled', True):
            return None
        session = {'timestamp': _now(), 'deckName': deck_name, 'cardsStudied': cards_studied}
        self.stats['studySessions'].append(session)
        self.save_stats()
        return session
