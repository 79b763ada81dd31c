import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone

from database.schema import (
    user_schema, folder_schema, deck_schema, card_schema,
    settings_schema, study_session_schema, indexes,
)
from config import DB_PATH
from utils.constants import DEFAULT_SETTINGS, DEFAULT_VISIBILITY
from utils.folder_tree import sort_folders_for_insert
from utils.id_remap import IdRemapper


def _now():
    return datetime.now(timezone.utc).isoformat()


def _str_id(value):
    return str(value) if value is not None else None


# USER COMMANDS ============================================

def find_or_create_user(firebase_uid, email=None):
    """Upsert the user keyed by identity subject and make sure a settings row exists."""
    with get_db() as conn:
        cursor = conn.cursor()
        cursor.execute(
            """INSERT INTO users (firebase_uid, email) VALUES (?, ?)
               ON CONFLICT (firebase_uid) DO UPDATE SET
                   email = excluded.email,
                   updated_at = CURRENT_TIMESTAMP
            """,
            (firebase_uid, email)
        )
        cursor.execute(
            'SELECT id, firebase_uid, email, created_at FROM users WHERE firebase_uid = ?',
            (firebase_uid,)
        )
        user = dict(cursor.fetchone())
        cursor.execute('INSERT OR IGNORE INTO user_settings (user_id) VALUES (?)', (user['id'],))
        logging.info(f"Ensured user {user['id']} for uid {firebase_uid}")
        return user


def get_user_id(firebase_uid):
    with get_db() as conn:
        cursor = conn.cursor()
        cursor.execute('SELECT id FROM users WHERE firebase_uid = ?', (firebase_uid,))
        row = cursor.fetchone()
        if row:
            return row['id']
        return None


# SNAPSHOT: LOAD =============================================

def load_snapshot(user_id):
    """Assemble everything stored for ``user_id`` into the sync snapshot shape.

    Identifiers are returned as strings.
    """
    with get_db() as conn:
        cursor = conn.cursor()

        cursor.execute(
            """SELECT id, name, parent_folder_id, created_at
               FROM folders WHERE user_id = ? ORDER BY id""",
            (user_id,)
        )
        folders = [
            {
                'id': _str_id(row['id']),
                'name': row['name'],
                'parentFolderId': _str_id(row['parent_folder_id']),
                'created': row['created_at'] or _now(),
            }
            for row in cursor.fetchall()
        ]

        cursor.execute(
            """SELECT c.deck_id, c.front, c.back, c.media_url
               FROM cards c
               JOIN decks d ON d.id = c.deck_id
               WHERE d.user_id = ?
               ORDER BY c.deck_id, c.sort_order, c.id""",
            (user_id,)
        )
        cards_by_deck = {}
        for row in cursor.fetchall():
            card = {'front': row['front'], 'back': row['back']}
            if row['media_url']:
                card['mediaUrl'] = row['media_url']
            cards_by_deck.setdefault(row['deck_id'], []).append(card)

        cursor.execute(
            """SELECT id, name, category, visibility, folder_id, created_at
               FROM decks WHERE user_id = ? ORDER BY id""",
            (user_id,)
        )
        decks = [
            {
                'id': _str_id(row['id']),
                'name': row['name'],
                'category': row['category'] or '',
                'visibility': row['visibility'] or DEFAULT_VISIBILITY,
                'folderId': _str_id(row['folder_id']),
                'cards': cards_by_deck.get(row['id'], []),
                'created': row['created_at'] or _now(),
            }
            for row in cursor.fetchall()
        ]

        cursor.execute(
            """SELECT stats_enabled, dark_mode, font_size, high_contrast, reduced_motion
               FROM user_settings WHERE user_id = ?""",
            (user_id,)
        )
        row = cursor.fetchone()
        if row:
            settings = {
                'statsEnabled': bool(row['stats_enabled']),
                'darkMode': bool(row['dark_mode']),
                'fontSize': row['font_size'] or DEFAULT_SETTINGS['fontSize'],
                'highContrast': bool(row['high_contrast']),
                'reducedMotion': bool(row['reduced_motion']),
            }
        else:
            settings = dict(DEFAULT_SETTINGS)

        cursor.execute(
            """SELECT deck_name, cards_studied, studied_at
               FROM study_sessions WHERE user_id = ? ORDER BY studied_at, id""",
            (user_id,)
        )
        sessions = [
            {
                'timestamp': row['studied_at'] or _now(),
                'deckName': row['deck_name'],
                'cardsStudied': row['cards_studied'],
            }
            for row in cursor.fetchall()
        ]

    return {
        'folders': folders,
        'decks': decks,
        'settings': settings,
        'stats': {'studySessions': sessions},
    }


# SNAPSHOT: SAVE (FULL REPLACE) ==============================

def save_snapshot(user_id, snapshot):
    """
    Replace everything stored for ``user_id`` with ``snapshot``.

    Runs as one transaction: delete children before parents, insert folders
    parent-first while mapping client ids to new row ids, then decks (with
    remapped folder ids) and their cards in array order, settings and study
    sessions. Any failure rolls the whole thing back and re-raises.

    Returns counts of inserted rows.
    """
    folders = snapshot.get('folders') or []
    decks = snapshot.get('decks') or []
    settings = snapshot.get('settings')
    sessions = (snapshot.get('stats') or {}).get('studySessions') or []

    counts = {'folders': 0, 'decks': 0, 'cards': 0, 'study_sessions': 0}

    with get_db() as conn:
        conn.execute('BEGIN IMMEDIATE')
        cursor = conn.cursor()

        cursor.execute('DELETE FROM study_sessions WHERE user_id = ?', (user_id,))
        cursor.execute(
            'DELETE FROM cards WHERE deck_id IN (SELECT id FROM decks WHERE user_id = ?)',
            (user_id,)
        )
        cursor.execute('DELETE FROM decks WHERE user_id = ?', (user_id,))
        cursor.execute('DELETE FROM folders WHERE user_id = ?', (user_id,))

        folder_ids = IdRemapper()
        for folder in sort_folders_for_insert(folders):
            cursor.execute(
                """INSERT INTO folders (user_id, name, parent_folder_id, created_at)
                   VALUES (?, ?, ?, ?)""",
                (
                    user_id,
                    folder.get('name'),
                    folder_ids.resolve(folder.get('parentFolderId')),
                    folder.get('created') or _now(),
                )
            )
            folder_ids.register(folder.get('id'), cursor.lastrowid)
            counts['folders'] += 1
        logging.debug(f"Remapped {len(folder_ids)} folder ids for user {user_id}")

        for deck in decks:
            cursor.execute(
                """INSERT INTO decks (user_id, folder_id, name, category, visibility, created_at)
                   VALUES (?, ?, ?, ?, ?, ?)""",
                (
                    user_id,
                    folder_ids.resolve(deck.get('folderId')),
                    deck.get('name'),
                    deck.get('category') or None,
                    deck.get('visibility') or DEFAULT_VISIBILITY,
                    deck.get('created') or _now(),
                )
            )
            deck_id = cursor.lastrowid
            counts['decks'] += 1

            for position, card in enumerate(deck.get('cards') or []):
                cursor.execute(
                    """INSERT INTO cards (deck_id, front, back, media_url, sort_order, created_at, updated_at)
                       VALUES (?, ?, ?, ?, ?, datetime('now'), datetime('now'))""",
                    (deck_id, card.get('front'), card.get('back'), card.get('mediaUrl') or None, position)
                )
                counts['cards'] += 1

        if settings:
            cursor.execute(
                """INSERT INTO user_settings
                       (user_id, stats_enabled, dark_mode, font_size, high_contrast, reduced_motion, updated_at)
                   VALUES (?, ?, ?, ?, ?, ?, datetime('now'))
                   ON CONFLICT (user_id) DO UPDATE SET
                       stats_enabled = excluded.stats_enabled,
                       dark_mode = excluded.dark_mode,
                       font_size = excluded.font_size,
                       high_contrast = excluded.high_contrast,
                       reduced_motion = excluded.reduced_motion,
                       updated_at = excluded.updated_at
                """,
                (
                    user_id,
                    settings.get('statsEnabled') is not False,
                    settings.get('darkMode') is True,
                    settings.get('fontSize') or DEFAULT_SETTINGS['fontSize'],
                    settings.get('highContrast') is True,
                    settings.get('reducedMotion') is True,
                )
            )

        for session in sessions:
            cursor.execute(
                """INSERT INTO study_sessions (user_id, deck_name, cards_studied, studied_at)
                   VALUES (?, ?, ?, ?)""",
                (
                    user_id,
                    session.get('deckName') or 'Unknown',
                    session.get('cardsStudied') or 0,
                    session.get('timestamp') or _now(),
                )
            )
            counts['study_sessions'] += 1

    logging.info(f"Saved snapshot for user {user_id}: {counts}")
    return counts


# DB CONNECTION ==============================================

@contextmanager
def get_db():
    conn = sqlite3.connect(DB_PATH)
    conn.row_factory = sqlite3.Row
    conn.execute('PRAGMA foreign_keys = ON')

    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def init_db():
    with get_db() as conn:
        conn.execute(user_schema)
        conn.execute(folder_schema)
        conn.execute(deck_schema)
        conn.execute(card_schema)
        conn.execute(settings_schema)
        conn.execute(study_session_schema)
        for statement in indexes:
            conn.execute(statement)
