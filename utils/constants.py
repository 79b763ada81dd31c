from enum import auto, IntEnum

DECK_NAME_MAX = 50
FOLDER_NAME_MAX = 50

# Sync payload limits
MAX_PAYLOAD_BYTES = 5 * 1024 * 1024
MAX_DECKS = 500
MAX_FOLDERS = 200

# Local cache keys
DECKS_KEY = 'studyflow-decks'
FOLDERS_KEY = 'studyflow-folders'
MUTED_KEY = 'studyflow-muted'
SETTINGS_KEY = 'studyflow-settings'
STATS_KEY = 'studyflow-stats'

DEFAULT_SETTINGS = {
    'statsEnabled': True,
    'darkMode': False,
    'fontSize': 'medium',
    'highContrast': False,
    'reducedMotion': False,
}

DEFAULT_VISIBILITY = 'private'


class SyncState(IntEnum):
    IDLE = auto()
    AUTHENTICATING = auto()
    PROBING = auto()
    DOWNLOADING = auto()
    UPLOADING = auto()
    DONE = auto()
    FAILED = auto()
