# ======================= USERS ==========================

user_schema = '''
    CREATE TABLE IF NOT EXISTS users (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        firebase_uid TEXT UNIQUE NOT NULL,
        email TEXT,

        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
'''

# ======================= FOLDERS ========================

folder_schema = '''
    CREATE TABLE IF NOT EXISTS folders (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        user_id INTEGER NOT NULL,
        name TEXT NOT NULL,
        parent_folder_id INTEGER,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,

        FOREIGN KEY (user_id) REFERENCES users(id) ON DELETE CASCADE,
        FOREIGN KEY (parent_folder_id) REFERENCES folders(id) ON DELETE SET NULL
    )
'''

# ======================= DECKS ==========================

deck_schema = '''
    CREATE TABLE IF NOT EXISTS decks (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        user_id INTEGER NOT NULL,
        folder_id INTEGER,
        name TEXT NOT NULL,
        category TEXT,
        visibility TEXT DEFAULT 'private',
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,

        FOREIGN KEY (user_id) REFERENCES users(id) ON DELETE CASCADE,
        FOREIGN KEY (folder_id) REFERENCES folders(id) ON DELETE SET NULL
    )
'''

# ======================= CARDS ==========================

card_schema = '''
    CREATE TABLE IF NOT EXISTS cards (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        deck_id INTEGER NOT NULL,

        -- Card content
        front TEXT NOT NULL,
        back TEXT NOT NULL,
        media_url TEXT,

        -- Position inside the deck
        sort_order INTEGER NOT NULL DEFAULT 0,

        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,

        FOREIGN KEY (deck_id) REFERENCES decks(id) ON DELETE CASCADE
    )
'''

# ======================= SETTINGS =======================

settings_schema = '''
    CREATE TABLE IF NOT EXISTS user_settings (
        user_id INTEGER PRIMARY KEY,
        stats_enabled BOOLEAN DEFAULT 1,
        dark_mode BOOLEAN DEFAULT 0,
        font_size TEXT DEFAULT 'medium',
        high_contrast BOOLEAN DEFAULT 0,
        reduced_motion BOOLEAN DEFAULT 0,
        updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,

        FOREIGN KEY (user_id) REFERENCES users(id) ON DELETE CASCADE
    )
'''

# ======================= STUDY SESSIONS =================

study_session_schema = '''
    CREATE TABLE IF NOT EXISTS study_sessions (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        user_id INTEGER NOT NULL,
        deck_name TEXT NOT NULL,
        cards_studied INTEGER DEFAULT 0,
        studied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,

        FOREIGN KEY (user_id) REFERENCES users(id) ON DELETE CASCADE
    )
'''

indexes = [
    'CREATE INDEX IF NOT EXISTS idx_folders_user_id ON folders(user_id)',
    'CREATE INDEX IF NOT EXISTS idx_decks_user_id ON decks(user_id)',
    'CREATE INDEX IF NOT EXISTS idx_cards_deck_id ON cards(deck_id, sort_order)',
    'CREATE INDEX IF NOT EXISTS idx_study_sessions_user_id ON study_sessions(user_id)',
]
