# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "TOODOO_APP_NAME": "App display name (default: toodoo).",
    "TOODOO_LOG_LEVEL": "File log level (default: INFO). The console only shows warnings.",
    # Storage
    "TOODOO_DATA_DIR": "Local data directory (default: .local/toodoo).",
    "TOODOO_STORAGE_BACKEND": "sqlite | json | memory (default: sqlite).",
    "TOODOO_STORE_PATH": "Store file (default: <data dir>/toodoo.sqlite3 or toodoo.json).",
    "TOODOO_TASKS_KEY": "Key holding the task list (default: todos).",
    "TOODOO_PROFILE_KEY": "Key holding the user profile (default: toodoo-user).",
    # Tasks
    "TOODOO_MAX_TITLE_LENGTH": "Maximum task title length (default: 100).",
    # Voice
    "TOODOO_VOICE_ENABLED": "Enable /listen dictation (true/false, default: false).",
}
