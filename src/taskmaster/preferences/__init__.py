"""
Preferences subsystem.

Components:
- options.py: enumerated option types
- schema.py: preference table (key, type, default) + lenient decoding
- kv_store.py: in-memory and JSON-file key-value layers
- store.py: PreferencesStore (typed get/set + change notification)
"""
