"""
Task subsystem.

Components:
- task_models.py: the Task record
- task_store.py: in-memory authoritative collection + best-effort persistence
- live.py: live query view and change events
- sqlite_backend.py: SQLite persistence for the shared container
- task_api.py: small high-level helpers used by the front end
"""
