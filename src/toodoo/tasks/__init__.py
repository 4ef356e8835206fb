"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskCategory, TaskFilter)
- task_store.py: in-memory collection synchronized with a key-value store
- interpreter.py: free-text / voice command interpreter
- task_api.py: small high-level helpers used by the rest of the app
"""
