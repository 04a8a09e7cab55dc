"""
Task subsystem.

Components:
- task_models.py: data structures (Task + variants, Priority, TaskKind)
- task_codec.py: polymorphic JSON encoding keyed on `typeIdentifier`
- task_store.py: JSON file store and in-memory store
- validation.py / errors.py: business rules and the error taxonomy
- task_list.py: the in-memory list, derived views, write-through persistence
- task_api.py: small high-level helpers (factory, sample data)
"""
