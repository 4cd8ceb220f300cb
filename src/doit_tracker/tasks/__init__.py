"""
Task board subsystem.

Components:
- task_models.py: data structures (Task, TaskPriority) + record mapping
- task_store.py: in-memory board with optimistic mutators (add/update/toggle/delete/move)
- category_store.py: ordered categories; rename/delete cascade into TaskStore
"""
