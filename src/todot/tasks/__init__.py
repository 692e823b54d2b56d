"""
Task subsystem.

Components:
- task_models.py: data structures (Task, Row, Mode)
- task_store.py: in-memory ordered task list with a selection cursor
"""
