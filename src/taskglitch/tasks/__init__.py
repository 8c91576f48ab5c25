"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskStatus, TaskPriority, DerivedTask, Metrics)
- task_logic.py: pure derivation, sorting and metric formulas
- task_store.py: in-memory store with single-slot undo for deletes
- task_view.py: store-to-view pipeline and filters
- task_api.py: mutation helpers that also write the activity log
- task_loader.py / task_seed.py: initial load with generated fallback data
- task_export.py: CSV export
"""
