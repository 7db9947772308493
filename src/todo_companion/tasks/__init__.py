"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TasksFilterType, TaskStatistics)
- local_source.py: SQLite-backed data source (on-device tier)
- remote_source.py: simulated-latency remote service
- repository.py: caching repository that coordinates both sources
- task_api.py: small high-level helpers used by the console
"""
