"""
Housekeeping subsystem.

Components:
- task_models.py: trigger specs, Task, TaskResult, execution states
- task_registry.py: named tasks + idle-arming bookkeeping, pure due query
- task_guard.py: at-most-one-running dispatch with failure isolation
- task_scheduler.py: trigger engine, scheduler facade, asyncio idle loop
- threshold.py: startup/steady resource threshold and reclaim-now path
- task_api.py: default housekeeping tasks used by the app
"""
