"""
Task subsystem.

Components:
- task_models.py: data structures (Task, Subtask, TaskStatus, TaskPriority)
- dashboard.py: dashboard controller (task list, subtasks, AI suggestion buffers)
"""
