from .task_mapper import TaskMapper

__all__ = ["TaskMapper"]
