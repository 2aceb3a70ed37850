from . import content, jobs, materials, tasks

__all__ = ["content", "jobs", "materials", "tasks"]
