from app.models.location import Location, Task

__all__ = [
    "Location",
    "Task",
]
