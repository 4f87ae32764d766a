from .error_handlers import register_exception_handlers
from .tasks import router as tasks_router

__all__ = ["register_exception_handlers", "tasks_router"]
