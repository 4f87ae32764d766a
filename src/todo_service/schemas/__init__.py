from .task import TaskDTO, TITLE_MANDATORY_MESSAGE
from .problem import InvalidRequestParameter, ProblemDetail, PROBLEM_JSON_MEDIA_TYPE

__all__ = [
    "TaskDTO",
    "TITLE_MANDATORY_MESSAGE",
    "InvalidRequestParameter",
    "ProblemDetail",
    "PROBLEM_JSON_MEDIA_TYPE",
]
