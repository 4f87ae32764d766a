from pydantic import BaseModel, Field

PROBLEM_JSON_MEDIA_TYPE = "application/problem+json"


# PUBLIC_INTERFACE
class InvalidRequestParameter(BaseModel):
    """One failed validation rule on the request body."""

    entity: str = Field(..., description="Name of the object that failed validation")
    field: str = Field(..., description="Offending field name")
    message: str = Field(..., description="Human-readable violation message")


# PUBLIC_INTERFACE
class ProblemDetail(BaseModel):
    """
    Normalized error body returned for every 4xx (and 5xx) rendered by the
    service. `errors` is present only for field-validation failures.
    """

    type: str = Field(default="about:blank")
    title: str
    status: int
    detail: str | None = None
    instance: str | None = None
    errors: list[InvalidRequestParameter] | None = None
