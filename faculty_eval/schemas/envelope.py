from typing import Any, Generic, TypeVar
from pydantic import BaseModel

T = TypeVar("T")


class Envelope(BaseModel, Generic[T]):
    """Uniform success wrapper: {"status": "success", "message": ..., "data": ...}"""
    status: str = "success"
    message: str | None = None
    data: T | None = None


def ok(data: Any = None, message: str | None = None) -> dict:
    return {"status": "success", "message": message, "data": data}
