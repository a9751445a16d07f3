from typing import Any, Dict, Generic, Optional, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Envelope shared by every route: {success, data?, error?, message?}."""

    success: bool = True
    data: Optional[T] = None
    error: Optional[str] = None
    message: Optional[str] = None

    def render(self) -> Dict[str, Any]:
        """JSON-ready body with camelCase aliases and unset optionals left out."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class CachedApiResponse(ApiResponse[T], Generic[T]):
    cached: bool = False


def error_body(error: str, **extra: Any) -> Dict[str, Any]:
    return {**ApiResponse(success=False, error=error).render(), **extra}
