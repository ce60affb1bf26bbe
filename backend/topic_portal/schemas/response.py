from pydantic import BaseModel
from typing import Generic, TypeVar, Optional, List

T = TypeVar('T')
class StandardResponse(BaseModel, Generic[T]):
    """Standard response model

    Uniform API envelope for both successful and failed calls.

    Attributes:
        success: False whenever the request failed
        message: human readable outcome
        data: payload, omitted on errors
    """
    success: bool = True
    message: str = 'success'
    data: Optional[T] = None


class ListResponse(StandardResponse[List[T]], Generic[T]):
    """Envelope for collections, carrying the number of returned items."""
    count: int = 0


class ErrorResponse(BaseModel):
    success: bool = False
    message: str
