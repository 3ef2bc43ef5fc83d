# ricemill/utils/response.py

from typing import TypeVar, Generic, Optional, Dict, Any, List
from pydantic import BaseModel

T = TypeVar("T")


def success_response(message: str, data: Optional[T] = None) -> Dict[str, Any]:
    return {
        "success": True,
        "message": message,
        "data": data,
    }


class APIResponse(BaseModel, Generic[T]):
    success: bool = True
    message: str
    data: Optional[T] = None


class ListData(BaseModel, Generic[T]):
    total: int
    items: List[T]


def list_data(items: List[T]) -> Dict[str, Any]:
    return {"total": len(items), "items": items}
