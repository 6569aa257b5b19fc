from pydantic import BaseModel
from typing import Optional, Any, Dict


class ErrorResponse(BaseModel):
    """
    Standard error response structure.
    """
    error: str
    code: str
    details: Optional[Any] = None


class ViewResponse(BaseModel):
    """
    A rendered view: the page name, where it was served, who is looking at it,
    and the view-specific state (flow step, draft, inline error...).
    """
    view: str
    path: str
    user: Optional[Dict[str, Any]] = None
    state: Dict[str, Any] = {}
