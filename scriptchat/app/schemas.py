"""
API Layer - Request/Response Schemas

Pydantic models for API request and response validation.
"""

from typing import List, Optional

from pydantic import BaseModel

from ..state.models import RunRecord, RunStatus


class CreateSessionResponse(BaseModel):
    session_id: str


class UserMessage(BaseModel):
    text: str


class RunResponse(BaseModel):
    status: RunStatus
    output: str
    error: Optional[str] = None
    call_count: int


class SessionRead(BaseModel):
    session_id: str
    tool_path: str
    status: Optional[RunStatus] = None
    history: List[RunRecord]
    active: Optional[RunRecord] = None
    contract_violation: Optional[str] = None
