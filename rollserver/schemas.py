from typing import Dict, List

from pydantic import BaseModel, Field

class RollResponse(BaseModel):
    number: int = Field(..., ge=1, le=6)
    info: str = "server-roll"
    ts: int

class StoredRoll(BaseModel):
    number: int
    ts: int
    salt: str

class StoredRollsResponse(BaseModel):
    stored: Dict[str, List[StoredRoll]]

class HealthResponse(BaseModel):
    ok: bool
    service: str
    version: str
    store_rolls: bool
    clients: int
    records: int

class ErrorResponse(BaseModel):
    error: str
