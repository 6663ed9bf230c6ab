from typing import List, Optional

from pydantic import BaseModel, Field


class JobLockRecord(BaseModel):
    token: str
    pid: int
    # None for lock files that only carry a bare pid
    process_create_time: Optional[float] = None
    created_at: Optional[float] = None
    command: List[str] = Field(default_factory=list)
