from pydantic import BaseModel, Field
from datetime import datetime
from typing import List, Optional


class CreatePlayerRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    shard: str = Field(default="steam", min_length=1)


class PlayerResponse(BaseModel):
    id: str
    account_id: str
    name: str
    shard: str
    last_refreshed_at: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True


class PlayerMatchesResponse(BaseModel):
    player_id: str
    match_ids: List[str]


class RefreshAllResponse(BaseModel):
    refreshed: int = Field(ge=0)
    failed: int = Field(ge=0)
