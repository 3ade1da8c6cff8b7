from pydantic import BaseModel, Field
from typing import List, Optional


class PubgMatchRef(BaseModel):
    type: str = "match"
    id: str


class PubgMatchesData(BaseModel):
    data: List[PubgMatchRef] = Field(default_factory=list)


class PubgPlayerRelationships(BaseModel):
    matches: PubgMatchesData = Field(default_factory=PubgMatchesData)


class PubgPlayerAttributes(BaseModel):
    name: str
    shard_id: str = Field(alias="shardId")
    created_at: Optional[str] = Field(default=None, alias="createdAt")
    updated_at: Optional[str] = Field(default=None, alias="updatedAt")

    class Config:
        populate_by_name = True


class PubgPlayer(BaseModel):
    """A player entry of the /players endpoint."""

    type: str = "player"
    id: str
    attributes: PubgPlayerAttributes
    relationships: PubgPlayerRelationships = Field(
        default_factory=PubgPlayerRelationships
    )

    @property
    def account_id(self) -> str:
        return self.id

    @property
    def name(self) -> str:
        return self.attributes.name

    def recent_match_ids(self, limit: int = 5) -> list[str]:
        # the API lists matches newest first
        return [ref.id for ref in self.relationships.matches.data[:limit]]


class PubgPlayerResponse(BaseModel):
    data: List[PubgPlayer]
