from pydantic import BaseModel, Field, model_validator
from typing import List, Optional


class PubgParticipantStats(BaseModel):
    kills: int = 0
    damage_dealt: float = Field(default=0.0, alias="damageDealt")
    death_type: str = Field(alias="deathType")
    time_survived: float = Field(default=0.0, alias="timeSurvived")
    win_place: int = Field(alias="winPlace")
    player_id: str = Field(alias="playerId")
    name: str = ""

    dbnos: int = Field(default=0, alias="DBNOs")
    assists: int = 0
    boosts: int = 0
    heals: int = 0
    revives: int = 0
    headshot_kills: int = Field(default=0, alias="headshotKills")
    kill_place: int = Field(default=0, alias="killPlace")
    kill_streaks: int = Field(default=0, alias="killStreaks")
    longest_kill: float = Field(default=0.0, alias="longestKill")
    road_kills: int = Field(default=0, alias="roadKills")
    team_kills: int = Field(default=0, alias="teamKills")
    vehicle_destroys: int = Field(default=0, alias="vehicleDestroys")
    weapons_acquired: int = Field(default=0, alias="weaponsAcquired")
    ride_distance: float = Field(default=0.0, alias="rideDistance")
    swim_distance: float = Field(default=0.0, alias="swimDistance")
    walk_distance: float = Field(default=0.0, alias="walkDistance")

    class Config:
        populate_by_name = True
        frozen = True

    @property
    def is_alive(self) -> bool:
        return self.death_type == "alive"


class PubgParticipantAttributes(BaseModel):
    stats: PubgParticipantStats
    actor: Optional[str] = None
    shard_id: Optional[str] = Field(default=None, alias="shardId")

    class Config:
        populate_by_name = True
        frozen = True


class PubgParticipant(BaseModel):
    type: str = "participant"
    id: str
    attributes: PubgParticipantAttributes

    class Config:
        frozen = True


class PubgMatchAttributes(BaseModel):
    created_at: str = Field(alias="createdAt")
    duration: int = 0
    game_mode: Optional[str] = Field(default=None, alias="gameMode")
    map_name: Optional[str] = Field(default=None, alias="mapName")
    is_custom_match: bool = Field(default=False, alias="isCustomMatch")
    match_type: Optional[str] = Field(default=None, alias="matchType")
    shard_id: Optional[str] = Field(default=None, alias="shardId")

    class Config:
        populate_by_name = True
        frozen = True


class PubgMatchData(BaseModel):
    type: str = "match"
    id: str
    attributes: PubgMatchAttributes

    class Config:
        frozen = True


class PubgMatch(BaseModel):
    """
    A completed match as returned by /matches/{id}.

    The JSON:API `included` array mixes participants, rosters and assets;
    only participants are kept.
    """

    data: PubgMatchData
    participants: List[PubgParticipant] = Field(default_factory=list)

    class Config:
        frozen = True

    @model_validator(mode="before")
    @classmethod
    def _collect_participants(cls, values):
        if isinstance(values, dict) and "included" in values:
            values = dict(values)
            included = values.pop("included") or []
            values["participants"] = [
                item
                for item in included
                if isinstance(item, dict) and item.get("type") == "participant"
            ]
        return values

    @property
    def id(self) -> str:
        return self.data.id

    @property
    def created_at(self) -> str:
        return self.data.attributes.created_at

    def find_participant(self, account_id: str) -> Optional[PubgParticipantStats]:
        for participant in self.participants:
            if participant.attributes.stats.player_id == account_id:
                return participant.attributes.stats
        return None
