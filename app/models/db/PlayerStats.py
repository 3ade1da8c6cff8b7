from sqlalchemy import String, Integer, Float, DateTime, ForeignKey, Index, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime
import uuid
from app.database import Base


class PlayerStats(Base):
    __tablename__ = "player_stats"
    __table_args__ = (
        UniqueConstraint(
            "player_id", "period", "mode", "shard", name="player_stats_composite"
        ),
        Index("ix_player_stats_expires_at", "expires_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    player_id: Mapped[str] = mapped_column(
        String(20), ForeignKey("players.id", ondelete="CASCADE"), nullable=False
    )
    period: Mapped[str] = mapped_column(String(8), nullable=False)
    mode: Mapped[str] = mapped_column(String(8), nullable=False)
    shard: Mapped[str] = mapped_column(String(20), nullable=False)

    kills: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    deaths: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    kd_ratio: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    win_rate: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    damage_dealt: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    survival_time: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    wins: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    matches_counted: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    computed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
