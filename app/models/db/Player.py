from sqlalchemy import String, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime, timezone
from nanoid import generate
from app.database import Base


class Player(Base):
    __tablename__ = "players"

    id: Mapped[str] = mapped_column(
        String(20), primary_key=True, index=True, default=lambda: generate(size=20)
    )
    # PUBG account id, e.g. "account.c0e530e9b7244b358def282782f893af"
    account_id: Mapped[str] = mapped_column(
        String, unique=True, index=True, nullable=False
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    shard: Mapped[str] = mapped_column(String(20), nullable=False, default="steam")

    last_matches: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    last_refreshed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
