class NoMatchDataError(Exception):
    """None of the player's recent matches could be fetched."""

    def __init__(self, player_id: str):
        self.player_id = player_id
        super().__init__(
            f"No match data available for player {player_id}. "
            "Please ensure the player has recent matches."
        )


class PlayerNotFoundError(Exception):
    def __init__(self, player_id: str):
        self.player_id = player_id
        super().__init__(f"Player not found: {player_id}")
