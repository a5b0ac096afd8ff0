from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator


class LottoGame(str, Enum):
    DAILY_LOTTO = "Daily Lotto"
    DAILY_LOTTO_PLUS = "Daily Lotto Plus"
    LOTTO = "Lotto"
    LOTTO_PLUS_1 = "Lotto Plus 1"
    LOTTO_PLUS_2 = "Lotto Plus 2"
    POWERBALL = "PowerBall"
    POWERBALL_PLUS = "PowerBall Plus"

    @classmethod
    def lookup(cls, value: str) -> Optional["LottoGame"]:
        key = " ".join(str(value).split()).casefold()
        for game in cls:
            if game.value.casefold() == key:
                return game
        return None


GAME_NAMES = [game.value for game in LottoGame]

_OPTIONAL_INT = TypeAdapter(Optional[int])
_OPTIONAL_FLOAT = TypeAdapter(Optional[float])


class DrawRecord(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)

    id: str = Field("", description="Draw identifier as reported by the source.")
    game: LottoGame = Field(..., description="Game name from the closed set of SA Lotto games.")
    date: str = Field(..., description="Draw date, normally YYYY-MM-DD.")
    numbers: List[int] = Field(..., description="Winning numbers; may be empty.")
    bonus_ball: Optional[int] = Field(None, alias="bonusBall")
    power_ball: Optional[int] = Field(None, alias="powerBall")
    jackpot_amount: Optional[float] = Field(None, alias="jackpotAmount")

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> str:
        if value is None:
            return ""
        return str(value)

    @field_validator("game", mode="before")
    @classmethod
    def _match_game(cls, value: Any) -> Any:
        if isinstance(value, str):
            game = LottoGame.lookup(value)
            if game is None:
                raise ValueError(f"unknown game: {value!r}")
            return game
        return value

    # A malformed optional value is dropped; the draw itself is still usable.
    @field_validator("bonus_ball", "power_ball", mode="before")
    @classmethod
    def _lenient_ball(cls, value: Any) -> Optional[int]:
        try:
            return _OPTIONAL_INT.validate_python(value)
        except ValidationError:
            return None

    @field_validator("jackpot_amount", mode="before")
    @classmethod
    def _lenient_amount(cls, value: Any) -> Optional[float]:
        try:
            return _OPTIONAL_FLOAT.validate_python(value)
        except ValidationError:
            return None

    @field_validator("date")
    @classmethod
    def _validate_date(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("date must be non-empty.")
        return value

    @property
    def special_ball(self) -> Optional[int]:
        if self.bonus_ball is not None:
            return self.bonus_ball
        return self.power_ball

    def to_dict(self) -> Dict[str, Any]:
        data = self.model_dump(by_alias=True, exclude_none=True)
        data["game"] = self.game.value
        return data


def draws_response_schema() -> Dict[str, Any]:
    """Response schema in the subset of OpenAPI accepted by ``generateContent``."""
    return {
        "type": "OBJECT",
        "properties": {
            "draws": {
                "type": "ARRAY",
                "items": {
                    "type": "OBJECT",
                    "properties": {
                        "id": {"type": "STRING"},
                        "game": {"type": "STRING", "enum": GAME_NAMES},
                        "date": {"type": "STRING"},
                        "numbers": {"type": "ARRAY", "items": {"type": "INTEGER"}},
                        "bonusBall": {"type": "INTEGER"},
                        "powerBall": {"type": "INTEGER"},
                        "jackpotAmount": {"type": "NUMBER"},
                    },
                    "required": ["id", "game", "date", "numbers"],
                },
            }
        },
    }
