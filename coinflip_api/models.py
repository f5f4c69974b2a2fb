"""Pydantic models for request/response payloads."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


class PlayerCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=60)

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError("name cannot be blank")
        return normalized


class PlayerResponse(BaseModel):
    player_id: str
    name: str


class OutcomeModel(BaseModel):
    strategy: str
    arm: int
    success: bool


class FlipRequest(BaseModel):
    player_id: str = Field(min_length=1)
    arm: int = Field(ge=0)


class FlipResponse(BaseModel):
    player_id: str
    arm: int
    result: bool
    score: int
    strategy_outcomes: list[OutcomeModel] = Field(default_factory=list)


class ScoreResponse(BaseModel):
    player_id: str
    score: int


class TickResponse(BaseModel):
    step: int
    outcomes: list[OutcomeModel]


class FlushResponse(BaseModel):
    status: str
    path: str
    strategies: int
    players: int
