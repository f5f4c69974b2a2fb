"""Player endpoints: join the game, flip coins, read the score."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, HTTPException, Query, Request, status

from coinflip_api.models import (
    FlipRequest,
    FlipResponse,
    PlayerCreateRequest,
    PlayerResponse,
    ScoreResponse,
)
from coinflip_api.routers.game import outcome_models
from coinflip_core.errors import InvalidArmError

router = APIRouter(tags=["players"])


@router.post("/players", response_model=PlayerResponse, status_code=status.HTTP_201_CREATED)
def create_player(payload: PlayerCreateRequest) -> PlayerResponse:
    # ids are "<uuid>_<name>" so replays can show the name back
    return PlayerResponse(player_id=f"{uuid.uuid4()}_{payload.name}", name=payload.name)


@router.post("/flip", response_model=FlipResponse)
def flip(payload: FlipRequest, request: Request) -> FlipResponse:
    coordinator = request.app.state.coordinator
    settings = request.app.state.settings

    try:
        result = coordinator.flip_for_player(payload.player_id, payload.arm)
    except InvalidArmError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc

    strategy_outcomes = []
    if settings.tick_on_flip:
        strategy_outcomes = outcome_models(coordinator.tick().outcomes)

    return FlipResponse(
        player_id=payload.player_id,
        arm=payload.arm,
        result=result,
        score=coordinator.player_score(payload.player_id),
        strategy_outcomes=strategy_outcomes,
    )


@router.get("/count", response_model=ScoreResponse)
def get_count(request: Request, player_id: str = Query(..., min_length=1)) -> ScoreResponse:
    coordinator = request.app.state.coordinator
    return ScoreResponse(player_id=player_id, score=coordinator.player_score(player_id))
