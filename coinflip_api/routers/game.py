"""Endpoints that drive the strategies and export what they recorded."""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Sequence

from fastapi import APIRouter, HTTPException, Query, Request, status

from coinflip_api.models import FlushResponse, OutcomeModel, TickResponse
from coinflip_core.coordinator import BanditCoordinator
from coinflip_core.dump import save_dump
from coinflip_core.errors import HistoryCorruptionError
from coinflip_core.outcomes import FlipOutcome
from coinflip_core.replay import ReplayEngine
from coinflip_core.strategies import STRATEGY_CLASSES

logger = logging.getLogger(__name__)

router = APIRouter(tags=["game"])


def outcome_models(outcomes: Sequence[FlipOutcome]) -> list[OutcomeModel]:
    return [
        OutcomeModel(strategy=cls.name, arm=outcome.arm, success=outcome.success)
        for cls, outcome in zip(STRATEGY_CLASSES, outcomes)
    ]


@router.post("/tick", response_model=TickResponse)
def tick(request: Request) -> TickResponse:
    coordinator: BanditCoordinator = request.app.state.coordinator
    result = coordinator.tick()
    return TickResponse(step=result.step, outcomes=outcome_models(result.outcomes))


@router.post("/flush", response_model=FlushResponse)
def flush(request: Request) -> FlushResponse:
    coordinator: BanditCoordinator = request.app.state.coordinator
    settings = request.app.state.settings
    dump = coordinator.dump()
    try:
        path = save_dump(dump, settings.dump_path)
    except OSError as exc:
        logger.error("Could not write dump to %s: %s", settings.dump_path, exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Could not write dump to '{settings.dump_path}'.",
        ) from exc
    return FlushResponse(
        status="ok",
        path=str(path),
        strategies=len(dump.algorithms),
        players=len(dump.players),
    )


@router.get("/dump")
def get_dump(request: Request) -> Dict[str, Any]:
    return request.app.state.coordinator.dump().to_dict()


@router.get("/replay")
def get_replay(
    request: Request,
    max_steps: Optional[int] = Query(default=None, ge=0),
) -> Dict[str, Any]:
    coordinator: BanditCoordinator = request.app.state.coordinator
    settings = request.app.state.settings
    engine = ReplayEngine(
        coordinator.arm_count(),
        exploration_trials=settings.exploration_trials,
        pdf_resolution=settings.pdf_resolution,
    )
    try:
        result = engine.replay(coordinator.dump(), max_steps=max_steps)
    except HistoryCorruptionError as exc:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(exc),
        ) from exc
    return result.to_dict()
