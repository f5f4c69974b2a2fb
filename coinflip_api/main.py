"""FastAPI entrypoint for the coin-flip bandit game."""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from coinflip_api.routers import game as game_router
from coinflip_api.routers import players as players_router
from coinflip_api.settings import Settings
from coinflip_core.coordinator import BanditCoordinator
from coinflip_core.dump import save_dump
from coinflip_core.history.base import HistoryStore
from coinflip_core.history.memory import InMemoryHistoryStore

logger = logging.getLogger(__name__)


def _build_history_store(settings: Settings) -> HistoryStore:
    if settings.history_backend == "redis":
        import redis

        from coinflip_api.state.redis_store import RedisHistoryStore

        return RedisHistoryStore(redis.from_url(settings.redis_url))
    return InMemoryHistoryStore()


def create_app(
    *,
    settings: Optional[Settings] = None,
    history_store: Optional[HistoryStore] = None,
) -> FastAPI:
    """Create and configure the FastAPI app.

    The optional history store injection makes this function test-friendly.
    Invalid coin probabilities raise ``ConfigurationError`` here, before the
    app ever serves a request.
    """
    app_settings = settings or Settings()

    coordinator = BanditCoordinator(
        app_settings.coin_probs,
        exploration_trials=app_settings.exploration_trials,
        seed=app_settings.rng_seed,
        history_store=(
            history_store if history_store is not None else _build_history_store(app_settings)
        ),
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        # configured at startup, never at import
        logging.basicConfig(level=app_settings.log_level.upper())
        logger.info(
            "Coin-flip game started with %d coins (history backend: %s).",
            coordinator.arm_count(),
            app_settings.history_backend,
        )
        yield
        if app_settings.flush_on_shutdown:
            save_dump(coordinator.dump(), app_settings.dump_path)

    app = FastAPI(
        title="Coin-Flip Bandit Game",
        version="0.1.0",
        description="Human players versus Naive, UCB and Thompson Sampling on biased coins.",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.settings = app_settings
    app.state.coordinator = coordinator

    app.include_router(players_router.router)
    app.include_router(game_router.router)

    @app.get("/health")
    def health() -> Dict[str, str]:
        return {"status": "ok"}

    return app


app = create_app()
