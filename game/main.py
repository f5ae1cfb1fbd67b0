import os
import random
from contextlib import asynccontextmanager

import redis.asyncio as redis
import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from game.middlewares.logging import LoggingMiddleware, logger
from game.repositories.player import make_player_repository
from game.routers.cards import make_cards_router
from game.routers.errors import register_error_handlers
from game.routers.player import make_player_router
from game.services.deck import make_deck_generator
from game.services.player import make_player_service

load_dotenv()

# Config
TITLE = os.environ.get("GAME_APP_TITLE", "Card Game Players Service")
APP_HOST = os.environ.get("GAME_APP_HOST", "0.0.0.0")
APP_PORT = int(os.environ.get("GAME_APP_PORT", 8080))
CORS_ALLOW_ORIGINS = [
    origin.strip()
    for origin in os.environ.get("CORS_ALLOW_ORIGINS", "*").split(",")
    if origin.strip()
]
DECK_SEED = os.environ.get("DECK_SEED")

# Redis config
REDIS_HOST = os.environ.get("REDIS_HOST", "localhost")
REDIS_PORT = int(os.environ.get("REDIS_PORT", 6379))
REDIS_DB = int(os.environ.get("REDIS_DB", 0))
REDIS_SOCKET_TIMEOUT = float(os.environ.get("REDIS_SOCKET_TIMEOUT", 5.0))

GREETING = "Hello, this is the card game backend with CORS support!"


@asynccontextmanager
async def lifespan(app: FastAPI):
    redis_client = redis.Redis(
        host=REDIS_HOST,
        port=REDIS_PORT,
        db=REDIS_DB,
        decode_responses=True,
        socket_timeout=REDIS_SOCKET_TIMEOUT,
        socket_connect_timeout=REDIS_SOCKET_TIMEOUT,
    )
    player_repo = make_player_repository(redis_client)
    player_service = make_player_service(player_repo)
    rng = random.Random(int(DECK_SEED)) if DECK_SEED else random.Random()
    deck_generator = make_deck_generator(rng)

    app.state.player_repository = player_repo
    app.include_router(make_player_router(player_service))
    app.include_router(make_cards_router(deck_generator))

    logger.info(f"Configured Redis client for {REDIS_HOST}:{REDIS_PORT}/{REDIS_DB}")
    try:
        yield
    finally:
        await redis_client.aclose()
        logger.info("Redis connection closed")


app = FastAPI(title=TITLE, lifespan=lifespan)
app.add_middleware(LoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOW_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)
register_error_handlers(app)


@app.get("/", response_class=PlainTextResponse)
async def root():
    return GREETING


@app.get("/health")
async def health():
    if await app.state.player_repository.ping():
        return {"status": "ok"}
    return {"status": "fail"}


if __name__ == "__main__":
    uvicorn.run(app, host=APP_HOST, port=APP_PORT, reload=False)
