import logging

import redis.asyncio as redis

log = logging.getLogger("game_service")

PLAYER_KEY_PREFIX = "player:"
PLAYER_KEY_PATTERN = f"{PLAYER_KEY_PREFIX}*"


class StoreError(Exception):
    pass


def player_key(player_id: str) -> str:
    return f"{PLAYER_KEY_PREFIX}{player_id}"


class PlayerRepository:
    def __init__(self, redis_client: redis.Redis):
        self.redis_client = redis_client

    async def save(self, player_id: str, fields: dict) -> None:
        key = player_key(player_id)
        try:
            await self.redis_client.hset(key, mapping=fields)
        except redis.RedisError as e:
            log.error(f"Failed to store player {key}: {e}", exc_info=True)
            raise StoreError(f"failed to store {key}") from e

    async def list_keys(self) -> list[str]:
        try:
            return [
                key
                async for key in self.redis_client.scan_iter(match=PLAYER_KEY_PATTERN)
            ]
        except (redis.RedisError, UnicodeDecodeError) as e:
            log.error(f"Failed to list player keys: {e}", exc_info=True)
            raise StoreError("failed to list player keys") from e

    async def key_type(self, key: str) -> str:
        try:
            return await self.redis_client.type(key)
        except (redis.RedisError, UnicodeDecodeError) as e:
            raise StoreError(f"failed to read type of {key}") from e

    async def get_fields(self, key: str) -> dict:
        try:
            return await self.redis_client.hgetall(key)
        except (redis.RedisError, UnicodeDecodeError) as e:
            raise StoreError(f"failed to read {key}") from e

    async def ping(self) -> bool:
        try:
            return bool(await self.redis_client.ping())
        except redis.RedisError:
            return False


def make_player_repository(redis_client: redis.Redis) -> PlayerRepository:
    return PlayerRepository(redis_client)
