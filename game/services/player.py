import logging
import re
import time
from datetime import datetime, timezone
from typing import Callable

from game.repositories.player import PlayerRepository, StoreError

log = logging.getLogger("game_service")

COUNTER_PATTERN = re.compile(r"[+-]?[0-9]+")


class ValidationError(Exception):
    pass


class PartialRecordError(Exception):
    pass


def generate_player_id() -> str:
    return str(time.time_ns())


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_created(moment: datetime) -> str:
    return moment.isoformat(timespec="seconds")


def parse_counter(value) -> int:
    """Best-effort counter parsing: anything but a plain ASCII integer reads as 0."""
    if isinstance(value, int):
        return value
    if isinstance(value, str) and COUNTER_PATTERN.fullmatch(value):
        return int(value)
    return 0


class PlayerService:
    def __init__(
        self,
        player_repository: PlayerRepository,
        id_factory: Callable[[], str] = generate_player_id,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.player_repository = player_repository
        self.id_factory = id_factory
        self.clock = clock

    async def store_player(self, name: str) -> str:
        if not isinstance(name, str) or not name:
            raise ValidationError("player must be a non-empty string")
        player_id = self.id_factory()
        fields = {
            "id": player_id,
            "player": name,
            "wins": 0,
            "losses": 0,
            "created": format_created(self.clock()),
        }
        await self.player_repository.save(player_id, fields)
        log.info(f"Stored player {name!r} as {player_id}")
        return player_id

    async def list_players(self) -> list[dict]:
        keys = await self.player_repository.list_keys()
        players = []
        for key in keys:
            try:
                fields = await self._read_record(key)
            except PartialRecordError as e:
                log.warning(f"Skipping {key}: {e}")
                continue
            players.append(self._to_record(fields))
        return players

    async def _read_record(self, key: str) -> dict:
        try:
            key_type = await self.player_repository.key_type(key)
            if key_type != "hash":
                raise PartialRecordError(f"not a hash (type {key_type})")
            fields = await self.player_repository.get_fields(key)
        except StoreError as e:
            raise PartialRecordError(str(e)) from e
        if not fields:
            raise PartialRecordError("record disappeared")
        return fields

    @staticmethod
    def _to_record(fields: dict) -> dict:
        wins = parse_counter(fields.get("wins"))
        losses = parse_counter(fields.get("losses"))
        return {
            "id": fields.get("id", ""),
            "player": fields.get("player", ""),
            "wins": wins,
            "losses": losses,
            "total": wins + losses,
            "created": fields.get("created", ""),
        }


def make_player_service(
    player_repository: PlayerRepository,
    id_factory: Callable[[], str] = generate_player_id,
    clock: Callable[[], datetime] = utc_now,
) -> PlayerService:
    return PlayerService(
        player_repository=player_repository,
        id_factory=id_factory,
        clock=clock,
    )
