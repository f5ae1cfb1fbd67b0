from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, Field

from game.repositories.player import StoreError
from game.services.player import PlayerService, ValidationError


class StorePlayerRequest(BaseModel):
    player: str = Field(
        ...,
        min_length=1,
        examples=["alice"],
        title="Player name",
        description="Name of the player to store",
    )


class StorePlayerResponse(BaseModel):
    message: str = Field(..., title="Acknowledgement")


class Player(BaseModel):
    id: str = Field(..., description="Nanosecond creation timestamp used as the key")
    player: str = Field(..., description="Player name")
    wins: int = Field(0, description="Games won")
    losses: int = Field(0, description="Games lost")
    total: int = Field(0, description="wins + losses")
    created: str = Field(..., description="RFC 3339 creation time")


class PlayersResponse(BaseModel):
    players: list[Player]


def make_player_router(player_service: PlayerService) -> APIRouter:
    router = APIRouter(tags=["players"])

    @router.post("/store-username", response_model=StorePlayerResponse)
    async def store_username(data: StorePlayerRequest):
        try:
            await player_service.store_player(data.player)
        except ValidationError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
        except StoreError:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to store player",
            )
        return {"message": "player stored successfully"}

    @router.get("/get-all-usernames", response_model=PlayersResponse)
    async def get_all_usernames():
        try:
            players = await player_service.list_players()
        except StoreError:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to retrieve players",
            )
        return {"players": players}

    return router
