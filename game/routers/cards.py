from fastapi import APIRouter
from pydantic import BaseModel, Field

from game.services.deck import DeckGenerator


class CardsResponse(BaseModel):
    cards: list[str] = Field(..., description="Character names in draw order")


def make_cards_router(deck_generator: DeckGenerator) -> APIRouter:
    router = APIRouter(tags=["cards"])

    @router.get("/get-random-cards", response_model=CardsResponse)
    async def get_random_cards():
        return {"cards": deck_generator.generate()}

    return router
