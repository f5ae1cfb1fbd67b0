import random

CHARACTERS = ("cat", "defuse", "shuffle", "exploding")
DECK_SIZE = 5


class DeckGenerator:
    """Draws a deck of character names, uniformly and with replacement.

    The random source is injected so a process can seed it once at startup
    and tests can pin it to a fixed seed.
    """

    def __init__(self, rng: random.Random, size: int = DECK_SIZE):
        self.rng = rng
        self.size = size

    def generate(self) -> list[str]:
        return self.rng.choices(CHARACTERS, k=self.size)


def make_deck_generator(rng: random.Random, size: int = DECK_SIZE) -> DeckGenerator:
    return DeckGenerator(rng=rng, size=size)
