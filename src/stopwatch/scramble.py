"""Random 3x3 scrambles in outer-block-turn notation."""

import random

FACES = ("U", "D", "L", "R", "F", "B")
MODIFIERS = ("", "'", "2")
SCRAMBLE_LENGTH = 20


def generate_scramble(rng: random.Random | None = None,
                      length: int = SCRAMBLE_LENGTH) -> str:
    """Return ``length`` space-separated moves.

    Two consecutive moves never turn the same face; the face is redrawn
    until it differs from the previous one. Modifiers are independent.
    """
    rng = rng or random
    moves = []
    last_face = ""
    for _ in range(length):
        face = rng.choice(FACES)
        while face == last_face:
            face = rng.choice(FACES)
        last_face = face
        moves.append(face + rng.choice(MODIFIERS))
    return " ".join(moves)
