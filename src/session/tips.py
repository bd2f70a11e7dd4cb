"""Practice tips shown beside the timer, rotated after every saved solve."""

import random
from typing import NamedTuple


class Tip(NamedTuple):
    title: str
    text: str


TIPS = (
    Tip("Look Ahead",
        "Relax your wrists and look ahead during the solve instead of "
        "staring only at the pieces you are turning."),
    Tip("Cross",
        "Plan the whole cross during inspection. Close your eyes and "
        "picture where each edge goes."),
    Tip("Efficient F2L",
        "Avoid regrips. Learn to insert F2L pairs from different angles."),
    Tip("Inspection is key",
        "Use all of your inspection time. Up to 15 seconds is allowed and "
        "it makes a huge difference to the start of the solve."),
    Tip("Turn slowly",
        "Turning slowly without pauses is often faster than turning fast "
        "with long pauses to search for pieces."),
    Tip("Learning algorithms",
        "Do not learn algorithms only from the letters. Watch how the "
        "pieces move and build muscle memory."),
    Tip("Focused practice",
        "Run sessions dedicated to a single step, such as only crosses or "
        "only slow F2L."),
)


def random_tip(rng: random.Random | None = None, tips=TIPS) -> Tip:
    return (rng or random).choice(tips)
