from __future__ import annotations

"""Randomness helpers for question selection and seeding."""

import os
import random
from typing import List, Sequence, TypeVar

import numpy as np

T = TypeVar("T")


def seed_if_needed() -> None:
    """Seed RNGs if the SEED env var is set (reproducible missions)."""
    seed = os.environ.get("SEED")
    if seed is None:
        return
    try:
        s = int(seed)
    except ValueError:
        return
    random.seed(s)
    np.random.seed(s)


def pick_one(items: Sequence[T], rng: random.Random | None = None) -> T:
    return (rng or random).choice(list(items))


def shuffled(items: Sequence[T], rng: random.Random | None = None) -> List[T]:
    out = list(items)
    (rng or random).shuffle(out)
    return out
