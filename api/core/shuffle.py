from __future__ import annotations

import random
from typing import List, Sequence, Tuple, TypeVar

T = TypeVar("T")

_FNV_OFFSET_BASIS = 2166136261
_FNV_PRIME = 16777619

TOP_BUCKET = (0, 60)
MID_BUCKET = (60, 220)


def fnv1a_32(text: str) -> int:
    value = _FNV_OFFSET_BASIS
    for byte in text.encode("utf-8"):
        value ^= byte
        value = (value * _FNV_PRIME) & 0xFFFFFFFF
    return value


def derive_seed(session_id: str, day: str, reroll: int) -> int:
    return fnv1a_32(f"{session_id}:{day}:{reroll}")


def shuffle_buckets(ranked: Sequence[T], seed: int) -> Tuple[List[T], List[T]]:
    """
    Split a best-first list into the top and mid rank buckets and shuffle each.

    Both buckets draw from one generator and the top bucket is always shuffled
    first. Swapping the order changes every deck for a given seed.
    """
    top = list(ranked[TOP_BUCKET[0] : TOP_BUCKET[1]])
    mid = list(ranked[MID_BUCKET[0] : MID_BUCKET[1]])
    rng = random.Random(seed)
    rng.shuffle(top)
    rng.shuffle(mid)
    return top, mid
