"""Capture & escape mechanics.

Both rolls share one shape: compute a clamped probability, draw a value in
[0, 1) (or take an injected one) and succeed iff ``roll < rate``.
"""
from __future__ import annotations
import random
from dataclasses import dataclass
from typing import Optional

BASE_CAPTURE_RATE = 0.1
HP_BONUS_MAX = 0.4
MIN_CAPTURE_RATE = 0.05
MAX_CAPTURE_RATE = 0.9
GUARANTEED_CAPTURE_BONUS = 100  # item bonus (percent) that never fails

BASE_ESCAPE_RATE = 0.5
MIN_ESCAPE_RATE = 0.1
MAX_ESCAPE_RATE = 0.9
ESCAPE_ATTEMPT_BONUS = 0.1

@dataclass(frozen=True)
class CaptureResult:
    success: bool
    capture_rate: float

@dataclass(frozen=True)
class EscapeResult:
    success: bool
    escape_rate: float


def calculate_capture_rate(current_hp: int, max_hp: int, item_bonus: float = 0) -> float:
    if item_bonus >= GUARANTEED_CAPTURE_BONUS:
        return 1.0
    # HP above max counts as full
    hp_ratio = max(0.0, min(1.0, current_hp / max_hp))
    hp_bonus = (1 - hp_ratio) * HP_BONUS_MAX
    rate = BASE_CAPTURE_RATE + hp_bonus + item_bonus / 100
    return max(MIN_CAPTURE_RATE, min(MAX_CAPTURE_RATE, rate))


def attempt_capture(current_hp: int, max_hp: int, item_bonus: float = 0,
                    random_value: Optional[float] = None) -> CaptureResult:
    rate = calculate_capture_rate(current_hp, max_hp, item_bonus)
    roll = random.random() if random_value is None else random_value
    return CaptureResult(success=roll < rate, capture_rate=rate)


def calculate_escape_rate(my_speed: int, enemy_speed: int, escape_attempts: int = 0) -> float:
    """Each earlier failed attempt in the same battle adds 10%."""
    speed_bonus = (my_speed - enemy_speed) / 100
    attempt_bonus = escape_attempts * ESCAPE_ATTEMPT_BONUS
    rate = BASE_ESCAPE_RATE + speed_bonus + attempt_bonus
    return max(MIN_ESCAPE_RATE, min(MAX_ESCAPE_RATE, rate))


def attempt_escape(my_speed: int, enemy_speed: int, escape_attempts: int = 0,
                   random_value: Optional[float] = None) -> EscapeResult:
    rate = calculate_escape_rate(my_speed, enemy_speed, escape_attempts)
    roll = random.random() if random_value is None else random_value
    return EscapeResult(success=roll < rate, escape_rate=rate)

__all__ = [
    "CaptureResult","EscapeResult","calculate_capture_rate","attempt_capture",
    "calculate_escape_rate","attempt_escape",
    "BASE_CAPTURE_RATE","HP_BONUS_MAX","MIN_CAPTURE_RATE","MAX_CAPTURE_RATE","GUARANTEED_CAPTURE_BONUS",
    "BASE_ESCAPE_RATE","MIN_ESCAPE_RATE","MAX_ESCAPE_RATE","ESCAPE_ATTEMPT_BONUS",
]
