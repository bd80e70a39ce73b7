from __future__ import annotations

import os

import numpy as np
import pytest

# pygame이 창을 띄우지 않도록 합니다 (main/GameSession 테스트용)
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

from game.game_logic import GameEngine


class ScriptedRandom:
    """random.Random 대신 쓰는 결정적 난수원.

    randrange는 `index`(빈 칸 수를 넘으면 마지막 칸)를, random은 `roll`을 돌려줍니다.
    기본값은 "행 우선 순서로 첫 번째 빈 칸에 2"입니다.
    """

    def __init__(self, index: int = 0, roll: float = 0.5) -> None:
        self.index = index
        self.roll = roll
        self.calls: list[int] = []

    def randrange(self, n: int) -> int:
        self.calls.append(n)
        return min(self.index, n - 1)

    def random(self) -> float:
        return self.roll


@pytest.fixture()
def scripted_rng() -> ScriptedRandom:
    return ScriptedRandom()


@pytest.fixture()
def make_engine():
    """주어진 보드로 시작하는 엔진을 만듭니다. 새 타일은 항상 첫 빈 칸에 2로 생깁니다."""

    def _make(rows, undo_depth: int = 5, rng=None, **kwargs) -> GameEngine:
        engine = GameEngine(size=len(rows), undo_depth=undo_depth, rng=rng or ScriptedRandom(), **kwargs)
        engine.board = np.array(rows, dtype=int)
        return engine

    return _make
