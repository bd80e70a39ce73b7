from collections import deque
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Tuple

import numpy as np

if TYPE_CHECKING:
    from game.game_logic import OverKind


@dataclass(frozen=True)
class GameState:
    """undo 단위가 되는 게임 상태의 스냅샷."""
    board: Tuple[Tuple[int, ...], ...]
    score: int
    moves: int
    won: bool
    over: Optional["OverKind"] = None

    @classmethod
    def capture(cls, board, score, moves, won, over=None):
        """현재 보드를 복사해 스냅샷을 만듭니다. 이후 보드가 바뀌어도 영향을 받지 않습니다."""
        return cls(
            board=tuple(tuple(int(v) for v in row) for row in board),
            score=int(score),
            moves=int(moves),
            won=bool(won),
            over=over,
        )

    def board_array(self):
        return np.array(self.board, dtype=int)


class UndoStack:
    """깊이가 제한된 스냅샷 스택. 가장 최근 항목이 먼저 나옵니다.

    depth가 0이면 아무것도 저장하지 않습니다.
    """

    def __init__(self, depth=5):
        self._depth = depth
        self._states = deque(maxlen=depth)

    @property
    def depth(self):
        return self._depth

    def push(self, state):
        if self._depth == 0:
            return
        # maxlen을 넘으면 가장 오래된 항목이 반대쪽 끝에서 밀려납니다
        self._states.appendleft(state)

    def pop(self):
        """가장 최근 스냅샷을 꺼냅니다. 비어 있으면 None."""
        return self._states.popleft() if self._states else None

    def peek(self):
        return self._states[0] if self._states else None

    def clear(self):
        self._states.clear()

    def __len__(self):
        return len(self._states)

    def __iter__(self):
        return iter(self._states)
