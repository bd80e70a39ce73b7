import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

import numpy as np

from game.errors import GameAlreadyOver, GameError, InvalidConfiguration
from game.history import GameState, UndoStack

logger = logging.getLogger(__name__)

DEFAULT_SIZE = 4
DEFAULT_UNDO_DEPTH = 5
WIN_VALUE = 2048
FOUR_PROBABILITY = 0.1


class Direction(Enum):
    UP = 0
    DOWN = 1
    LEFT = 2
    RIGHT = 3


class OverKind(Enum):
    """게임 종료 사유."""
    WON = "won"        # 승리 후 플레이어가 그만두기로 함
    STUCK = "stuck"    # 보드가 가득 차고 합칠 수 있는 타일이 없음
    ENDED = "ended"    # 호출자가 무조건 종료시킴


@dataclass(frozen=True)
class MoveResult:
    dirty: bool
    score_delta: int = 0
    won_transition: bool = False
    over: Optional[OverKind] = None


@dataclass(frozen=True)
class GameView:
    """렌더러에 넘겨주는 읽기 전용 스냅샷."""
    board: Tuple[Tuple[int, ...], ...]
    score: int
    moves: int
    won: bool
    over: Optional[OverKind]

    @property
    def size(self):
        return len(self.board)


def slide_line(line):
    """한 줄을 이동 방향 순서대로 훑으며 밀고 합칩니다.

    line은 행이나 열을 이동 방향 순서로 본 뷰(numpy 슬라이스 또는 리스트)이며
    제자리에서 수정됩니다. 한 번 합쳐진 타일은 같은 이동에서 다시 합쳐지지 않습니다.

    Returns:
        (dirty, score_gain, merged_values)
    """
    target = 0
    pending = 0
    gain = 0
    merged = []
    dirty = False
    for i in range(len(line)):
        x = int(line[i])
        if x == 0:
            continue
        if x == pending:
            line[target - 1] = x * 2
            line[i] = 0
            gain += x * 2
            merged.append(x * 2)
            pending = 0
            dirty = True
        else:
            if i != target:
                line[target] = x
                line[i] = 0
                dirty = True
            pending = x
            target += 1
    return dirty, gain, merged


class GameEngine:
    """N×N 2048 게임의 상태와 규칙을 담당합니다.

    보드, 점수, 이동 횟수, 승리/종료 플래그와 undo 스택을 인스턴스가 소유하므로
    여러 게임을 동시에 독립적으로 돌릴 수 있습니다.

    Args:
        size: 보드 한 변의 길이 (2 이상).
        undo_depth: 보관할 undo 스냅샷 수. 0이면 undo 비활성화.
        rng: random.Random 호환 난수원. 테스트에서는 시드를 고정해 넘깁니다.
        win_value: 처음 만들어지면 승리로 치는 타일 값.
        on_settle: move()에서 병합 직후, 새 타일 생성 전에 호출되는 대기 훅.
        continue_after_win: 첫 승리 시 호출됩니다. False를 반환하면 게임을 멈춥니다.
    """

    def __init__(self, size=DEFAULT_SIZE, undo_depth=DEFAULT_UNDO_DEPTH, rng=None,
                 win_value=WIN_VALUE, on_settle=None, continue_after_win=None):
        self.rng = rng if rng is not None else random.Random()
        self.win_value = win_value
        self.on_settle = on_settle
        self.continue_after_win = continue_after_win
        self.size = None
        self.undo_depth = None
        self.new_game(size, undo_depth)

    # --- 게임 수명 주기 ---

    def new_game(self, size=None, undo_depth=None):
        """빈 보드에서 새 게임을 시작하고 타일 두 개를 생성합니다."""
        size = self.size if size is None else size
        undo_depth = self.undo_depth if undo_depth is None else undo_depth
        if not isinstance(size, (int, np.integer)) or isinstance(size, bool) or size < 2:
            raise InvalidConfiguration(f"보드 크기는 2 이상의 정수여야 합니다: {size!r}")
        if not isinstance(undo_depth, (int, np.integer)) or isinstance(undo_depth, bool) or undo_depth < 0:
            raise InvalidConfiguration(f"undo 깊이는 0 이상의 정수여야 합니다: {undo_depth!r}")

        self.size = int(size)
        self.undo_depth = int(undo_depth)
        self.board = np.zeros((self.size, self.size), dtype=int)
        self.score = 0
        self.moves = 0
        self.won = False
        self.over = None
        self.history = UndoStack(self.undo_depth)
        self.spawn_tile()
        self.spawn_tile()
        logger.info("새 게임: size=%d, undo_depth=%d", self.size, self.undo_depth)
        return self.view()

    def stop_after_win(self):
        """승리 후 플레이어가 계속하지 않기로 했을 때 호출합니다."""
        if not self.won:
            raise GameError("아직 승리하지 않은 게임은 승리 상태로 끝낼 수 없습니다")
        self.over = OverKind.WON
        logger.info("승리 후 종료: score=%d, moves=%d", self.score, self.moves)

    def end_game(self):
        self.over = OverKind.ENDED
        logger.info("게임 강제 종료: score=%d, moves=%d", self.score, self.moves)

    # --- 이동 ---

    def move(self, direction):
        """주어진 방향으로 이동하고, 보드가 바뀌었다면 새 타일을 추가합니다.

        Raises:
            GameAlreadyOver: 게임이 이미 끝난 경우. 상태는 바뀌지 않습니다.
        """
        result = self.apply_move_without_spawn(direction)
        if not result.dirty:
            return result

        if self.on_settle is not None:
            self.on_settle()
        if result.won_transition and self.continue_after_win is not None:
            if not self.continue_after_win(self.view()):
                self.stop_after_win()
        if self.over is None:
            self.spawn_tile()

        return MoveResult(
            dirty=True,
            score_delta=result.score_delta,
            won_transition=result.won_transition,
            over=self.over,
        )

    def apply_move_without_spawn(self, direction):
        """밀기/합치기만 수행합니다. 새 타일 생성은 호출자가 spawn_tile()로 합니다."""
        direction = Direction(direction)
        if self.over is not None:
            raise GameAlreadyOver(self.over)

        snapshot = self._snapshot()
        dirty = False
        gain = 0
        merged = []
        for line in self._lines(direction):
            line_dirty, line_gain, line_merged = slide_line(line)
            dirty = dirty or line_dirty
            gain += line_gain
            merged.extend(line_merged)

        if not dirty:
            logger.debug("무효 이동: %s", direction.name)
            return MoveResult(dirty=False)

        self.history.push(snapshot)
        self.moves += 1
        self.score += gain

        won_transition = False
        if not self.won and self.win_value in merged:
            self.won = True
            won_transition = True
            logger.info("%d 타일 달성! score=%d, moves=%d", self.win_value, self.score, self.moves)

        logger.debug("이동 %s: +%d (score=%d)", direction.name, gain, self.score)
        return MoveResult(dirty=True, score_delta=gain, won_transition=won_transition, over=self.over)

    def _lines(self, direction):
        """이동 방향 순서로 본 각 행/열의 뷰. 뷰에 쓰면 보드가 바로 바뀝니다."""
        b = self.board
        n = self.size
        if direction is Direction.LEFT:
            return [b[r, :] for r in range(n)]
        if direction is Direction.RIGHT:
            return [b[r, ::-1] for r in range(n)]
        if direction is Direction.UP:
            return [b[:, c] for c in range(n)]
        return [b[::-1, c] for c in range(n)]

    # --- 타일 생성 / 종료 판정 ---

    def spawn_tile(self):
        """빈 칸 하나를 골라 2(90%) 또는 4(10%)를 놓습니다.

        Returns:
            (row, col, value), 빈 칸이 없거나 게임이 끝났으면 None.
        """
        if self.over is not None:
            return None
        empty = np.flatnonzero(self.board == 0)
        if len(empty) == 0:
            return None

        k = self.rng.randrange(len(empty))
        value = 4 if self.rng.random() < FOUR_PROBABILITY else 2
        row, col = divmod(int(empty[k]), self.size)
        self.board[row, col] = value

        if len(empty) == 1 and not self._has_merge():
            self.over = OverKind.STUCK
            logger.info("게임 오버: score=%d, moves=%d, max=%d", self.score, self.moves, self.max_tile())
        return row, col, value

    def _has_merge(self):
        b = self.board
        horizontal = (b[:, :-1] == b[:, 1:]) & (b[:, 1:] != 0)
        vertical = (b[:-1, :] == b[1:, :]) & (b[1:, :] != 0)
        return bool(horizontal.any() or vertical.any())

    def has_moves(self):
        """현재 보드에서 가능한 움직임이 있는지 확인합니다."""
        return self.empty_count() > 0 or self._has_merge()

    # --- undo ---

    def _snapshot(self):
        return GameState.capture(self.board, self.score, self.moves, self.won, self.over)

    def undo(self):
        """가장 최근 스냅샷으로 되돌립니다. 되돌릴 것이 없으면 False."""
        state = self.history.pop()
        if state is None:
            return False
        self.board = state.board_array()
        self.score = state.score
        self.moves = state.moves
        self.won = state.won
        self.over = state.over
        logger.debug("undo: score=%d, moves=%d (남은 %d)", self.score, self.moves, len(self.history))
        return True

    restore = undo

    def undo_available(self):
        return len(self.history) > 0

    # --- 조회 ---

    def view(self):
        return GameView(
            board=tuple(tuple(int(v) for v in row) for row in self.board),
            score=self.score,
            moves=self.moves,
            won=self.won,
            over=self.over,
        )

    def cell(self, row, col):
        if not (0 <= row < self.size and 0 <= col < self.size):
            raise IndexError(f"보드 밖의 좌표입니다: ({row}, {col})")
        return int(self.board[row, col])

    def empty_count(self):
        return int(np.count_nonzero(self.board == 0))

    def max_tile(self):
        return int(self.board.max())
