import argparse
import logging
import random
import sys

import pygame
import config

from game.errors import GameAlreadyOver, InvalidConfiguration
from game.game_logic import Direction, GameEngine
from ui.renderer import GameRenderer

logger = logging.getLogger("2048")

KEY_DIRECTIONS = {
    pygame.K_UP: Direction.UP,
    pygame.K_w: Direction.UP,
    pygame.K_DOWN: Direction.DOWN,
    pygame.K_s: Direction.DOWN,
    pygame.K_LEFT: Direction.LEFT,
    pygame.K_a: Direction.LEFT,
    pygame.K_RIGHT: Direction.RIGHT,
    pygame.K_d: Direction.RIGHT,
}
UNDO_KEYS = (pygame.K_u, pygame.K_BACKSPACE)
QUIT_KEYS = (pygame.K_ESCAPE, pygame.K_q)


class GameSession:
    """키 입력을 엔진 명령으로 바꾸고, 이동 후 대기(settle)와 승리 확인을 관리합니다.

    상태:
        PLAYING    - 입력 대기
        SETTLING   - 병합은 끝났고 새 타일 생성 전 (settle_delay 동안)
        WIN_PROMPT - 첫 승리 후 계속할지(Y/N) 묻는 중
    """

    def __init__(self, engine, settle_delay=config.SETTLE_DELAY):
        self.engine = engine
        self.settle_delay = settle_delay
        self.state = "PLAYING"
        self.running = True
        self.pending = None
        self.settle_left = 0.0
        self.last_spawn = None
        self.flash_left = 0.0
        self.bells = 0

    def handle_key(self, key):
        if key in QUIT_KEYS:
            self.quit()
            return

        if self.state == "WIN_PROMPT":
            if key == pygame.K_y:
                self._finish_move(keep_going=True)
            elif key == pygame.K_n:
                self._finish_move(keep_going=False)
            return
        if self.state == "SETTLING":
            return

        if key == pygame.K_n:
            self.new_game()
        elif key in UNDO_KEYS:
            self.undo()
        elif key in KEY_DIRECTIONS:
            self.move(KEY_DIRECTIONS[key])

    def move(self, direction):
        try:
            result = self.engine.apply_move_without_spawn(direction)
        except GameAlreadyOver:
            self.bell()
            return
        if not result.dirty:
            self.bell()
            return

        self.pending = result
        self.last_spawn = None
        if self.settle_delay > 0:
            self.state = "SETTLING"
            self.settle_left = self.settle_delay
        else:
            self._after_settle()

    def update(self, dt):
        if self.flash_left > 0:
            self.flash_left = max(0.0, self.flash_left - dt)
        if self.state == "SETTLING":
            self.settle_left -= dt
            if self.settle_left <= 0:
                self._after_settle()

    def _after_settle(self):
        if self.pending is not None and self.pending.won_transition:
            self.state = "WIN_PROMPT"
        else:
            self._finish_move(keep_going=True)

    def _finish_move(self, keep_going):
        if not keep_going:
            self.engine.stop_after_win()
        elif self.engine.over is None:
            self.last_spawn = self.engine.spawn_tile()
        self.pending = None
        self.state = "PLAYING"
        if self.engine.over is not None:
            logger.info("게임 종료 (%s): score=%d, moves=%d, max=%d",
                        self.engine.over.name, self.engine.score, self.engine.moves, self.engine.max_tile())

    def undo(self):
        if self.engine.undo():
            self.last_spawn = None
        else:
            self.bell()

    def new_game(self):
        self.engine.new_game()
        self.pending = None
        self.last_spawn = None
        self.state = "PLAYING"

    def quit(self):
        if self.engine.over is None:
            self.engine.end_game()
        self.running = False

    def bell(self):
        self.bells += 1
        self.flash_left = config.FLASH_DURATION


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="2048 - 타일 합치기 퍼즐")
    parser.add_argument("--size", type=int, default=config.BOARD_SIZE,
                        help="보드 한 변의 길이 (2 이상)")
    parser.add_argument("--undo-depth", type=int, default=config.UNDO_DEPTH,
                        help="보관할 undo 단계 수, 0이면 비활성화")
    parser.add_argument("--seed", type=int, default=None,
                        help="타일 생성 난수 시드")
    parser.add_argument("--settle-delay", type=float, default=config.SETTLE_DELAY,
                        help="이동 후 새 타일이 나타나기까지의 대기 시간(초)")
    parser.add_argument("--log-level", default=config.LOG_LEVEL,
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser, parser.parse_args(argv)


def main(argv=None):
    parser, args = parse_args(argv)

    # --- 로깅 설정 ---
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format=config.LOG_FORMAT,
        datefmt=config.LOG_DATEFMT,
    )

    try:
        engine = GameEngine(size=args.size, undo_depth=args.undo_depth,
                            rng=random.Random(args.seed), win_value=config.WIN_VALUE)
    except InvalidConfiguration as e:
        parser.error(str(e))
    session = GameSession(engine, settle_delay=max(0.0, args.settle_delay))

    pygame.init()
    screen = pygame.display.set_mode((config.SCREEN_WIDTH, config.SCREEN_HEIGHT))
    pygame.display.set_caption("2048")
    clock = pygame.time.Clock()
    config.init_fonts()
    renderer = GameRenderer(screen)

    logger.info("시작: size=%d, undo_depth=%d, seed=%s", args.size, args.undo_depth, args.seed)

    try:
        while session.running:
            dt = clock.tick(config.FPS) / 1000.0

            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    session.quit()
                elif event.type == pygame.KEYDOWN:
                    session.handle_key(event.key)

            session.update(dt)

            view = engine.view()
            renderer.board_renderer.set_board(view.board, session.last_spawn)
            renderer.draw(view, session.state, flash=session.flash_left > 0,
                          undo_left=len(engine.history))
            pygame.display.flip()
    except KeyboardInterrupt:
        session.quit()
    finally:
        logger.info("최종 점수: %d (moves=%d, max=%d)", engine.score, engine.moves, engine.max_tile())
        pygame.quit()
    return 0


if __name__ == '__main__':
    sys.exit(main())
