import pygame
import config
from game.game_logic import OverKind


def tile_size_for(board_size):
    """보드 크기에 맞춰 타일 한 칸의 픽셀 크기를 계산합니다."""
    return (config.BOARD_PIXELS - (board_size + 1) * config.TILE_PADDING) // board_size


class Tile:
    def __init__(self, value, pos, tile_size):
        self.value = value
        self.pos = pos  # board 위치 (r, c)
        self.tile_size = tile_size
        self.pixel_pos = self._get_pixel_pos(pos)
        self.is_new = False

    def _get_pixel_pos(self, pos):
        """보드 좌표 (r, c)를 픽셀 좌표로 변환"""
        r, c = pos
        x = config.TILE_PADDING + c * (self.tile_size + config.TILE_PADDING)
        y = config.TILE_PADDING + r * (self.tile_size + config.TILE_PADDING)
        return [x, y]

    def draw(self, surface):
        # 새로 생긴 타일은 조금 작게 그려 눈에 띄게 합니다
        scale = 0.85 if self.is_new else 1.0
        size = self.tile_size * scale
        offset = (self.tile_size - size) / 2
        x, y = self.pixel_pos
        rect = pygame.Rect(x + offset, y + offset, size, size)
        pygame.draw.rect(surface, config.TILE_COLORS.get(self.value, (60, 58, 50)), rect, border_radius=3)

        if self.value != 0:
            text_color = config.TEXT_COLORS.get(self.value, config.LIGHT_TEXT_COLOR)
            digits = len(str(self.value))
            font_size = int(self.tile_size * (0.55 if digits <= 2 else 0.45 if digits == 3 else 0.35))
            font = pygame.font.Font(None, max(16, font_size))
            text_surface = font.render(str(self.value), True, text_color)
            text_rect = text_surface.get_rect(center=rect.center)
            surface.blit(text_surface, text_rect)


class BoardRenderer:
    def __init__(self):
        self.tiles = []
        self.size = 0

    def set_board(self, board, new_tile=None):
        """GameView.board(행 튜플들)로 타일 목록을 새로 만듭니다."""
        self.size = len(board)
        tile_size = tile_size_for(self.size)
        self.tiles = []
        for r, row in enumerate(board):
            for c, val in enumerate(row):
                if val == 0:
                    continue
                tile = Tile(val, (r, c), tile_size)
                tile.is_new = new_tile is not None and new_tile[:2] == (r, c)
                self.tiles.append(tile)

    def draw(self, surface, x_offset, y_offset):
        board_surface = pygame.Surface((config.BOARD_PIXELS, config.BOARD_PIXELS))
        board_surface.fill(config.GRID_COLOR)
        tile_size = tile_size_for(self.size)

        for r in range(self.size):
            for c in range(self.size):
                tile_x = config.TILE_PADDING + c * (tile_size + config.TILE_PADDING)
                tile_y = config.TILE_PADDING + r * (tile_size + config.TILE_PADDING)
                pygame.draw.rect(board_surface, config.TILE_COLORS[0],
                               (tile_x, tile_y, tile_size, tile_size),
                               border_radius=3)

        for tile in self.tiles:
            tile.draw(board_surface)

        surface.blit(board_surface, (x_offset, y_offset))


class GameRenderer:
    def __init__(self, screen):
        self.screen = screen
        self.board_renderer = BoardRenderer()

    def draw(self, view, status, flash=False, undo_left=0):
        """한 프레임을 그립니다. status는 GameSession의 상태 문자열입니다."""
        self.screen.fill(config.BACKGROUND_COLOR)
        x, y = config.BOARD_X_OFFSET, config.BOARD_Y_OFFSET

        score_text = config.SCORE_FONT.render(f"Score: {view.score}", True, (0, 0, 0))
        self.screen.blit(score_text, (x, 30))
        moves_text = config.UI_FONT.render(f"Moves: {view.moves}   Undo: {undo_left}", True, (80, 80, 80))
        self.screen.blit(moves_text, (x, 80))
        help_text = config.UI_FONT.render("Arrows/WASD move  U undo  N new  Q quit", True, (120, 120, 120))
        self.screen.blit(help_text, (x, 110))

        self.board_renderer.draw(self.screen, x, y)

        if flash:
            rect = pygame.Rect(x - 4, y - 4, config.BOARD_PIXELS + 8, config.BOARD_PIXELS + 8)
            pygame.draw.rect(self.screen, config.FLASH_COLOR, rect, width=4, border_radius=5)

        if status == "WIN_PROMPT":
            self.draw_game_status_overlay("Keep going? (Y/N)", x, y, victory=True)
        elif view.over is not None:
            if view.over is OverKind.WON:
                self.draw_game_status_overlay("VICTORY!", x, y, victory=True)
            else:
                self.draw_game_status_overlay("GAME OVER", x, y)

    def draw_game_status_overlay(self, text, x_offset, y_offset, victory=False):
        overlay = pygame.Surface((config.BOARD_PIXELS, config.BOARD_PIXELS), pygame.SRCALPHA)
        if victory:
            overlay.fill((237, 194, 46, 128))
            color = (255, 255, 255)
        else:
            overlay.fill((255, 255, 255, 128))
            color = (119, 110, 101)
        text_surface = config.OVERLAY_FONT.render(text, True, color)
        text_rect = text_surface.get_rect(center=(config.BOARD_PIXELS / 2, config.BOARD_PIXELS / 2))
        overlay.blit(text_surface, text_rect)
        self.screen.blit(overlay, (x_offset, y_offset))
