import pygame

# --- 게임 규칙 기본값 ---
BOARD_SIZE = 4
UNDO_DEPTH = 5 # 0이면 undo 비활성화
WIN_VALUE = 2048
SETTLE_DELAY = 0.1 # 초, 이동 후 새 타일이 나타나기까지의 대기 시간

# --- 로깅 설정 ---
LOG_LEVEL = "INFO"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATEFMT = "%H:%M:%S"

# --- 화면 및 UI 설정 ---
SCREEN_WIDTH = 500
SCREEN_HEIGHT = 620
BACKGROUND_COLOR = (250, 248, 239)
GRID_COLOR = (187, 173, 160) # 게임 보드 배경색
FLASH_COLOR = (200, 60, 60) # 무효 이동 시 테두리 색
FLASH_DURATION = 0.15 # 초
FPS = 30

# --- 게임 보드 설정 ---
BOARD_PIXELS = 440 # 보드 크기와 무관하게 보드가 차지하는 픽셀 폭
TILE_PADDING = 8
BOARD_X_OFFSET = 30
BOARD_Y_OFFSET = 150

# --- 폰트 설정 ---
# 폰트 변수들을 선언만 하고, 실제 로딩은 init_fonts() 함수에서 수행합니다.
SCORE_FONT = None
UI_FONT = None
OVERLAY_FONT = None


def init_fonts():
    global SCORE_FONT, UI_FONT, OVERLAY_FONT
    pygame.font.init()
    SCORE_FONT = pygame.font.Font(None, 40)
    UI_FONT = pygame.font.Font(None, 26)
    OVERLAY_FONT = pygame.font.Font(None, 64)


# --- 타일 색상 ---
TILE_COLORS = {
    0: (205, 193, 180),
    2: (238, 228, 218),
    4: (237, 224, 200),
    8: (242, 177, 121),
    16: (245, 149, 99),
    32: (246, 124, 95),
    64: (246, 94, 59),
    128: (237, 207, 114),
    256: (237, 204, 97),
    512: (237, 200, 80),
    1024: (237, 197, 63),
    2048: (237, 194, 46),
    4096: (60, 58, 50),
    8192: (60, 58, 50),
}

TEXT_COLORS = {
    2: (119, 110, 101),
    4: (119, 110, 101),
}
LIGHT_TEXT_COLOR = (249, 246, 242)
