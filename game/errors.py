class GameError(Exception):
    """게임 엔진에서 발생하는 모든 예외의 기본 클래스입니다."""


class InvalidConfiguration(GameError, ValueError):
    """보드 크기나 undo 깊이가 잘못되었을 때 발생합니다."""


class GameAlreadyOver(GameError):
    """이미 끝난 게임에서 이동을 시도했을 때 발생합니다.

    치명적인 오류가 아니므로 호출자는 보통 벨 소리 같은 피드백만 주고 넘어갑니다.
    """

    def __init__(self, kind):
        super().__init__(f"게임이 이미 종료되었습니다 ({kind.name})")
        self.kind = kind
