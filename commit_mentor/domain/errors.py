class RepositoryAccessError(RuntimeError):
    """저장소를 열 수 없거나 커밋/트리를 해석할 수 없을 때"""

    def __init__(self, message: str, path: str = ""):
        super().__init__(message)
        self.path = path


class CommitTraversalError(RuntimeError):
    """한 커밋의 diff 순회 중 발생한 오류"""

    def __init__(self, commit_id: str, message: str):
        super().__init__(f"커밋 {commit_id[:12]} 분석 실패: {message}")
        self.commit_id = commit_id


class ReviewRequestError(RuntimeError):
    """생성형 텍스트 서비스 호출 실패 (네트워크, 인증, 응답 형식)"""
