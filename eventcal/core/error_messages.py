from __future__ import annotations

from typing import Final

FETCH_FAILED_TEXT: Final[str] = "이벤트 로딩 실패"
SAVE_FAILED_TEXT: Final[str] = "일정 저장 실패"
DELETE_FAILED_TEXT: Final[str] = "일정 삭제 실패"
LOAD_COMPLETE_TEXT: Final[str] = "일정 로딩 완료!"
EVENT_ADDED_TEXT: Final[str] = "일정이 추가되었습니다."
EVENT_UPDATED_TEXT: Final[str] = "일정이 수정되었습니다."
EVENT_DELETED_TEXT: Final[str] = "일정이 삭제되었습니다."
REQUIRED_FIELDS_TEXT: Final[str] = "필수 정보를 모두 입력해주세요."
TIME_SETTINGS_TEXT: Final[str] = "시간 설정을 확인해주세요."
START_TIME_ERROR_TEXT: Final[str] = "시작 시간은 종료 시간보다 빨라야 합니다."
END_TIME_ERROR_TEXT: Final[str] = "종료 시간은 시작 시간보다 늦어야 합니다."


def map_store_error_text(operation: str) -> str:
    normalized = operation.strip().lower()
    if normalized == "fetch":
        return FETCH_FAILED_TEXT
    if normalized == "delete":
        return DELETE_FAILED_TEXT
    return SAVE_FAILED_TEXT
