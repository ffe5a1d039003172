# models/recipe_session.py
import threading
import uuid
from typing import Callable, Dict, List, Optional, Tuple

from models.dtos import NutritionRowDTO, RecipeSessionDTO, SessionEvent

DEFAULT_SERVING_GRAMS = 100.0

# (event, 재료 이름) -> None. cleared 이벤트는 이름이 None
SessionListener = Callable[[SessionEvent, Optional[str]], None]


class RecipeSession:
    """
    [작업 문서] 레시피 한 개의 재료(rows)와 중량 표(servings)

    - 이름당 row는 하나만 (같은 이름 다시 넣으면 제자리 덮어쓰기)
    - servings의 키는 항상 rows에 있는 이름
    - 중량은 0 이상으로 보정
    - 변경될 때마다 version 증가 + 구독자에게 알림
    - sync 엔드포인트가 스레드풀에서 동시에 들어올 수 있어서 변경/읽기는 lock 안에서
    """

    def __init__(self, session_id: Optional[str] = None):
        self.session_id = session_id or uuid.uuid4().hex
        self.version = 0
        self._rows: Dict[str, NutritionRowDTO] = {}
        self._servings: Dict[str, float] = {}
        self._listeners: List[SessionListener] = []
        self._lock = threading.Lock()

    @property
    def rows(self) -> List[NutritionRowDTO]:
        return self.snapshot()[0]

    @property
    def servings(self) -> Dict[str, float]:
        return self.snapshot()[1]

    def snapshot(self) -> Tuple[List[NutritionRowDTO], Dict[str, float]]:
        """rows와 servings를 한 번에 복사 (둘 사이에 다른 변경이 끼지 않음)"""
        with self._lock:
            return list(self._rows.values()), dict(self._servings)

    def get_row(self, name: str) -> Optional[NutritionRowDTO]:
        with self._lock:
            return self._rows.get(name)

    def upsert_row(self, row: NutritionRowDTO) -> None:
        with self._lock:
            # dict는 기존 키에 대입해도 순서 유지됨
            self._rows[row.name] = row
            self._servings.setdefault(row.name, DEFAULT_SERVING_GRAMS)
            self.version += 1
        self._notify("row_upserted", row.name)

    def set_serving(self, name: str, grams: float) -> float:
        with self._lock:
            if name not in self._rows:
                raise KeyError(name)
            clamped = max(0.0, float(grams))
            self._servings[name] = clamped
            self.version += 1
        self._notify("serving_changed", name)
        return clamped

    def remove_row(self, name: str) -> None:
        with self._lock:
            if name not in self._rows:
                raise KeyError(name)
            del self._rows[name]
            self._servings.pop(name, None)
            self.version += 1
        self._notify("row_removed", name)

    def clear(self) -> None:
        with self._lock:
            self._rows.clear()
            self._servings.clear()
            self.version += 1
        self._notify("cleared", None)

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """구독 등록. 반환된 함수를 호출하면 구독 해제"""
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe():
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, event: SessionEvent, name: Optional[str]) -> None:
        # 콜백은 lock 밖에서 호출 (콜백 안에서 세션을 다시 읽거나 구독 해제 가능)
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            listener(event, name)

    def to_dto(self) -> RecipeSessionDTO:
        with self._lock:
            version = self.version
            rows = list(self._rows.values())
            servings = dict(self._servings)
        return RecipeSessionDTO(
            session_id=self.session_id,
            version=version,
            rows=rows,
            servings=servings,
        )
