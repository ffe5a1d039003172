# repositories/recipe_session_repository.py
import threading
from typing import Dict, Optional

from models.recipe_session import RecipeSession

# 프로세스 메모리에만 보관 (서버 재시작하면 사라짐)
# sync 엔드포인트는 스레드풀에서 돌기 때문에 dict 접근은 lock으로 보호
_SESSIONS: Dict[str, RecipeSession] = {}
_LOCK = threading.Lock()


class RecipeSessionRepository:
    def __init__(self):
        self.store = _SESSIONS

    def create(self) -> RecipeSession:
        session = RecipeSession()
        with _LOCK:
            self.store[session.session_id] = session
        print(f"[Repo] 세션 생성: {session.session_id}")
        return session

    def get(self, session_id: str) -> Optional[RecipeSession]:
        with _LOCK:
            return self.store.get(session_id)

    def delete(self, session_id: str) -> bool:
        with _LOCK:
            removed = self.store.pop(session_id, None)
        return removed is not None
