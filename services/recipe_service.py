# services/recipe_service.py
from fastapi import Depends, HTTPException, status
from models.dtos import NutritionLabelDTO, NutritionRowDTO, RecipeSessionDTO
from models.recipe_session import RecipeSession
from repositories.recipe_session_repository import RecipeSessionRepository
from services.food_lookup_service import FoodLookupService
from services.nutrition_aggregation_service import NutritionAggregationService

class RecipeService:
    """
    레시피 세션 단위 작업 (재료 추가/중량 변경/삭제/라벨 계산)
    세션은 session_id 로 찾아서 넘겨줌
    """
    def __init__(
        self,
        sessions: RecipeSessionRepository = Depends(RecipeSessionRepository),
        lookup: FoodLookupService = Depends(FoodLookupService),
        aggregator: NutritionAggregationService = Depends(NutritionAggregationService)
    ):
        self.sessions = sessions
        self.lookup = lookup
        self.aggregator = aggregator

    def create_session(self) -> RecipeSessionDTO:
        return self.sessions.create().to_dto()

    def get_session(self, session_id: str) -> RecipeSessionDTO:
        return self._get_or_404(session_id).to_dto()

    def delete_session(self, session_id: str):
        if not self.sessions.delete(session_id):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="找不到此食譜"
            )

    def add_ingredient(self, session_id: str, name: str) -> NutritionRowDTO:
        session = self._get_or_404(session_id)

        # 조회 실패(400/404/502)는 그대로 전파, 세션은 안 바뀜
        row = self.lookup.lookup(name)
        session.upsert_row(row)
        return row

    def update_serving(self, session_id: str, name: str, grams: float) -> RecipeSessionDTO:
        session = self._get_or_404(session_id)
        try:
            session.set_serving(name, grams)
        except KeyError:
            raise HTTPException(status_code=404, detail="食譜中沒有此食材")
        return session.to_dto()

    def remove_ingredient(self, session_id: str, name: str) -> RecipeSessionDTO:
        session = self._get_or_404(session_id)
        try:
            session.remove_row(name)
        except KeyError:
            raise HTTPException(status_code=404, detail="食譜中沒有此食材")
        return session.to_dto()

    def get_label(self, session_id: str) -> NutritionLabelDTO:
        session = self._get_or_404(session_id)
        # rows와 servings는 같은 시점 스냅샷이어야 함
        rows, servings = session.snapshot()
        return self.aggregator.aggregate(rows, servings)

    def _get_or_404(self, session_id: str) -> RecipeSession:
        session = self.sessions.get(session_id)
        if session is None:
            raise HTTPException(status_code=404, detail="找不到此食譜")
        return session
