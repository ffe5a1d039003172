# services/food_lookup_service.py
from fastapi import Depends, HTTPException
from models.dtos import NutritionRowDTO
from repositories.food_repository import FoodRepository
from services.record_selection_service import RecordSelectionService
from services.food_normalization_service import FoodNormalizationService

class FoodLookupService:
    """
    식재료 이름 1개 -> 100g 기준 NutritionRowDTO
    (API 조회 -> 첫 번째 샘플만 선택 -> 정규화)
    """
    def __init__(
        self,
        repo: FoodRepository = Depends(FoodRepository),
        selector: RecordSelectionService = Depends(RecordSelectionService),
        normalizer: FoodNormalizationService = Depends(FoodNormalizationService)
    ):
        self.repo = repo
        self.selector = selector
        self.normalizer = normalizer

    def lookup(self, name: str) -> NutritionRowDTO:
        query = (name or "").strip()
        if not query:
            raise HTTPException(status_code=400, detail="請提供食材名稱")

        # 1. [I/O] 원본 레코드 조회 (502는 repo에서 발생)
        records = self.repo.fetch_records(query)

        # 2. 첫 번째 샘플 이름의 레코드만 남김
        selected = self.selector.select_first_sample(records)

        # 3. 정규화 (레코드 없으면 None)
        row = self.normalizer.normalize(selected)
        if row is None:
            raise HTTPException(status_code=404, detail="查無此食材")

        print(f"[Service] '{query}' -> '{row.name}'")
        return row
