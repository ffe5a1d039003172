#routers/food_router.py
from fastapi import APIRouter, Depends
from services.food_lookup_service import FoodLookupService
from models.dtos import NutritionRowDTO

router = APIRouter(
    prefix="/foods",
    tags=["Foods API"]
)

# -------------------------------------------------------------------
# 식재료 1개 조회 (세션 없이)
# -------------------------------------------------------------------
@router.get("/search", response_model=NutritionRowDTO, response_model_exclude_none=True)
def search_food(
    name: str = "",
    lookup_service: FoodLookupService = Depends(FoodLookupService)
):
    """
    식재료 이름으로 식약서 데이터를 조회해서 100g 기준 영양 정보를 반환
    (빈 이름 400 / 결과 없음 404 / 외부 API 실패 502)
    """
    return lookup_service.lookup(name)
