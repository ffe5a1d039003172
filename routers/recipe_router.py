#routers/recipe_router.py
from fastapi import APIRouter, Depends, status
from services.recipe_service import RecipeService
from models.dtos import (
    IngredientAddRequest,
    ServingUpdateRequest,
    NutritionRowDTO,
    NutritionLabelDTO,
    RecipeSessionDTO
)

router = APIRouter(
    prefix="/recipes",
    tags=["Recipe API"]
)

# ===================================================================
# 세션 생성 / 조회 / 삭제
# ===================================================================
@router.post("", response_model=RecipeSessionDTO, status_code=status.HTTP_201_CREATED, summary="새 레시피 세션")
def create_recipe(service: RecipeService = Depends(RecipeService)):
    return service.create_session()

@router.get("/{session_id}", response_model=RecipeSessionDTO, summary="레시피 세션 조회")
def get_recipe(session_id: str, service: RecipeService = Depends(RecipeService)):
    return service.get_session(session_id)

@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT, summary="레시피 세션 삭제")
def delete_recipe(session_id: str, service: RecipeService = Depends(RecipeService)):
    service.delete_session(session_id)
    return None # 204 No Content

# ===================================================================
# 재료 추가 / 중량 변경 / 삭제
# ===================================================================
@router.post(
    "/{session_id}/ingredients",
    response_model=NutritionRowDTO,
    response_model_exclude_none=True,
    summary="재료 추가 (같은 이름이면 덮어쓰기)"
)
def add_ingredient(
    session_id: str,
    request: IngredientAddRequest,
    service: RecipeService = Depends(RecipeService)
):
    return service.add_ingredient(session_id, request.name)

@router.put("/{session_id}/servings/{name}", response_model=RecipeSessionDTO, summary="재료 중량 변경")
def update_serving(
    session_id: str,
    name: str,
    request: ServingUpdateRequest,
    service: RecipeService = Depends(RecipeService)
):
    """음수 중량은 0으로 보정"""
    return service.update_serving(session_id, name, request.grams)

@router.delete("/{session_id}/ingredients/{name}", response_model=RecipeSessionDTO, summary="재료 삭제")
def remove_ingredient(
    session_id: str,
    name: str,
    service: RecipeService = Depends(RecipeService)
):
    return service.remove_ingredient(session_id, name)

# ===================================================================
# 영양 라벨 (재료별 환산값 + 합계)
# ===================================================================
@router.get("/{session_id}/label", response_model=NutritionLabelDTO, summary="영양 성분 라벨")
def get_label(session_id: str, service: RecipeService = Depends(RecipeService)):
    """
    매번 현재 재료/중량으로 새로 계산 (저장 안 함)
    """
    return service.get_label(session_id)
