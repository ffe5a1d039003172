# models/dtos.py
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional, Dict, Any, Literal

# ===================================================================
# 0. 공통 타입 정의
# ===================================================================
SessionEvent = Literal['row_upserted', 'serving_changed', 'row_removed', 'cleared']

# ===================================================================
# 1. [입력] 외부 API 원본 데이터 (Repository)
# ===================================================================
class RawAnalyteRecordDTO(BaseModel):
    """
    [Repository -> Service]
    식약서(data.fda.gov.tw) 식품영양성분 API의 한 줄 (분석항목 1개)
    필드명이 중국어이고 데이터셋 버전마다 조금씩 달라서 별칭을 여러 개 받음
    """
    sample_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("整合編號", "sample_id", "sampleId"),
    )
    sample_name: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("樣品名稱", "食品名稱", "品名", "sample_name", "sampleName"),
    )
    analyte_name: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("分析項", "分析項目", "analyte_name", "analyteName"),
    )
    # 문자열로 옴 (공백 섞여 있을 수 있음)
    amount_per_100g: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("每100克含量", "每100公克含量", "amount_per_100g", "amountPer100g"),
    )
    unit: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("含量單位", "unit"),
    )
    category: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("分析項分類", "category"),
    )

    model_config = ConfigDict(extra='ignore', coerce_numbers_to_str=True)


# ===================================================================
# 2. [정규화 결과] 100g 기준 영양 정보 (Normalizer -> Session)
# ===================================================================
class NutritionRowDTO(BaseModel):
    """100g 기준 영양 성분. None = 미보고 (0이 아님)"""
    name: str
    calories: Optional[float] = None  # kcal
    protein: Optional[float] = None
    fat: Optional[float] = None
    carbs: Optional[float] = None
    water: Optional[float] = None
    ash: Optional[float] = None
    fiber: Optional[float] = None
    sugar: Optional[float] = None


# ===================================================================
# 3. [집계 결과] 라벨 데이터 (Aggregator -> Frontend)
# ===================================================================
class IngredientServingDTO(BaseModel):
    """재료 1개의 1회 제공량 환산값 (None = 데이터 없음)"""
    name: str
    grams: float
    kcal: Optional[int] = None
    protein: Optional[float] = None
    fat: Optional[float] = None
    carbs: Optional[float] = None

class NutritionTotalsDTO(BaseModel):
    """레시피 전체 합계. kcal은 항상 있음"""
    kcal: int = 0
    protein: Optional[float] = None
    fat: Optional[float] = None
    carbs: Optional[float] = None

class NutritionLabelDTO(BaseModel):
    """
    [API 응답] /recipes/{session_id}/label
    재료별 환산값 + 합계
    """
    ingredients: List[IngredientServingDTO] = []
    totals: NutritionTotalsDTO


# ===================================================================
# 4. [레시피 세션] 작업 중인 재료 목록 + 중량 표
# ===================================================================
class RecipeSessionDTO(BaseModel):
    """
    [API 응답] 세션 스냅샷
    rows: 재료 이름 순서대로, servings: 이름 -> 그램
    """
    session_id: str
    version: int = 0
    rows: List[NutritionRowDTO] = []
    servings: Dict[str, float] = {}


# ===================================================================
# 5. [요청] Frontend -> API
# ===================================================================
class IngredientAddRequest(BaseModel):
    """검색어(식재료 이름)로 재료 추가"""
    name: str

class ServingUpdateRequest(BaseModel):
    """
    재료 중량 변경 (음수는 세션에서 0으로 보정)
    """
    grams: float = Field(allow_inf_nan=False)

    @field_validator("grams", mode="before")
    @classmethod
    def _blank_to_zero(cls, value: Any) -> Any:
        # 입력칸을 비우면 "" 가 넘어옴
        if isinstance(value, str) and not value.strip():
            return 0
        return value
