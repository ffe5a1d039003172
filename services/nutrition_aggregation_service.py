# services/nutrition_aggregation_service.py
import math
from decimal import Decimal, ROUND_HALF_UP, localcontext
from typing import Dict, Mapping, Optional, Sequence

from models.dtos import (
    IngredientServingDTO,
    NutritionLabelDTO,
    NutritionRowDTO,
    NutritionTotalsDTO,
)
from models.recipe_session import DEFAULT_SERVING_GRAMS

# 라벨에 들어가는 영양소: (row 필드, 결과 필드, 소수점 자리수)
LABEL_FIELDS = (
    ("calories", "kcal", 0),
    ("protein", "protein", 1),
    ("fat", "fat", 1),
    ("carbs", "carbs", 1),
)


def round_half_up(value: float, digits: int) -> float:
    """
    사사오입 (0.5는 0에서 먼 쪽으로)
    float 그대로 round() 하면 2.675 -> 2.67 같은 오차가 생겨서 10진수 문자열 기준으로 계산
    inf / nan 은 그대로 반환
    """
    if not math.isfinite(value):
        return value
    d = Decimal(repr(value))
    with localcontext() as ctx:
        # 기본 정밀도(28자리)로는 1e27 이상 값을 quantize 못 함
        ctx.prec = max(28, d.adjusted() + digits + 2)
        return float(d.quantize(Decimal(1).scaleb(-digits), rounding=ROUND_HALF_UP))


class NutritionAggregationService:
    """
    [집계기]
    재료 row들 + 중량 표 -> 재료별 환산값 + 전체 합계
    입력을 바꾸지 않는 순수 계산 (같은 입력이면 같은 결과)
    """

    def aggregate(
        self,
        rows: Sequence[NutritionRowDTO],
        servings: Mapping[str, float],
    ) -> NutritionLabelDTO:
        ingredients = []
        sums: Dict[str, float] = {target: 0.0 for _, target, _ in LABEL_FIELDS}
        # 재료별 kcal은 정수라서 합도 정수로 (float 오버플로 없음)
        sums["kcal"] = 0

        for row in rows:
            grams = servings.get(row.name, DEFAULT_SERVING_GRAMS)
            per_serving = self._scale_row(row, grams)

            # 값이 있는 것만 합산 (없는 건 0 취급)
            for target, value in per_serving.items():
                if value is not None:
                    sums[target] += value

            ingredients.append(IngredientServingDTO(name=row.name, grams=grams, **per_serving))

        return NutritionLabelDTO(ingredients=ingredients, totals=self._build_totals(sums))

    def _scale_row(self, row: NutritionRowDTO, grams: float) -> Dict[str, Optional[float]]:
        """100g 기준값 * (grams / 100), 필드별 반올림"""
        factor = grams / 100.0
        scaled: Dict[str, Optional[float]] = {}
        for source, target, digits in LABEL_FIELDS:
            base = getattr(row, source)
            if base is None:
                scaled[target] = None
                continue
            value = round_half_up(base * factor, digits)
            # 곱해서 float 범위를 넘으면 값 없음으로 처리
            if not math.isfinite(value):
                scaled[target] = None
            else:
                scaled[target] = int(value) if digits == 0 else value
        return scaled

    def _build_totals(self, sums: Dict[str, float]) -> NutritionTotalsDTO:
        totals = {"kcal": int(sums["kcal"])}

        # 단백질/지방/탄수화물 합계가 0.0이면 "없음"으로 내보냄 (기존 화면 동작 유지)
        for _, target, digits in LABEL_FIELDS[1:]:
            value = round_half_up(sums[target], digits)
            if value and math.isfinite(value):
                totals[target] = value

        return NutritionTotalsDTO(**totals)
