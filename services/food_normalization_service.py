# services/food_normalization_service.py
import math
from typing import Optional, Sequence, Tuple

from models.dtos import NutritionRowDTO, RawAnalyteRecordDTO

UNKNOWN_SAMPLE_NAME = "unknown sample"

# 분석항목 이름 키워드 -> NutritionRowDTO 필드
# 위에서부터 검사, 처음 걸린 규칙만 적용 (예: "蛋白" 과 "糖" 둘 다 있으면 protein)
ANALYTE_RULES: Tuple[Tuple[Tuple[str, ...], str], ...] = (
    (("熱量",), "calories"),
    (("蛋白",), "protein"),
    (("脂肪",), "fat"),
    (("碳水", "醣類"), "carbs"),
    (("水分",), "water"),
    (("灰分",), "ash"),
    (("纖維",), "fiber"),
    (("糖",), "sugar"),
)


def classify_analyte(analyte_name: Optional[str]) -> Optional[str]:
    """분석항목 이름 -> 필드명 (매칭 안 되면 None)"""
    label = (analyte_name or "").strip()
    if not label:
        return None
    for keywords, field in ANALYTE_RULES:
        if any(keyword in label for keyword in keywords):
            return field
    return None


def parse_amount(raw: Optional[str]) -> Optional[float]:
    """' 12.3 ' -> 12.3, 빈 값/숫자 아님 -> None"""
    if raw is None:
        return None
    text = str(raw).strip().replace(",", "")
    if not text:
        return None
    try:
        value = float(text)
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return value


class FoodNormalizationService:
    """
    [정규화]
    같은 샘플(樣品名稱)의 분석항목 레코드 묶음 -> 100g 기준 NutritionRowDTO 1개
    잘못된 값은 건너뛰고 예외는 던지지 않음 (부분 결과 우선)
    """

    def normalize(self, records: Sequence[RawAnalyteRecordDTO]) -> Optional[NutritionRowDTO]:
        if not records:
            return None

        # 1. 이름은 첫 레코드 기준
        name = (records[0].sample_name or "").strip() or UNKNOWN_SAMPLE_NAME

        # 2. 레코드마다 값 파싱 + 분류 (같은 필드면 나중 값이 덮어씀)
        values = {}
        for record in records:
            amount = parse_amount(record.amount_per_100g)
            if amount is None:
                continue
            field = classify_analyte(record.analyte_name)
            if field is None:
                continue
            values[field] = amount

        return NutritionRowDTO(name=name, **values)

