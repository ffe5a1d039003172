import pytest

from services.food_normalization_service import (
    FoodNormalizationService,
    UNKNOWN_SAMPLE_NAME,
    classify_analyte,
    parse_amount,
)
from models.dtos import RawAnalyteRecordDTO

# -------------------------------------------------------------------
# 테스트 설정 및 픽스처(Fixture)
# -------------------------------------------------------------------

def make_record(analyte, amount, name="雞胸肉"):
    """API 원본과 같은 중국어 필드명으로 레코드 생성"""
    return RawAnalyteRecordDTO.model_validate({
        "整合編號": "J0100101",
        "樣品名稱": name,
        "分析項分類": "一般成分",
        "分析項": analyte,
        "含量單位": "g",
        "每100克含量": amount,
    })

@pytest.fixture(scope="module")
def normalizer():
    return FoodNormalizationService()

# -------------------------------------------------------------------
# 테스트 케이스
# -------------------------------------------------------------------

def test_normalize_maps_all_general_analytes(normalizer):
    """
    [성공 케이스]
    일반성분 8종이 각각 맞는 필드로 들어가는지 확인
    """
    records = [
        make_record("修正熱量", " 117 "),
        make_record("粗蛋白", "22.4"),
        make_record("粗脂肪", "2.2"),
        make_record("總碳水化合物", "0.9"),
        make_record("水分", "73.6"),
        make_record("灰分", "1.0"),
        make_record("膳食纖維", "0.0"),
        make_record("糖質總量", "0.3"),
    ]

    row = normalizer.normalize(records)

    assert row.name == "雞胸肉"
    assert row.calories == 117.0
    assert row.protein == 22.4
    assert row.fat == 2.2
    assert row.carbs == 0.9
    assert row.water == 73.6
    assert row.ash == 1.0
    assert row.fiber == 0.0
    assert row.sugar == 0.3


def test_carbs_matches_both_keywords():
    assert classify_analyte("碳水化合物") == "carbs"
    assert classify_analyte("可利用醣類") == "carbs"


def test_first_matching_rule_wins():
    """
    "蛋白" 과 "糖" 이 둘 다 들어간 라벨은 앞 규칙(protein)으로 분류
    """
    assert classify_analyte("蛋白糖") == "protein"


def test_unknown_analyte_is_ignored(normalizer):
    row = normalizer.normalize([make_record("鈉", "52"), make_record("維生素C", "1.2")])

    assert row.name == "雞胸肉"
    assert row.model_dump(exclude={"name"}) == {
        "calories": None, "protein": None, "fat": None, "carbs": None,
        "water": None, "ash": None, "fiber": None, "sugar": None,
    }


def test_later_record_overwrites_same_field(normalizer):
    """
    같은 필드로 가는 레코드가 두 개면 뒤의 값이 남음 (평균 X)
    """
    row = normalizer.normalize([make_record("熱量", "100"), make_record("修正熱量", "120")])
    assert row.calories == 120.0


@pytest.mark.parametrize("bad_amount", [None, "", "   ", "-", "abc", "NaN", "inf"])
def test_unparsable_amount_is_skipped(normalizer, bad_amount):
    """
    [예외 케이스]
    값이 없거나 숫자가 아니면 그 레코드만 건너뜀 (앞에서 넣은 값도 안 지워짐)
    """
    row = normalizer.normalize([make_record("熱量", "150"), make_record("熱量", bad_amount)])
    assert row.calories == 150.0


def test_negative_values_pass_through(normalizer):
    row = normalizer.normalize([make_record("粗脂肪", "-0.5")])
    assert row.fat == -0.5


def test_name_is_trimmed_and_defaults(normalizer):
    assert normalizer.normalize([make_record("熱量", "1", name="  白飯 ")]).name == "白飯"
    assert normalizer.normalize([make_record("熱量", "1", name="   ")]).name == UNKNOWN_SAMPLE_NAME
    assert normalizer.normalize([make_record("熱量", "1", name=None)]).name == UNKNOWN_SAMPLE_NAME


def test_empty_input_returns_none(normalizer):
    assert normalizer.normalize([]) is None


def test_normalize_is_idempotent(normalizer):
    records = [make_record("熱量", "88"), make_record("粗蛋白", "3.1"), make_record("水分", "x")]
    assert normalizer.normalize(records) == normalizer.normalize(records)


@pytest.mark.parametrize("raw, expected", [
    ("12.30", 12.3),
    (" 0.5 ", 0.5),
    ("1,234.5", 1234.5),
    ("3e2", 300.0),
])
def test_parse_amount_recovers_value(raw, expected):
    assert parse_amount(raw) == pytest.approx(expected)
    # 다시 문자열로 바꿔도 같은 값
    assert parse_amount(str(parse_amount(raw))) == pytest.approx(expected)


def test_numeric_json_amount_is_accepted(normalizer):
    """JSON 숫자로 와도 문자열로 받아서 처리"""
    record = RawAnalyteRecordDTO.model_validate({"樣品名稱": "香蕉", "分析項": "熱量", "每100克含量": 85})
    assert record.amount_per_100g == "85"
    assert normalizer.normalize([record]).calories == 85.0
