import pytest
from unittest.mock import MagicMock
from fastapi import HTTPException

from services.food_lookup_service import FoodLookupService
from services.record_selection_service import RecordSelectionService
from services.food_normalization_service import FoodNormalizationService
from repositories.food_repository import FoodRepository
from models.dtos import RawAnalyteRecordDTO

def make_record(name, analyte, amount):
    return RawAnalyteRecordDTO.model_validate({"樣品名稱": name, "分析項": analyte, "每100克含量": amount})

# --- 테스트 픽스처(Fixture) 설정 ---

@pytest.fixture
def mock_repo() -> MagicMock:
    """외부 API 대신 쓰는 가짜 Repository"""
    return MagicMock(spec=FoodRepository)

@pytest.fixture
def lookup_service(mock_repo: MagicMock) -> FoodLookupService:
    # 선택/정규화는 실제 서비스 사용
    return FoodLookupService(
        repo=mock_repo,
        selector=RecordSelectionService(),
        normalizer=FoodNormalizationService()
    )

# --- 테스트 케이스 ---

def test_lookup_uses_only_first_sample(lookup_service, mock_repo):
    """
    API가 부분 일치로 "雞胸肉" 와 "雞胸肉(去皮)" 를 섞어서 줘도
    첫 번째 샘플 레코드만 정규화에 들어가는지 확인
    """
    # --- [Arrange] ---
    mock_repo.fetch_records.return_value = [
        make_record("雞胸肉", "熱量", "117"),
        make_record("雞胸肉(去皮)", "熱量", "104"),
        make_record("雞胸肉", "粗蛋白", "22.4"),
        make_record("雞胸肉(去皮)", "粗蛋白", "24.0"),
    ]

    # --- [Act] ---
    row = lookup_service.lookup("  雞胸肉 ")

    # --- [Assert] ---
    assert row.name == "雞胸肉"
    assert row.calories == 117.0
    assert row.protein == 22.4
    # 검색어는 공백 제거 후 전달
    mock_repo.fetch_records.assert_called_once_with("雞胸肉")


def test_lookup_not_found(lookup_service, mock_repo):
    """결과가 없으면 404"""
    mock_repo.fetch_records.return_value = []

    with pytest.raises(HTTPException) as exc_info:
        lookup_service.lookup("不存在的食物")

    assert exc_info.value.status_code == 404


def test_lookup_blank_name(lookup_service, mock_repo):
    """빈 검색어는 API 호출 없이 400"""
    with pytest.raises(HTTPException) as exc_info:
        lookup_service.lookup("   ")

    assert exc_info.value.status_code == 400
    mock_repo.fetch_records.assert_not_called()


def test_lookup_propagates_upstream_error(lookup_service, mock_repo):
    mock_repo.fetch_records.side_effect = HTTPException(status_code=502, detail="政府資料源查詢失敗")

    with pytest.raises(HTTPException) as exc_info:
        lookup_service.lookup("白飯")

    assert exc_info.value.status_code == 502


def test_selection_matches_trimmed_names():
    selector = RecordSelectionService()
    records = [
        make_record("白飯 ", "熱量", "183"),
        make_record(" 白飯", "粗蛋白", "3.1"),
        make_record("糙米飯", "熱量", "168"),
    ]

    selected = selector.select_first_sample(records)

    assert [r.analyte_name for r in selected] == ["熱量", "粗蛋白"]
    assert selector.select_first_sample([]) == []
