# services/record_selection_service.py
from typing import List, Sequence

from models.dtos import RawAnalyteRecordDTO


class RecordSelectionService:
    """
    API가 부분 일치로 여러 샘플을 섞어서 돌려주므로
    첫 번째 샘플 이름과 같은 레코드만 남김 (나머지는 버림)
    """

    def select_first_sample(self, records: Sequence[RawAnalyteRecordDTO]) -> List[RawAnalyteRecordDTO]:
        if not records:
            return []

        first_name = (records[0].sample_name or "").strip()
        selected = [r for r in records if (r.sample_name or "").strip() == first_name]

        dropped = len(records) - len(selected)
        if dropped:
            print(f"[Selection] '{first_name}' 선택, 다른 샘플 레코드 {dropped}개 제외")
        return selected
