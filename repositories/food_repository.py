# repositories/food_repository.py
import os
import io
import csv
import json
import requests
from typing import Any, Dict, List
from fastapi import Depends, HTTPException
from pydantic import TypeAdapter
from redis import Redis
from dotenv import load_dotenv
from models.dtos import RawAnalyteRecordDTO
from cache import get_redis_client

load_dotenv()

DEFAULT_FDA_URL = "https://data.fda.gov.tw/opendata/exportDataList.do"
UPSTREAM_ERROR_DETAIL = "政府資料源查詢失敗"

# 한 줄에 분석항목이 없는 (가로형) 데이터셋 처리용
_SAMPLE_NAME_KEYS = ("樣品名稱", "食品名稱", "品名")
_ANALYTE_KEYS = ("分析項", "分析項目")
_ID_KEYS = ("整合編號", "食品分類", "資料類別", "俗名", "樣品英文名稱", "內容物描述", "廢棄率")

_records_adapter = TypeAdapter(List[RawAnalyteRecordDTO])


class FoodRepository:
    def __init__(self, redis: Redis = Depends(get_redis_client)):
        self.redis = redis
        self.base_url = os.getenv("FDA_OPENDATA_URL", DEFAULT_FDA_URL)
        self.info_id = os.getenv("FDA_INFO_ID", "20")
        self.limit = int(os.getenv("FDA_QUERY_LIMIT", "20"))
        self.timeout = float(os.getenv("FDA_TIMEOUT_SECONDS", "15"))
        self.cache_ttl = int(os.getenv("RECORD_CACHE_TTL", "3600"))

    def fetch_records(self, name: str) -> List[RawAnalyteRecordDTO]:
        """
        [흐름]
        1. Redis 캐시 확인
        2. 식약서 오픈데이터 API 호출
        결과 없으면 빈 리스트 (404 판단은 서비스 몫)
        """

        # ---------------------------------------------------------
        # 1. Redis 캐시 조회
        # ---------------------------------------------------------
        cache_key = f"fda:records:{name}"
        try:
            cached_data = self.redis.get(cache_key)
            if cached_data:
                print(f"[Repo] Redis Cache Hit: {name}")
                return _records_adapter.validate_json(cached_data)
        except Exception as e:
            print(f"Redis Error (Ignored): {e}")

        # ---------------------------------------------------------
        # 2. API 호출
        # ---------------------------------------------------------
        print(f"[Repo] API Fetching: {name}")
        records = self._fetch_from_api(name)

        # 3. 캐싱 (빈 결과는 저장 안 함)
        if records:
            self._cache_records(cache_key, records)
        return records

    def _cache_records(self, cache_key: str, records: List[RawAnalyteRecordDTO]):
        """Redis에 데이터 저장 (TTL 기본 3600초)"""
        try:
            self.redis.setex(
                cache_key,
                self.cache_ttl,
                _records_adapter.dump_json(records).decode("utf-8"),
            )
        except Exception as e:
            print(f"Redis Save Error: {e}")

    def _fetch_from_api(self, name: str) -> List[RawAnalyteRecordDTO]:
        params = {
            "method": "openData",
            "InfoId": self.info_id,
            "limit": self.limit,
            "樣品名稱": name,
            "分析項分類": "一般成分",
        }
        headers = {"Accept": "application/json, text/plain, */*"}
        try:
            r = requests.get(self.base_url, params=params, headers=headers, timeout=self.timeout)

            if r.status_code >= 400:
                raise HTTPException(status_code=502, detail=UPSTREAM_ERROR_DETAIL)

            # CSV로 올 때 charset이 없으면 requests가 latin-1로 읽음
            r.encoding = "utf-8"
            rows = self._parse_body(r.text)

            records = []
            for row in rows:
                records.extend(self._row_to_records(row))

        except HTTPException as he:
            raise he
        except Exception as e:
            print(f"FDA API Error: {e}")
            raise HTTPException(status_code=502, detail=UPSTREAM_ERROR_DETAIL)

        print(f"[Repo] {name}: 레코드 {len(records)}개")
        return records

    def _parse_body(self, text: str) -> List[Dict[str, Any]]:
        """JSON 배열 / {"data": [...]} / CSV(헤더 포함) 모두 처리"""
        body = (text or "").lstrip("\ufeff").strip()
        if not body:
            return []

        if body[0] in "[{":
            data = json.loads(body)
            if isinstance(data, dict):
                for key in ("data", "items", "rows", "records"):
                    if isinstance(data.get(key), list):
                        data = data[key]
                        break
                else:
                    return []
            return [row for row in data if isinstance(row, dict)]

        # 열 개수보다 값이 많은 줄은 None 키로 들어옴
        reader = csv.DictReader(io.StringIO(body))
        return [{k: v for k, v in row.items() if k is not None} for row in reader]

    def _row_to_records(self, row: Dict[str, Any]) -> List[RawAnalyteRecordDTO]:
        """
        세로형(분석항목 1개 = 1줄)은 그대로,
        가로형(열 이름이 "熱量(kcal)" 같은 영양소)은 열마다 레코드 1개로 펼침
        """
        if any(key in row for key in _ANALYTE_KEYS) or not any(key in row for key in _SAMPLE_NAME_KEYS):
            return [RawAnalyteRecordDTO.model_validate(row)]

        sample_name = next(row[key] for key in _SAMPLE_NAME_KEYS if key in row)
        exploded = []
        for column, value in row.items():
            if column in _SAMPLE_NAME_KEYS or column in _ID_KEYS:
                continue
            exploded.append(RawAnalyteRecordDTO(
                sample_id=row.get("整合編號"),
                sample_name=sample_name,
                analyte_name=column,
                amount_per_100g=None if value is None else str(value),
            ))
        return exploded
