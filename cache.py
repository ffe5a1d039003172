# cache.py
import os
from redis import Redis
from dotenv import load_dotenv

load_dotenv()

# Redis 연결 (응답 캐시용)
# decode_responses=True 필수 (bytes -> str 자동 변환)
redis_client = Redis(
    host=os.getenv("REDIS_HOST", "localhost"),
    port=int(os.getenv("REDIS_PORT", "6379")),
    db=int(os.getenv("REDIS_DB", "0")),
    decode_responses=True,
    socket_connect_timeout=1,
)

def get_redis_client():
    """FastAPI Depends로 주입하기 위한 함수"""
    yield redis_client
