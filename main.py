#main.py
import os
from contextlib import asynccontextmanager
from dotenv import load_dotenv
from fastapi import FastAPI
from routers import food_router, recipe_router
from fastapi.middleware.cors import CORSMiddleware
from cache import redis_client

load_dotenv()

@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    # 종료 시 Redis 연결 풀 정리
    redis_client.close()

app = FastAPI(title="FoodCount API", lifespan=lifespan, openapi_version="3.0.2")

origins = os.getenv(
    "CORS_ORIGINS",
    "http://localhost:3000,http://127.0.0.1:3000"   # 프론트엔드 로컬 개발 주소
).split(",")

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in origins if o.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 라우터 등록
app.include_router(food_router.router)
app.include_router(recipe_router.router)

@app.get("/")
def index():
    return {"message": "FoodCount API Service"}
