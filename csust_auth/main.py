import logging
from fastapi import FastAPI
from .api.router import api_router
from .config import settings

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

app = FastAPI(
    title="CSUST Auth Backend",
    version="0.1.0",
    openapi_tags=[
        {"name": "auth", "description": "统一身份认证"},
        {"name": "services", "description": "选课系统 / 网络课程平台登录"},
    ]
)

app.include_router(api_router, prefix="/api")

@app.get("/healthz")
def healthz():
    return {"ok": True}
