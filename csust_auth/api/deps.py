import logging
import time

from fastapi import Depends, HTTPException
from fastapi.security import OAuth2PasswordBearer
import httpx
import jwt

from ..config import settings
from ..services.errors import (
    CaptchaRequired,
    CaptchaRetrievalFailed,
    DynamicCodeFailed,
    EducationLoginFailed,
    FormRetrievalError,
    LoginFailed,
    MoocLoginFailed,
    ProfileNotFound,
    SSOHelperError,
)
from ..services.sso import SSOHelper
from ..storage.registry import get_or_create_helper

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login")

# 业务异常 -> HTTP 状态码，按继承顺序匹配
_STATUS_BY_ERROR = (
    (CaptchaRequired, 409),
    (LoginFailed, 401),
    (ProfileNotFound, 401),
    (EducationLoginFailed, 401),
    (MoocLoginFailed, 401),
    (DynamicCodeFailed, 400),
    (FormRetrievalError, 502),
    (CaptchaRetrievalFailed, 502),
)

def issue_token(username: str) -> str:
    return jwt.encode(
        {"sub": username, "exp": int(time.time()) + settings.JWT_TTL_SECONDS},
        settings.JWT_SECRET,
        algorithm="HS256",
    )

def to_http_exception(e: Exception) -> HTTPException:
    """把统一认证流程中的异常转换为 HTTPException"""
    if isinstance(e, SSOHelperError):
        for error_type, status_code in _STATUS_BY_ERROR:
            if isinstance(e, error_type):
                return HTTPException(status_code=status_code, detail=e.detail)
        return HTTPException(status_code=500, detail=e.detail)
    if isinstance(e, httpx.HTTPError):
        logger.warning("请求统一认证失败: %s", e)
        return HTTPException(status_code=502, detail=f"请求统一认证失败: {e}")
    return HTTPException(status_code=500, detail=str(e))

async def get_current_user(token: str = Depends(oauth2_scheme)) -> str:
    """解码JWT，获取用户名"""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=["HS256"])
        username: str = payload.get("sub")
        if username is None:
            raise HTTPException(status_code=401, detail="无效的认证凭证")
        return username
    except jwt.PyJWTError:
        raise HTTPException(status_code=401, detail="无效的认证凭证")

async def get_current_helper(username: str = Depends(get_current_user)) -> SSOHelper:
    """
    取当前用户的 SSOHelper；内存中已过期时重新创建，并从数据库恢复 cookie
    """
    return await get_or_create_helper(username)
