import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response
import httpx

from ..models.schemas import CommonResp, DynamicCodeReq, DynamicLoginReq, LoginReq, LoginResp, UserInfoResp
from ..services.errors import SSOHelperError
from ..services.sso import AuthState, SSOHelper
from ..storage.registry import discard_pending, drop_helper, get_pending, promote, start_login
from .deps import get_current_helper, get_current_user, issue_token, to_http_exception

logger = logging.getLogger(__name__)

router = APIRouter()


async def _issue_after_verified(username: str, helper: SSOHelper) -> LoginResp:
    # 只有本次提交经统一认证校验通过才签发 token；"会话已登录"不能证明调用方身份
    if helper.state is not AuthState.VERIFIED:
        await discard_pending(username, helper)
        raise HTTPException(status_code=401, detail="登录失败，凭证未经校验")

    await promote(username, helper)
    # 登录成功后把 cookie 落盘，服务重启或实例过期后可直接复用
    await helper.save_cookies()
    return LoginResp(data={"token": issue_token(username)})


@router.post("/login", response_model=LoginResp)
async def login(req: LoginReq):
    helper = await start_login(req.username)
    try:
        await helper.login(req.username, req.password)
    except (SSOHelperError, httpx.HTTPError) as e:
        await discard_pending(req.username, helper)
        raise to_http_exception(e)
    return await _issue_after_verified(req.username, helper)


@router.get("/captcha")
async def get_captcha(username: str = Query(..., description="学号，用于关联验证码所属的会话")):
    """
    获取图形验证码（短信验证码登录前使用）。
    验证码与会话通过 cookie 关联，因此同一次登录复用同一个全新会话
    """
    helper = await get_pending(username)
    try:
        image = await helper.get_captcha()
    except (SSOHelperError, httpx.HTTPError) as e:
        raise to_http_exception(e)
    return Response(content=image, media_type="image/jpeg")


@router.post("/dynamic-code", response_model=CommonResp)
async def request_dynamic_code(req: DynamicCodeReq):
    helper = await get_pending(req.username)
    try:
        await helper.request_dynamic_code(req.mobile, req.captcha)
    except (SSOHelperError, httpx.HTTPError) as e:
        raise to_http_exception(e)
    return CommonResp(message="验证码已发送")


@router.post("/dynamic-login", response_model=LoginResp)
async def dynamic_login(req: DynamicLoginReq):
    # 失败时保留进行中的会话，可以换一个短信验证码重试
    helper = await get_pending(req.username)
    try:
        await helper.dynamic_login(req.username, req.dynamic_code, req.captcha)
    except (SSOHelperError, httpx.HTTPError) as e:
        raise to_http_exception(e)
    return await _issue_after_verified(req.username, helper)


@router.get("/me", response_model=UserInfoResp)
async def get_my_info(helper: SSOHelper = Depends(get_current_helper)):
    """
    获取当前登录用户在网上办事大厅的基本信息
    """
    try:
        user = await helper.get_authenticated_user()
    except (SSOHelperError, httpx.HTTPError) as e:
        raise to_http_exception(e)
    except ValueError:
        # 未登录时 getLoginUser 会被重定向到登录页，返回的不是 JSON
        raise HTTPException(status_code=401, detail="登录态已过期，请重新登录")
    return UserInfoResp(data=user)


@router.post("/logout", response_model=CommonResp)
async def logout(
    username: str = Depends(get_current_user),
    helper: SSOHelper = Depends(get_current_helper),
):
    try:
        await helper.logout()
    except httpx.HTTPError as e:
        raise to_http_exception(e)

    await helper.clear_cookies()
    await drop_helper(username)
    logger.info("用户 %s 已退出", username)
    return CommonResp()
