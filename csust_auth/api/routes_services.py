from fastapi import APIRouter, Depends
import httpx

from ..models.schemas import CommonResp
from ..services.errors import SSOHelperError
from ..services.sso import SSOHelper
from .deps import get_current_helper, to_http_exception

router = APIRouter()


@router.post("/course-selection/login", response_model=CommonResp)
async def login_course_selection(helper: SSOHelper = Depends(get_current_helper)):
    """
    通过统一认证进入选课系统，选课系统的会话 cookie 随后一并落盘
    """
    try:
        await helper.login_to_course_selection()
    except (SSOHelperError, httpx.HTTPError) as e:
        raise to_http_exception(e)
    await helper.save_cookies()
    return CommonResp()


@router.post("/mooc/login", response_model=CommonResp)
async def login_mooc(helper: SSOHelper = Depends(get_current_helper)):
    try:
        await helper.login_to_mooc()
    except (SSOHelperError, httpx.HTTPError) as e:
        raise to_http_exception(e)
    await helper.save_cookies()
    return CommonResp()
