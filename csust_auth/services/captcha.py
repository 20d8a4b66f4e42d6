import time

from ..models.schemas import CheckNeedCaptchaResp
from .errors import CaptchaRetrievalFailed
from .session import SessionStore

CHECK_NEED_CAPTCHA_URL = "https://authserver.csust.edu.cn/authserver/checkNeedCaptcha.htl"
CAPTCHA_URL = "https://authserver.csust.edu.cn/authserver/getCaptcha.htl"


async def needs_captcha(session: SessionStore, username: str) -> bool:
    # 服务端策略会随失败次数变化，每次登录前都要重新查询，不缓存
    params = {"username": username, "_": int(time.time() * 1000)}
    resp = await session.get(CHECK_NEED_CAPTCHA_URL, params=params)
    return CheckNeedCaptchaResp.model_validate_json(resp.content).isNeed


async def get_captcha(session: SessionStore) -> bytes:
    """验证码图片与会话通过 cookie 关联"""
    resp = await session.get(CAPTCHA_URL)
    if not resp.content:
        raise CaptchaRetrievalFailed("获取验证码失败")
    return resp.content
