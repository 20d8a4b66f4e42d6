import logging

from .errors import MoocLoginFailed
from .redirects import AuthStatus, DEFAULT_CONTRACT, RedirectContract, Service, classify
from .session import SessionStore

logger = logging.getLogger(__name__)

MOOC_SSO_URL = "http://pt.csust.edu.cn/meol/homepage/common/sso_login.jsp"


async def login_to_mooc(session: SessionStore, contract: RedirectContract = DEFAULT_CONTRACT) -> SessionStore:
    resp = await session.get(MOOC_SSO_URL)
    if classify(resp.url, Service.MOOC, contract) is not AuthStatus.AUTHENTICATED:
        logger.warning("网络课程平台登录失败，落在 %s", resp.url)
        raise MoocLoginFailed(f"登录网络课程平台失败，跳转地址异常: {resp.url}")
    return session
