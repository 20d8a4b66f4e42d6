import logging

from .errors import EducationLoginFailed
from .session import SessionStore

logger = logging.getLogger(__name__)

XK_SSO_URL = "http://xk.csust.edu.cn/sso.jsp"
CAS_SERVICE = "http%3A%2F%2Fxk.csust.edu.cn%2Fsso.jsp"
CAS_LOGIN_WITH_SERVICE = f"https://authserver.csust.edu.cn/authserver/login?service={CAS_SERVICE}"

# 统一认证登录页上的提示文字；出现说明 SSO 没有放行
LOGIN_PROMPT_MARKER = "请输入账号"


async def login_to_course_selection(session: SessionStore) -> SessionStore:
    """
    用已登录的统一认证会话进入选课系统（xk.csust.edu.cn），
    成功后返回同一个会话，后续请求直接复用其 cookie
    """
    # 第一步：先访问选课系统入口，拿到选课系统自己的会话 cookie
    await session.get(XK_SSO_URL)

    # 第二步：带 service 访问统一认证，由 SSO 跳回选课系统
    resp = await session.get(CAS_LOGIN_WITH_SERVICE)
    if LOGIN_PROMPT_MARKER in resp.text:
        logger.warning("选课系统登录失败，落在 %s", resp.url)
        raise EducationLoginFailed("登录选课系统失败（统一认证未登录或已过期）")

    return session
