import logging
from dataclasses import dataclass
from typing import Union

from bs4 import BeautifulSoup

from .errors import EmptyLoginPageError, ExecutionNotFoundError, SaltNotFoundError
from .redirects import AuthStatus, RedirectContract, Service, classify
from .session import SessionStore

logger = logging.getLogger(__name__)

EHALL_SERVICE = "https%3A%2F%2Fehall.csust.edu.cn%2Flogin"
LOGIN_URL = f"https://authserver.csust.edu.cn/authserver/login?service={EHALL_SERVICE}"


@dataclass(frozen=True)
class LoginForm:
    """单次登录尝试有效；execution 在服务端一次性使用"""
    pwd_encrypt_salt: str
    execution: str


@dataclass(frozen=True)
class AlreadyAuthenticated:
    pass


@dataclass(frozen=True)
class FormAvailable:
    form: LoginForm


LoginOutcome = Union[AlreadyAuthenticated, FormAvailable]


def parse_login_form(html: str) -> LoginForm:
    soup = BeautifulSoup(html, "html.parser")

    salt_input = soup.select_one("input#pwdEncryptSalt")
    if salt_input is None:
        raise SaltNotFoundError("登录页中未找到 pwdEncryptSalt")

    execution_input = soup.select_one("input#execution")
    if execution_input is None:
        raise ExecutionNotFoundError("登录页中未找到 execution")

    return LoginForm(
        pwd_encrypt_salt=salt_input.get("value", ""),
        execution=execution_input.get("value", ""),
    )


async def fetch_form(session: SessionStore, contract: RedirectContract) -> LoginOutcome:
    """
    打开 ehall 的统一认证登录页；
    若直接被重定向到 ehall 首页，说明当前会话已登录，不需要表单
    """
    resp = await session.get(LOGIN_URL)

    if classify(resp.url, Service.EHALL_LANDING, contract) is AuthStatus.AUTHENTICATED:
        logger.debug("登录页重定向到 %s，会话已登录", resp.url)
        return AlreadyAuthenticated()

    if not resp.text:
        raise EmptyLoginPageError("获取登录页失败（响应为空）")

    return FormAvailable(parse_login_form(resp.text))
