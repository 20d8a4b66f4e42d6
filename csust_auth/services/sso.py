import logging
from enum import Enum
from typing import Callable, Optional

import httpx

from ..config import settings
from ..models.schemas import AuthenticatedUser, DynamicCodeResp
from ..security import encrypt_password
from . import captcha, form, mooc, profile, xk
from .credentials import Credentials, DynamicCodeCredentials, PasswordCredentials
from .errors import CaptchaRequired, DynamicCodeFailed, LoginFailed, LoginFormMissing
from .redirects import DEFAULT_CONTRACT, AuthStatus, RedirectContract, Service, classify
from .session import CookieStore, SessionStore

logger = logging.getLogger(__name__)

LOGIN_URL = form.LOGIN_URL
DYNAMIC_CODE_URL = "https://authserver.csust.edu.cn/authserver/dynamicCode/getDynamicCode.htl"
EHALL_LOGOUT_URL = "https://ehall.csust.edu.cn/logout"
SSO_LOGOUT_URL = "https://authserver.csust.edu.cn/authserver/logout"

Encryptor = Callable[[str, str], str]


class AuthState(str, Enum):
    START = "start"
    FORM_CHECKED = "form_checked"
    ALREADY_AUTHENTICATED = "already_authenticated"
    CHALLENGE_CHECKED = "challenge_checked"
    SUBMITTED = "submitted"
    VERIFIED = "verified"


class SSOHelper:
    """
    长沙理工大学统一身份认证（authserver.csust.edu.cn）登录流程。

    一个实例独占一个 SessionStore；所有操作顺序执行，只在网络 I/O 处挂起。
    失败一律直接抛出，不做重试；失败前已收到的 cookie 保留在 jar 中。
    """

    def __init__(
        self,
        cookie_store: Optional[CookieStore] = None,
        *,
        encryptor: Encryptor = encrypt_password,
        contract: RedirectContract = DEFAULT_CONTRACT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        restore: bool = True,
    ):
        self.session = SessionStore(cookie_store, transport=transport)
        self.encryptor = encryptor
        self.contract = contract
        self.state = AuthState.START
        # restore=False 用于必须重新校验凭证的场景，只写不读已落盘的 cookie
        if restore:
            self.session.restore_cookies_nowait()

    async def __aenter__(self) -> "SSOHelper":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.session.aclose()

    # ---- cookie 持久化 ----

    async def save_cookies(self) -> None:
        await self.session.save_cookies()

    async def restore_cookies(self) -> None:
        await self.session.restore_cookies()

    async def clear_cookies(self) -> None:
        await self.session.clear_cookies()

    # ---- 统一认证 ----

    async def _prepare_form(self) -> Optional[form.LoginForm]:
        """返回 None 表示会话已登录"""
        self.state = AuthState.START
        outcome = await form.fetch_form(self.session, self.contract)
        self.state = AuthState.FORM_CHECKED

        if isinstance(outcome, form.AlreadyAuthenticated):
            self.state = AuthState.ALREADY_AUTHENTICATED
            return None
        if not isinstance(outcome, form.FormAvailable):
            raise LoginFormMissing("未获取到登录表单")
        return outcome.form

    async def _submit(self, credentials: Credentials, service: Service) -> None:
        resp = await self.session.post(LOGIN_URL, data=credentials.to_form())
        self.state = AuthState.SUBMITTED

        final_url = str(resp.url)
        if classify(final_url, service, self.contract) is not AuthStatus.AUTHENTICATED:
            logger.warning("用户 %s 登录失败，跳转地址: %s", credentials.username, final_url)
            raise LoginFailed(f"登录失败，跳转地址异常: {final_url}", final_url=final_url)

        self.state = AuthState.VERIFIED
        logger.info("用户 %s 登录成功", credentials.username)

    async def login(self, username: str, password: str) -> None:
        login_form = await self._prepare_form()
        if login_form is None:
            return

        if await captcha.needs_captcha(self.session, username):
            raise CaptchaRequired("该账号当前需要图形验证码，暂不支持密码登录")
        self.state = AuthState.CHALLENGE_CHECKED

        credentials = PasswordCredentials(
            username=username,
            encrypted_password=self.encryptor(password, login_form.pwd_encrypt_salt),
            execution=login_form.execution,
        )
        await self._submit(credentials, Service.EHALL)

    async def dynamic_login(self, username: str, dynamic_code: str, captcha_code: str) -> None:
        login_form = await self._prepare_form()
        if login_form is None:
            return

        credentials = DynamicCodeCredentials(
            username=username,
            dynamic_code=dynamic_code,
            captcha=captcha_code,
            execution=login_form.execution,
        )
        await self._submit(credentials, Service.EHALL_DYNAMIC)

    async def get_captcha(self) -> bytes:
        return await captcha.get_captcha(self.session)

    async def request_dynamic_code(self, mobile: str, captcha_code: str) -> None:
        data = {"mobile": mobile, "captcha": captcha_code}
        if settings.DYNAMIC_CODE_VIA_SESSION:
            resp = await self.session.post(DYNAMIC_CODE_URL, data=data)
        else:
            # 与官方客户端一致：不经过会话，单独发起请求，不携带 cookie
            async with httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT, transport=self.session.transport) as client:
                resp = await client.post(DYNAMIC_CODE_URL, data=data)

        if not resp.content:
            raise DynamicCodeFailed("获取短信验证码失败（响应为空）")

        result = DynamicCodeResp.model_validate_json(resp.content)
        if result.code != "success":
            raise DynamicCodeFailed(f"获取短信验证码失败: {result.message}", message=result.message)

    async def get_authenticated_user(self) -> AuthenticatedUser:
        return await profile.get_authenticated_user(self.session)

    async def logout(self) -> None:
        # 响应内容与状态码都不关心；网络异常直接抛出，此时不重置会话
        await self.session.get(EHALL_LOGOUT_URL)
        await self.session.get(SSO_LOGOUT_URL)

        await self.session.reset()
        self.state = AuthState.START
        logger.info("已退出登录并重置会话")

    # ---- 下游系统 ----

    async def login_to_course_selection(self) -> SessionStore:
        return await xk.login_to_course_selection(self.session)

    async def login_to_mooc(self) -> SessionStore:
        return await mooc.login_to_mooc(self.session, self.contract)
