"""
Fake CSUST SSO gateway served through httpx.MockTransport.

Authentication state lives in cookies, as on the real server: a successful
login sets CASTGC on authserver and MOD_AUTH_CAS on ehall, so resetting the
client's jar really does log the session out.
"""
from urllib.parse import parse_qs

import httpx
import pytest
import pytest_asyncio

from csust_auth.services.sso import SSOHelper

EHALL_INDEX = "https://ehall.csust.edu.cn/index.html"
EHALL_DEFAULT_INDEX = "https://ehall.csust.edu.cn/default/index.html"
MOOC_PERSONAL = "http://pt.csust.edu.cn/meol/personal.do"
XK_TICKET_URL = "http://xk.csust.edu.cn/sso.jsp?ticket=ST-1"
MOOC_SSO_URL = "http://pt.csust.edu.cn/meol/homepage/common/sso_login.jsp"

LOGIN_PAGE = """<html><body>
<form id="pwdFromId" method="post">
  <input id="username" name="username" placeholder="请输入账号"/>
  <input type="password" id="password" placeholder="请输入密码"/>
  <input type="hidden" id="pwdEncryptSalt" value="{salt}"/>
  <input type="hidden" id="execution" name="execution" value="{execution}"/>
</form>
</body></html>"""


def stub_encryptor(password: str, salt: str) -> str:
    return f"ENC[{password}|{salt}]"


class FakeAuthServer:
    def __init__(self):
        self.requests = []
        self.salt = "abc123"
        self.execution = "tok-1"
        self.login_page = None
        self.need_captcha = False
        # where a POST with good credentials lands; None means no redirect
        self.post_redirect = EHALL_INDEX
        self.landing_url = EHALL_INDEX
        self.mooc_target = MOOC_PERSONAL
        self.captcha_image = b"\xff\xd8\xff\xe0fake-jpeg"
        self.dynamic_code_resp = {"code": "success", "message": "发送成功", "intervalTime": 60}
        self.logout_status = 200
        self.profile = {"userAccount": "u1", "userName": "张三", "deptName": "计算机学院"}
        self.unreachable = set()

    # ---- helpers for assertions ----

    def requests_to(self, path: str, method: str = None):
        return [
            r for r in self.requests
            if r.url.path == path and (method is None or r.method == method)
        ]

    @staticmethod
    def form_of(request: httpx.Request):
        return {k: v[0] for k, v in parse_qs(request.content.decode(), keep_blank_values=True).items()}

    # ---- routing ----

    @staticmethod
    def _has_cookie(request: httpx.Request, pair: str) -> bool:
        return pair in request.headers.get("cookie", "")

    def _service_target(self, service: str) -> str:
        if "ehall" in service:
            return self.landing_url
        if "xk.csust" in service:
            return XK_TICKET_URL
        return self.mooc_target

    def _login_page(self) -> httpx.Response:
        html = self.login_page
        if html is None:
            html = LOGIN_PAGE.format(salt=self.salt, execution=self.execution)
        return httpx.Response(200, text=html)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        host, path = request.url.host, request.url.path

        if path in self.unreachable:
            raise httpx.ConnectError("connection refused", request=request)

        if host == "authserver.csust.edu.cn":
            return self._authserver(request, path)
        if host == "ehall.csust.edu.cn":
            return self._ehall(request, path)
        if host == "xk.csust.edu.cn":
            if "ticket" in request.url.params:
                return httpx.Response(200, text="<html>学生选课系统</html>")
            return httpx.Response(200, text="<html>xk</html>", headers={"Set-Cookie": "JSESSIONID=xk-1; Path=/"})
        if host == "pt.csust.edu.cn":
            if path == "/meol/homepage/common/sso_login.jsp":
                service = "http%3A%2F%2Fpt.csust.edu.cn%2Fmeol%2Fhomepage%2Fcommon%2Fsso_login.jsp"
                return httpx.Response(302, headers={"Location": f"https://authserver.csust.edu.cn/authserver/login?service={service}"})
            return httpx.Response(200, text="<html>personal</html>")
        return httpx.Response(404)

    def _authserver(self, request: httpx.Request, path: str) -> httpx.Response:
        authenticated = self._has_cookie(request, "CASTGC=TGT-1")

        if path == "/authserver/login":
            service = request.url.params.get("service", "")
            if request.method == "GET":
                if authenticated:
                    return httpx.Response(302, headers={"Location": self._service_target(service)})
                return self._login_page()

            form = self.form_of(request)
            if form.get("execution") != self.execution or self.post_redirect is None:
                return self._login_page()
            return httpx.Response(
                302,
                headers=[("Location", self.post_redirect), ("Set-Cookie", "CASTGC=TGT-1; Path=/authserver")],
            )

        if path == "/authserver/checkNeedCaptcha.htl":
            return httpx.Response(200, json={"isNeed": self.need_captcha})
        if path == "/authserver/getCaptcha.htl":
            return httpx.Response(200, content=self.captcha_image, headers={"Content-Type": "image/jpeg"})
        if path == "/authserver/dynamicCode/getDynamicCode.htl":
            return httpx.Response(200, json=self.dynamic_code_resp)
        if path == "/authserver/logout":
            return httpx.Response(self.logout_status, text="bye")
        return httpx.Response(404)

    def _ehall(self, request: httpx.Request, path: str) -> httpx.Response:
        if path in ("/index.html", "/default/index.html"):
            return httpx.Response(200, text="<html>ehall</html>", headers={"Set-Cookie": "MOD_AUTH_CAS=ehall-1; Path=/"})
        if path == "/getLoginUser":
            if self._has_cookie(request, "MOD_AUTH_CAS=ehall-1"):
                return httpx.Response(200, json={"data": self.profile})
            return httpx.Response(200, json={"data": None})
        if path == "/logout":
            return httpx.Response(self.logout_status, text="bye")
        return httpx.Response(404)


@pytest.fixture
def server():
    return FakeAuthServer()


@pytest.fixture
def transport(server):
    return httpx.MockTransport(server.handler)


@pytest_asyncio.fixture
async def helper(transport):
    h = SSOHelper(encryptor=stub_encryptor, transport=transport)
    yield h
    await h.session.aclose()
