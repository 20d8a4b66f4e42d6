"""
各下游系统登录成功后的落地地址。

统一认证不返回显式的登录状态，只能通过跟随重定向后的最终 URL 判断，
比较时要求完全相等（scheme/host/path/query 均一致）。
"""
from enum import Enum
from typing import Dict, FrozenSet, Mapping, Optional, Union

import httpx

EHALL_INDEX = "https://ehall.csust.edu.cn/index.html"
EHALL_DEFAULT_INDEX = "https://ehall.csust.edu.cn/default/index.html"
MOOC_PERSONAL = "http://pt.csust.edu.cn/meol/personal.do"


class Service(str, Enum):
    EHALL = "ehall"                  # 账号密码登录
    EHALL_DYNAMIC = "ehall_dynamic"  # 短信验证码登录，只认一个地址
    EHALL_LANDING = "ehall_landing"  # 打开登录页时已登录的落地页
    MOOC = "mooc"


class AuthStatus(str, Enum):
    AUTHENTICATED = "authenticated"
    NEEDS_LOGIN = "needs_login"


RedirectContract = Mapping[Service, FrozenSet[str]]

DEFAULT_CONTRACT: Dict[Service, FrozenSet[str]] = {
    Service.EHALL: frozenset({EHALL_INDEX, EHALL_DEFAULT_INDEX}),
    Service.EHALL_DYNAMIC: frozenset({EHALL_INDEX}),
    Service.EHALL_LANDING: frozenset({EHALL_INDEX}),
    Service.MOOC: frozenset({MOOC_PERSONAL}),
}


def classify(
    final_url: Optional[Union[str, httpx.URL]],
    service: Service,
    contract: RedirectContract = DEFAULT_CONTRACT,
) -> AuthStatus:
    if final_url is None:
        return AuthStatus.NEEDS_LOGIN
    if str(final_url) in contract[service]:
        return AuthStatus.AUTHENTICATED
    return AuthStatus.NEEDS_LOGIN
