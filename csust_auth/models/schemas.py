from pydantic import BaseModel, ConfigDict
from typing import Optional, Union, List, Dict

class CommonResp(BaseModel):
    code: int = 0
    message: str = "ok"
    data: Union[List, Dict, None] = None

class LoginReq(BaseModel):
    username: str
    password: str

class DynamicCodeReq(BaseModel):
    username: str
    mobile: str
    captcha: str

class DynamicLoginReq(BaseModel):
    username: str
    dynamic_code: str
    captcha: str

class LoginData(BaseModel):
    token: str

class LoginResp(CommonResp):
    data: Optional[LoginData] = None

# ---- 统一认证 / 网上办事大厅返回的 JSON ----

class CheckNeedCaptchaResp(BaseModel):
    isNeed: bool

class DynamicCodeResp(BaseModel):
    code: str
    message: str
    mobile: Optional[str] = None
    intervalTime: Optional[int] = None
    time: Optional[int] = None

class AuthenticatedUser(BaseModel):
    """getLoginUser 返回的用户信息，未列出的字段原样保留"""
    model_config = ConfigDict(frozen=True, extra="allow")

    categoryId: Optional[str] = None
    userAccount: Optional[str] = None
    userName: Optional[str] = None
    certCode: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    status: Optional[str] = None
    deptName: Optional[str] = None
    defaultUserAvatar: Optional[str] = None
    headImageIcon: Optional[str] = None

class LoginUserEnvelope(BaseModel):
    data: Optional[AuthenticatedUser] = None

class UserInfoResp(CommonResp):
    data: Optional[AuthenticatedUser] = None
