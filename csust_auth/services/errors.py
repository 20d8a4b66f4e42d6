from typing import Optional


class SSOHelperError(Exception):
    """统一认证流程中的业务失败，网络/解码异常不包装，直接抛出"""

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class FormRetrievalError(SSOHelperError):
    pass


class EmptyLoginPageError(FormRetrievalError):
    pass


class SaltNotFoundError(FormRetrievalError):
    pass


class ExecutionNotFoundError(FormRetrievalError):
    pass


class LoginFormMissing(FormRetrievalError):
    pass


class CaptchaRequired(SSOHelperError):
    pass


class LoginFailed(SSOHelperError):
    def __init__(self, detail: str, final_url: Optional[str] = None):
        super().__init__(detail)
        self.final_url = final_url


class DynamicCodeFailed(SSOHelperError):
    def __init__(self, detail: str, message: Optional[str] = None):
        super().__init__(detail)
        self.message = message


class CaptchaRetrievalFailed(SSOHelperError):
    pass


class ProfileNotFound(SSOHelperError):
    pass


class EducationLoginFailed(SSOHelperError):
    pass


class MoocLoginFailed(SSOHelperError):
    pass
