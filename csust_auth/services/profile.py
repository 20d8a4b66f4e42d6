from ..models.schemas import AuthenticatedUser, LoginUserEnvelope
from .errors import ProfileNotFound
from .session import SessionStore

LOGIN_USER_URL = "https://ehall.csust.edu.cn/getLoginUser"


async def get_authenticated_user(session: SessionStore) -> AuthenticatedUser:
    resp = await session.get(LOGIN_USER_URL)
    envelope = LoginUserEnvelope.model_validate_json(resp.content)
    if envelope.data is None:
        raise ProfileNotFound("未获取到登录用户信息（可能未登录）")
    return envelope.data
