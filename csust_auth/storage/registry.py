from dataclasses import dataclass
from typing import Dict, List, Optional
import time

from ..config import settings
from ..services.sso import SSOHelper
from .cookie_store import SqliteCookieStore

@dataclass
class Entry:
    helper: SSOHelper
    exp: int  # epoch seconds

# 已通过校验、持有有效 JWT 的用户
_store: Dict[str, Entry] = {}
# 登录进行中（验证码 / 短信验证码），尚未证明身份
_pending: Dict[str, Entry] = {}

def _new_helper(username: str, restore: bool = True) -> SSOHelper:
    return SSOHelper(SqliteCookieStore(username), restore=restore)

def _expiry(ttl_seconds: Optional[int] = None) -> int:
    return int(time.time()) + (ttl_seconds or settings.SESSION_TTL_SECONDS)

async def _close(entries: List[Entry]) -> None:
    for e in entries:
        await e.helper.session.aclose()

async def sweep_expired() -> int:
    """清理两张表中所有过期实例并关闭其连接池，返回清理数量"""
    now = time.time()
    expired: List[Entry] = []
    for table in (_store, _pending):
        for username in [u for u, e in table.items() if e.exp < now]:
            expired.append(table.pop(username))
    await _close(expired)
    return len(expired)

def set_helper(username: str, helper: SSOHelper, ttl_seconds: Optional[int] = None) -> None:
    _store[username] = Entry(helper, _expiry(ttl_seconds))

async def get_helper(username: str) -> Optional[SSOHelper]:
    e = _store.get(username)
    if not e:
        return None
    if e.exp < time.time():
        # 过期只丢弃内存中的实例，落盘的 cookie 下次创建时会重新恢复
        _store.pop(username, None)
        await _close([e])
        return None
    return e.helper

async def get_or_create_helper(username: str) -> SSOHelper:
    """
    仅供已通过 JWT 校验的路由使用：可以从数据库恢复该用户的 cookie
    """
    helper = await get_helper(username)
    if helper is None:
        await sweep_expired()
        helper = _new_helper(username)
        set_helper(username, helper)
    return helper

async def start_login(username: str) -> SSOHelper:
    """
    未登录路由使用：全新会话，不读取落盘的 cookie，
    会话是否已登录不能作为身份证明；替换该用户之前进行中的登录
    """
    await sweep_expired()
    helper = _new_helper(username, restore=False)
    old = _pending.pop(username, None)
    _pending[username] = Entry(helper, _expiry())
    if old:
        await _close([old])
    return helper

async def get_pending(username: str) -> SSOHelper:
    """验证码与短信验证码通过 cookie 关联，同一次登录需复用同一个会话"""
    e = _pending.get(username)
    if e and e.exp >= time.time():
        return e.helper
    return await start_login(username)

async def discard_pending(username: str, helper: SSOHelper) -> None:
    e = _pending.get(username)
    if e and e.helper is helper:
        _pending.pop(username)
    await helper.session.aclose()

async def promote(username: str, helper: SSOHelper) -> None:
    """凭证校验通过后，用新会话替换该用户已登录的实例"""
    e = _pending.get(username)
    if e and e.helper is helper:
        _pending.pop(username)
    old = _store.get(username)
    set_helper(username, helper)
    if old and old.helper is not helper:
        await _close([old])

async def drop_helper(username: str) -> None:
    e = _store.pop(username, None)
    if e:
        await _close([e])
