import logging
import time
from http.cookiejar import Cookie
from typing import Optional

from ..config import settings
from ..security import decrypt_cookie_value, encrypt_cookie_value
from ..services.session import SessionStore
from .db import delete_cookies, get_conn, init_schema, load_cookies, replace_cookies

logger = logging.getLogger(__name__)


def _make_cookie(name: str, value: str, domain: str, path: str, expires, secure: bool) -> Cookie:
    return Cookie(
        version=0,
        name=name,
        value=value,
        port=None,
        port_specified=False,
        domain=domain,
        domain_specified=domain.startswith("."),
        domain_initial_dot=domain.startswith("."),
        path=path,
        path_specified=True,
        secure=secure,
        expires=expires,
        discard=expires is None,
        comment=None,
        comment_url=None,
        rest={},
    )


class SqliteCookieStore:
    """按用户名把会话 cookie 保存到 SQLite，cookie 值加密落盘"""

    def __init__(self, username: str, db_path: Optional[str] = None):
        self.username = username
        self.db_path = db_path or settings.DB_PATH

    def save_cookies(self, session: SessionStore) -> None:
        now = time.time()
        rows = [
            {
                "name": c.name,
                "value_encrypted": encrypt_cookie_value(c.value or ""),
                "domain": c.domain,
                "path": c.path,
                "expires": c.expires,
                "secure": c.secure,
            }
            for c in session.cookies.jar
            if not c.is_expired(now)
        ]
        conn = get_conn(self.db_path)
        try:
            init_schema(conn)
            replace_cookies(conn, self.username, rows)
            conn.commit()
        finally:
            conn.close()
        logger.debug("已保存用户 %s 的 %d 个 cookie", self.username, len(rows))

    def restore_cookies(self, session: SessionStore) -> None:
        conn = get_conn(self.db_path)
        try:
            init_schema(conn)
            rows = load_cookies(conn, self.username)
        finally:
            conn.close()

        now = time.time()
        restored = 0
        for row in rows:
            if row["expires"] is not None and row["expires"] <= now:
                continue
            session.cookies.jar.set_cookie(
                _make_cookie(
                    row["name"],
                    decrypt_cookie_value(row["value_encrypted"]),
                    row["domain"],
                    row["path"],
                    row["expires"],
                    bool(row["secure"]),
                )
            )
            restored += 1
        logger.debug("已恢复用户 %s 的 %d 个 cookie", self.username, restored)

    def clear_cookies(self) -> None:
        conn = get_conn(self.db_path)
        try:
            init_schema(conn)
            delete_cookies(conn, self.username)
            conn.commit()
        finally:
            conn.close()
