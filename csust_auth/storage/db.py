import sqlite3
from pathlib import Path
from typing import Dict, Iterable, List

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS cookies (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  username TEXT NOT NULL,
  name TEXT NOT NULL,
  value_encrypted TEXT NOT NULL, -- Fernet 加密后的 cookie 值
  domain TEXT NOT NULL,
  path TEXT NOT NULL DEFAULT '/',
  expires INTEGER,               -- epoch seconds，NULL 表示会话 cookie
  secure INTEGER DEFAULT 0
);
CREATE UNIQUE INDEX IF NOT EXISTS idx_cookies_identity ON cookies (username, domain, path, name);
CREATE INDEX IF NOT EXISTS idx_cookies_username ON cookies (username);
"""

def get_conn(db_path: str) -> sqlite3.Connection:
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(db_path, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    return conn

def init_schema(conn: sqlite3.Connection):
    conn.executescript(SCHEMA_SQL)

def replace_cookies(conn: sqlite3.Connection, username: str, rows: Iterable[Dict]):
    conn.execute("DELETE FROM cookies WHERE username = ?", (username,))
    conn.executemany(
        """INSERT OR REPLACE INTO cookies
           (username, name, value_encrypted, domain, path, expires, secure)
           VALUES (?, ?, ?, ?, ?, ?, ?)""",
        [
            (username, r["name"], r["value_encrypted"], r["domain"], r["path"], r.get("expires"), int(r.get("secure", 0)))
            for r in rows
        ],
    )

def load_cookies(conn: sqlite3.Connection, username: str) -> List[sqlite3.Row]:
    cur = conn.execute(
        "SELECT name, value_encrypted, domain, path, expires, secure FROM cookies WHERE username = ?",
        (username,),
    )
    return cur.fetchall()

def delete_cookies(conn: sqlite3.Connection, username: str):
    conn.execute("DELETE FROM cookies WHERE username = ?", (username,))
