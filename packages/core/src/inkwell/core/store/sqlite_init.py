"""SQLite 数据库初始化

PRAGMA 配置 + images / pack_images / birthday_keywords 三张表 DDL + 索引创建。
使用 aiosqlite 异步操作。
"""

import aiosqlite

# images 表 DDL（缓存条目）
_IMAGES_DDL = """
CREATE TABLE IF NOT EXISTS images (
    id                TEXT PRIMARY KEY,
    topic             TEXT NOT NULL,
    topic_normalized  TEXT NOT NULL,
    category          TEXT,
    prompt            TEXT NOT NULL DEFAULT '',
    artifact_ref      TEXT NOT NULL,
    artifact_url      TEXT NOT NULL,
    mime_type         TEXT NOT NULL DEFAULT 'image/png',
    file_size         INTEGER NOT NULL DEFAULT 0,
    width             INTEGER,
    height            INTEGER,
    download_count    INTEGER NOT NULL DEFAULT 0,
    print_count       INTEGER NOT NULL DEFAULT 0,
    source_kind       TEXT NOT NULL DEFAULT 'unknown',
    provider          TEXT,
    created_at        TEXT NOT NULL,
    is_active         INTEGER NOT NULL DEFAULT 1
);
"""

_IMAGES_INDEXES = [
    # 同一缓存键允许多条记录，查询取最新一条
    "CREATE INDEX IF NOT EXISTS idx_images_topic ON images(topic_normalized, category);",
    "CREATE INDEX IF NOT EXISTS idx_images_category ON images(category);",
    "CREATE INDEX IF NOT EXISTS idx_images_created_at ON images(created_at DESC);",
    "CREATE INDEX IF NOT EXISTS idx_images_downloads ON images(download_count DESC);",
]

# pack_images 表 DDL（图片包单页）
_PACK_IMAGES_DDL = """
CREATE TABLE IF NOT EXISTS pack_images (
    id            TEXT PRIMARY KEY,
    pack_id       TEXT NOT NULL,
    topic         TEXT NOT NULL,
    artifact_ref  TEXT NOT NULL,
    artifact_url  TEXT NOT NULL,
    prompt        TEXT NOT NULL DEFAULT '',
    difficulty    TEXT NOT NULL DEFAULT 'medium',
    age_range     TEXT NOT NULL DEFAULT '',
    category      TEXT,
    position      INTEGER NOT NULL,
    mime_type     TEXT NOT NULL DEFAULT 'image/png',
    provider      TEXT,
    created_at    TEXT NOT NULL
);
"""

_PACK_IMAGES_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_pack_images_pack ON pack_images(pack_id, position);",
]

# birthday_keywords 表 DDL（生日包主题缓存，按 主题 + 年龄）
_BIRTHDAY_KEYWORDS_DDL = """
CREATE TABLE IF NOT EXISTS birthday_keywords (
    theme_id    TEXT NOT NULL,
    age         INTEGER NOT NULL,
    keywords    TEXT NOT NULL,
    created_at  TEXT NOT NULL,
    PRIMARY KEY (theme_id, age)
);
"""


async def init_db(conn: aiosqlite.Connection) -> None:
    """初始化数据库：设置 PRAGMA + 创建表 + 创建索引

    Args:
        conn: aiosqlite 数据库连接
    """
    await conn.execute("PRAGMA journal_mode = WAL;")
    await conn.execute("PRAGMA busy_timeout = 5000;")

    await conn.execute(_IMAGES_DDL)
    await conn.execute(_PACK_IMAGES_DDL)
    await conn.execute(_BIRTHDAY_KEYWORDS_DDL)

    for idx_sql in _IMAGES_INDEXES + _PACK_IMAGES_INDEXES:
        await conn.execute(idx_sql)

    await conn.commit()


async def verify_wal_mode(conn: aiosqlite.Connection) -> bool:
    """验证 WAL 模式是否生效

    Returns:
        True 如果 WAL 模式已启用
    """
    cursor = await conn.execute("PRAGMA journal_mode;")
    row = await cursor.fetchone()
    return row is not None and row[0].lower() == "wal"
