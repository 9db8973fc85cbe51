"""PackStore SQLite 实现 -- 图片包单页"""

from datetime import datetime

import aiosqlite

from ..models import PackImage

_COLUMNS = (
    "id",
    "pack_id",
    "topic",
    "artifact_ref",
    "artifact_url",
    "prompt",
    "difficulty",
    "age_range",
    "category",
    "position",
    "mime_type",
    "provider",
    "created_at",
)


class SqlitePackStore:
    """PackStore 的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def insert(self, image: PackImage) -> None:
        """写入单页并提交"""
        await self._conn.execute(
            f"""
            INSERT OR IGNORE INTO pack_images ({', '.join(_COLUMNS)})
            VALUES ({', '.join('?' for _ in _COLUMNS)})
            """,
            (
                image.id,
                image.pack_id,
                image.topic,
                image.artifact_ref,
                image.artifact_url,
                image.prompt,
                image.difficulty.value,
                image.age_range,
                image.category,
                image.position,
                image.mime_type,
                image.provider,
                image.created_at.isoformat(),
            ),
        )
        await self._conn.commit()

    async def list_for_pack(self, pack_id: str) -> list[PackImage]:
        """按 position 升序查询包内所有单页"""
        cursor = await self._conn.execute(
            f"SELECT {', '.join(_COLUMNS)} FROM pack_images "
            "WHERE pack_id = ? ORDER BY position ASC, created_at ASC",
            (pack_id,),
        )
        rows = await cursor.fetchall()
        return [self._row_to_image(row) for row in rows]

    async def count_for_pack(self, pack_id: str) -> int:
        """包内已存储页数"""
        cursor = await self._conn.execute(
            "SELECT COUNT(*) FROM pack_images WHERE pack_id = ?",
            (pack_id,),
        )
        row = await cursor.fetchone()
        return row[0]

    async def counts_by_pack(self) -> dict[str, int]:
        """所有包的已存储页数"""
        cursor = await self._conn.execute(
            "SELECT pack_id, COUNT(*) FROM pack_images GROUP BY pack_id"
        )
        return {row[0]: row[1] for row in await cursor.fetchall()}

    @staticmethod
    def _row_to_image(row) -> PackImage:
        """将数据库行转换为 PackImage 模型"""
        data = dict(zip(_COLUMNS, row, strict=True))
        data["created_at"] = datetime.fromisoformat(data["created_at"])
        return PackImage(**data)
