"""CLI 入口模块 -- python -m inkwell.core <command>

支持的命令：
  stats  输出图库总数、总下载量与各分类数量
"""

import asyncio
import sys

from .config import get_db_path
from .models import GalleryStats


def main() -> None:
    """CLI 主入口"""
    if len(sys.argv) < 2:
        print("用法: python -m inkwell.core <command>")
        print("命令:")
        print("  stats  输出图库统计")
        sys.exit(1)

    command = sys.argv[1]

    if command == "stats":
        stats = asyncio.run(collect_stats(get_db_path()))
        print(format_stats(stats))
    else:
        print(f"未知命令: {command}")
        print("可用命令: stats")
        sys.exit(1)


async def collect_stats(db_path: str) -> GalleryStats:
    """读取图库统计"""
    from .store import create_store_group

    store_group = await create_store_group(db_path)
    try:
        return await store_group.cache_store.stats()
    finally:
        await store_group.conn.close()


def format_stats(stats: GalleryStats) -> str:
    """格式化统计输出"""
    lines = [
        f"图片总数: {stats.total_images}",
        f"下载总数: {stats.total_downloads}",
    ]
    if stats.by_category:
        lines.append("各分类数量:")
        lines.extend(f"  {c.category}: {c.count}" for c in stats.by_category)
    return "\n".join(lines)


if __name__ == "__main__":
    main()
