"""PlaceholderProvider -- echo 模式下的本地 provider

不访问网络，用 Pillow 在白底画布上绘制主题文字与边框，
供离线开发和测试使用。
"""

import asyncio
import io

from PIL import Image, ImageDraw

from ..base import ImageProvider
from ..models import RawArtifact

CANVAS_SIZE = 512


class PlaceholderProvider(ImageProvider):
    name = "placeholder"
    description = "Local placeholder renderer (echo mode)"

    async def attempt(self, prompt: str) -> RawArtifact:
        buffer = await asyncio.to_thread(self.render, prompt)
        return RawArtifact(
            buffer=buffer,
            mime_type="image/png",
            width=CANVAS_SIZE,
            height=CANVAS_SIZE,
        )

    @staticmethod
    def render(prompt: str) -> bytes:
        """绘制占位涂色页，返回 PNG 字节"""
        img = Image.new("L", (CANVAS_SIZE, CANVAS_SIZE), color=255)
        draw = ImageDraw.Draw(img)
        margin = 24
        draw.rectangle(
            (margin, margin, CANVAS_SIZE - margin, CANVAS_SIZE - margin),
            outline=0,
            width=6,
        )
        draw.ellipse((128, 128, CANVAS_SIZE - 128, CANVAS_SIZE - 128), outline=0, width=4)
        # prompt 较长，只绘制开头部分
        draw.text((margin * 2, margin * 2), prompt[:60], fill=0)

        out = io.BytesIO()
        img.save(out, format="PNG")
        return out.getvalue()
