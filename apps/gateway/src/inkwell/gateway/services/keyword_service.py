"""KeywordService -- 图片包与生日包主题生成

通过 LiteLLM Proxy 生成主题列表。图片包在 LLM 未配置、调用失败或返回无法解析时
回退到静态目录中的包专属 / 分类主题列表；生日包的回退与缓存由 BirthdayService 负责。
"""

import json
import re

import structlog
from inkwell.core.catalog import BIRTHDAY_PACK_SIZE, fallback_topics
from inkwell.core.config import PACK_SIZE
from inkwell.core.models import Pack
from inkwell.provider import LiteLLMClient

log = structlog.get_logger()

_JSON_ARRAY_RE = re.compile(r"\[[\s\S]*\]")

_PROMPT_TEMPLATE = """You are helping generate coloring page ideas for children.

Generate exactly {size} unique, specific, and creative coloring page subjects for a pack called "{title}".

Pack description: {description}
Category: {category}
Age range: {age_range} years old
Difficulty: {difficulty}

Rules:
- Each subject should be a short 1-3 word noun phrase (e.g. "flying dolphin", "angry crab", "dancing octopus")
- Make them specific and varied, avoid repeating similar ideas
- Keep them appropriate and fun for children aged {age_range}
- Do NOT include numbering, bullet points, or extra text
- Return ONLY a JSON array of {size} strings, nothing else

Example format:
["subject one", "subject two", "subject three"]
"""


_BIRTHDAY_PROMPT_TEMPLATE = """You are helping generate birthday coloring page ideas for children.

Generate exactly {size} unique, specific, and creative coloring page subjects for a "{theme_label}" birthday theme.
{age_line}

Rules:
- Each subject should be a short 1-4 word noun phrase (e.g. "dancing unicorn", "birthday rocket", "party dinosaur")
- Make them birthday-themed and festive, with cakes, balloons or party hats where it fits naturally
- Keep them fun and appropriate for {audience}
- Vary the subjects, avoid repeating similar ideas
- Do NOT include numbering, bullet points, or extra text
- Return ONLY a JSON array of {size} strings, nothing else
"""


def parse_topics(text: str, size: int) -> list[str]:
    """从 LLM 响应中提取第一个 JSON 数组

    Raises:
        ValueError: 没有数组、数组为空或元素不是字符串
    """
    match = _JSON_ARRAY_RE.search(text)
    if not match:
        raise ValueError("响应中没有 JSON 数组")
    items = json.loads(match.group(0))
    if not isinstance(items, list):
        raise ValueError("响应不是 JSON 数组")
    topics = [item.strip() for item in items if isinstance(item, str) and item.strip()]
    if not topics:
        raise ValueError("主题列表为空")
    return topics[:size]


class KeywordService:
    """图片包主题生成服务"""

    def __init__(
        self,
        llm_client: LiteLLMClient | None = None,
        model_alias: str = "cheap",
        size: int = PACK_SIZE,
    ) -> None:
        """
        Args:
            llm_client: LiteLLM 客户端，None 表示只使用静态列表
            model_alias: Proxy 侧的 model group
            size: 每个包的主题数
        """
        self._llm = llm_client
        self._model_alias = model_alias
        self.size = size

    async def generate_pack_topics(self, pack: Pack) -> list[str]:
        """为图片包生成主题列表，从不抛出异常"""
        prompt = _PROMPT_TEMPLATE.format(
            size=self.size,
            title=pack.title,
            description=pack.description,
            category=pack.category,
            age_range=pack.age_range,
            difficulty=pack.difficulty.value,
        )
        topics = await self._ask(prompt, self.size, pack_id=pack.id)
        return topics or fallback_topics(pack, self.size)

    async def suggest_birthday_topics(
        self,
        theme_label: str,
        age: int | None = None,
        size: int = BIRTHDAY_PACK_SIZE,
    ) -> list[str] | None:
        """向 LLM 询问生日包主题；未配置 LLM 或调用失败返回 None，由调用方回退"""
        prompt = _BIRTHDAY_PROMPT_TEMPLATE.format(
            size=size,
            theme_label=theme_label,
            age_line=f"The birthday child is turning {age} years old." if age else "",
            audience=f"a {age} year old child" if age else "young children",
        )
        return await self._ask(prompt, size, birthday_theme=theme_label, age=age)

    async def _ask(self, prompt: str, size: int, **context) -> list[str] | None:
        if self._llm is None:
            return None
        try:
            text = await self._llm.complete(prompt, model_alias=self._model_alias)
            topics = parse_topics(text, size)
        except Exception as e:
            log.warning(
                "topics_llm_failed",
                error=str(e),
                error_type=type(e).__name__,
                **context,
            )
            return None

        log.info("topics_generated", count=len(topics), **context)
        return topics
