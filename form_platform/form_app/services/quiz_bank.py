"""Pre-authored quiz banks used when the LLM path is unavailable."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

from ..models import Question


@dataclass(frozen=True)
class QuizBankEntry:
    key: str
    title: str
    options: Tuple[str, ...]
    answer: str = ""

    def to_question(self) -> Question:
        return Question(
            key=self.key,
            title=self.title,
            type="choice",
            required=True,
            options=self.options,
            correct_answer=self.answer,
            points=1 if self.answer else 0,
        )


QUIZ_BANKS: Dict[str, Sequence[QuizBankEntry]] = {
    "openai": (
        QuizBankEntry(
            key="openai_foundation",
            title="OpenAI 最初成立的年份是？",
            options=("2012", "2015", "2018", "2020"),
            answer="2015",
        ),
        QuizBankEntry(
            key="openai_chatgpt",
            title="ChatGPT 首次公开发布是在？",
            options=("2021年", "2022年", "2023年", "2024年"),
            answer="2022年",
        ),
        QuizBankEntry(
            key="openai_api_usage",
            title="若要在自己网站中调用 OpenAI 能力，最常见方式是？",
            options=("直接改浏览器内核", "调用 OpenAI API", "安装显卡驱动即可", "只用 Google Form"),
            answer="调用 OpenAI API",
        ),
        QuizBankEntry(
            key="openai_model_choice",
            title="在构建应用时，选择模型通常主要考虑哪项？",
            options=("延迟与成本", "电脑屏幕尺寸", "操作系统颜色", "网线长度"),
            answer="延迟与成本",
        ),
        QuizBankEntry(
            key="openai_safety",
            title="提示词工程中，为降低幻觉风险更推荐哪种做法？",
            options=("不给任何上下文", "要求模型胡乱猜测", "提供清晰上下文与约束", "只输出表情"),
            answer="提供清晰上下文与约束",
        ),
        QuizBankEntry(
            key="openai_temperature",
            title="在多数生成任务中，较低 temperature 通常意味着？",
            options=("输出更随机", "输出更稳定", "响应一定更长", "一定更便宜"),
            answer="输出更稳定",
        ),
        QuizBankEntry(
            key="openai_embedding",
            title="向量检索（RAG）里，embedding 主要用于？",
            options=("图像压缩", "计算语义相似度", "网页动画", "数据库备份"),
            answer="计算语义相似度",
        ),
        QuizBankEntry(
            key="openai_eval",
            title="上线前做评测（evaluation）的主要目的是什么？",
            options=("让页面更好看", "减少功能波动并验证质量", "提高鼠标精度", "减少网速延迟"),
            answer="减少功能波动并验证质量",
        ),
    ),
    "china": (
        QuizBankEntry(
            key="china_capital",
            title="中国的首都是哪座城市？",
            options=("上海", "北京", "广州", "深圳"),
            answer="北京",
        ),
        QuizBankEntry(
            key="china_national_day",
            title="中国国庆日是每年的哪一天？",
            options=("5月1日", "10月1日", "7月1日", "12月31日"),
            answer="10月1日",
        ),
        QuizBankEntry(
            key="china_longest_river",
            title="中国最长的河流是？",
            options=("黄河", "珠江", "长江", "黑龙江"),
            answer="长江",
        ),
        QuizBankEntry(
            key="china_highest_peak",
            title="珠穆朗玛峰位于哪条山脉？",
            options=("昆仑山脉", "秦岭", "横断山脉", "喜马拉雅山脉"),
            answer="喜马拉雅山脉",
        ),
        QuizBankEntry(
            key="china_currency",
            title="中国的法定货币是？",
            options=("日元", "人民币", "韩元", "新加坡元"),
            answer="人民币",
        ),
        QuizBankEntry(
            key="china_heritage",
            title="以下哪个是中国古代著名建筑？",
            options=("金字塔", "长城", "斗兽场", "泰姬陵"),
            answer="长城",
        ),
        QuizBankEntry(
            key="china_regions",
            title="中国有多少个省级行政区（含省、自治区、直辖市、特别行政区）？",
            options=("34个", "23个", "56个", "31个"),
            answer="34个",
        ),
        QuizBankEntry(
            key="china_festival",
            title="中秋节最常见的传统食品是？",
            options=("粽子", "汤圆", "月饼", "饺子"),
            answer="月饼",
        ),
    ),
    # Meta questions without answer keys; a topic outside the banks needs the LLM.
    "generic": (
        QuizBankEntry(
            key="generic_core",
            title="你认为这个主题中最核心的知识点是什么？",
            options=("基础概念", "历史背景", "实际应用", "综合理解"),
        ),
        QuizBankEntry(
            key="generic_difficulty",
            title="你希望这份测验的难度是？",
            options=("入门", "中等", "进阶", "混合"),
        ),
        QuizBankEntry(
            key="generic_goal",
            title="你做这份测验的主要目标是？",
            options=("自测", "教学", "面试准备", "活动互动"),
        ),
    ),
}


def bank_for_topic(topic: str) -> Sequence[QuizBankEntry]:
    return QUIZ_BANKS.get(topic) or QUIZ_BANKS["generic"]


def draw_questions(topic: str, count: int) -> List[Question]:
    bank = bank_for_topic(topic)
    return [entry.to_question() for entry in bank[: max(0, min(count, len(bank)))]]
