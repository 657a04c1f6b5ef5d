#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
场景标题解析器 - 从非结构化剧本文本中提取地点提及

场景标题格式:
  INT. 地点 - 时间
  EXT. 地点
  INT/EXT. 地点 - 子地点 - 时间

规则:
- 前缀大小写不敏感
- 末尾 " - X" (破折号两侧有空白) 仅当 X 是已知时间词时视为时间，否则保留为地点的一部分
- 无时间时默认 "DAY"
- 场次号按出现顺序从 1 开始计数
- 非字符串或空文本返回空列表
"""

from __future__ import annotations

import re
from typing import Any, List, Optional, Tuple

from extraction.models import LocationMention


SCENE_HEADING_RE = re.compile(
    r"^[ \t]*(INT\.?[ \t]*/[ \t]*EXT\.|EXT\.?[ \t]*/[ \t]*INT\.|INT\.|EXT\.)[ \t]+(.+?)[ \t]*$",
    re.IGNORECASE | re.MULTILINE,
)

TIME_OF_DAY_TOKENS = {
    "DAY",
    "NIGHT",
    "MORNING",
    "AFTERNOON",
    "EVENING",
    "DAWN",
    "DUSK",
    "SUNSET",
    "SUNRISE",
    "NOON",
    "MIDNIGHT",
    "LATER",
    "CONTINUOUS",
    "SAME TIME",
    "MOMENTS LATER",
    "LATE AFTERNOON",
    "LATE NIGHT",
    "EARLY MORNING",
    "THE NEXT DAY",
    "MAGIC HOUR",
    "PRE-DAWN",
    "PREDAWN",
    "LATE-NIGHT",
    "EARLY-MORNING",
    "LATE-AFTERNOON",
}

DEFAULT_TIME_OF_DAY = "DAY"

# 最后一个两侧带空白的破折号；"PRE-DAWN" 这类词内连字符不参与拆分
TIME_SUFFIX_RE = re.compile(r"^(.*\S)\s+-\s+(.+)$")


def is_time_of_day(token: str) -> bool:
    return " ".join(token.split()).upper() in TIME_OF_DAY_TOKENS


def split_time_of_day(location_text: str) -> Tuple[str, Optional[str]]:
    """
    拆分末尾的时间段

    Args:
        location_text: 如 "GREENLIT HQ - LOFT - NIGHT"

    Returns:
        (地点文本, 时间或 None)，如 ("GREENLIT HQ - LOFT", "NIGHT")
    """
    m = TIME_SUFFIX_RE.match(location_text.strip())
    if m and is_time_of_day(m.group(2)):
        return m.group(1).strip(), m.group(2).strip()
    return location_text.strip(), None


def heading_type(prefix: str) -> str:
    upper = prefix.upper()
    has_int = "INT" in upper
    has_ext = "EXT" in upper
    if has_int and has_ext:
        return "both"
    return "interior" if has_int else "exterior"


def parse_scene_headings(script_text: Any, episode_number: int) -> List[LocationMention]:
    """
    从剧本文本中提取地点提及

    Args:
        script_text: 单集剧本全文
        episode_number: 集号

    Returns:
        按出现顺序排列的地点提及列表
    """
    if not isinstance(script_text, str) or not script_text.strip():
        return []

    mentions: List[LocationMention] = []
    scene_number = 1

    for m in SCENE_HEADING_RE.finditer(script_text):
        location_text, time_of_day = split_time_of_day(m.group(2))
        if not location_text:
            continue

        mentions.append(LocationMention(
            name=location_text,
            full_name=location_text,
            type=heading_type(m.group(1)),
            episode_number=episode_number,
            scene_number=scene_number,
            time_of_day=time_of_day or DEFAULT_TIME_OF_DAY,
        ))
        scene_number += 1

    return mentions
