#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
场景分解导入器 - 从结构化的场景记录中提取地点提及

输入: [{sceneNumber, sceneTitle?, location?, timeOfDay?}]

规则:
- 无 location 的记录跳过
- 类型按原始 location 字符串中的 INT / EXT (或 interior / exterior) 子串推断，
  两者都有为 both，都没有默认 interior
- 显示名称去除 INT. / EXT. / INT/EXT. 前缀；fullName 保留原始字符串
- location 以 " - 时间" 结尾时从显示名称中去除，记录没有 timeOfDay 时用作时间
"""

from __future__ import annotations

import re
from typing import Any, List, Optional

from extraction.models import BreakdownScene, LocationMention
from extraction.scene_parser import split_time_of_day


PREFIX_RE = re.compile(
    r"^\s*(?:INT\.?\s*[/-]\s*EXT\.?|EXT\.?\s*[/-]\s*INT\.?|INT\.|EXT\.)\s*",
    re.IGNORECASE,
)


def infer_type(location_text: str) -> str:
    """按子串推断内景/外景"""
    upper = location_text.upper()
    lower = location_text.lower()
    is_interior = "INT" in upper or "interior" in lower
    is_exterior = "EXT" in upper or "exterior" in lower

    if is_interior and is_exterior:
        return "both"
    if is_exterior:
        return "exterior"
    return "interior"


def strip_heading_prefix(location_text: str) -> str:
    return PREFIX_RE.sub("", location_text, count=1).strip()


def coerce_scenes(records: Any) -> List[BreakdownScene]:
    """接受 BreakdownScene 或 JSON 字典，丢弃其他类型"""
    if not isinstance(records, list):
        return []
    scenes: List[BreakdownScene] = []
    for i, rec in enumerate(records, start=1):
        if isinstance(rec, BreakdownScene):
            scenes.append(rec)
        elif isinstance(rec, dict):
            scenes.append(BreakdownScene.from_dict(rec, i))
    return scenes


def import_breakdown(records: Any, episode_number: int) -> List[LocationMention]:
    """
    从场景分解记录中提取地点提及

    Args:
        records: 场景记录列表 (BreakdownScene 或字典)
        episode_number: 集号

    Returns:
        地点提及列表，保持记录顺序
    """
    mentions: List[LocationMention] = []

    for scene in coerce_scenes(records):
        raw = scene.location
        if not raw or not raw.strip():
            continue

        name, suffix_time = split_time_of_day(strip_heading_prefix(raw))
        time_of_day: Optional[str] = scene.time_of_day or suffix_time
        if not name:
            continue

        mentions.append(LocationMention(
            name=name,
            full_name=raw.strip(),
            type=infer_type(raw),
            episode_number=episode_number,
            scene_number=scene.scene_number,
            scene_title=scene.scene_title,
            time_of_day=time_of_day,
        ))

    return mentions
