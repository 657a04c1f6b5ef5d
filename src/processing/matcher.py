#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
规范引用匹配 - 将分组与权威地点名称列表 (如故事圣经中的地点) 模糊绑定

规则:
- 对每个引用名称计算 similarity，取最大值 (平分取列表中靠前的)
- 最大值 >= 0.5 时绑定 canonicalReferenceName，confidence 为该分数
- 否则不绑定，confidence = 0
- 不匹配是正常结果，不抛异常

引用列表项可以是字符串，也可以是带 name 或 title 的字典。
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Tuple

from extraction.models import LocationGroup, SubLocation
from extraction.normalizer import generate_client_id, normalize
from processing.similarity import similarity
from processing.usage import recompute_aggregates


DEFAULT_CANONICAL_THRESHOLD = 0.5


def entry_name(entry: Any) -> Optional[str]:
    """取引用项的名称 (字符串本身，或字典的 name / title)"""
    if isinstance(entry, str):
        name = entry
    elif isinstance(entry, dict):
        name = entry.get("name") or entry.get("title")
    else:
        return None
    if not isinstance(name, str) or not name.strip():
        return None
    return name.strip()


def reference_names(entries: Any) -> List[str]:
    """提取引用名称列表，跳过空项"""
    if not isinstance(entries, (list, tuple)):
        return []
    names: List[str] = []
    for entry in entries:
        name = entry_name(entry)
        if name:
            names.append(name)
    return names


def story_bible_locations(story_bible: Any) -> List[Any]:
    """读取 storyBible.worldBuilding.locations，缺失或格式错误时返回空列表"""
    if not isinstance(story_bible, dict):
        return []
    world = story_bible.get("worldBuilding")
    if not isinstance(world, dict):
        return []
    locations = world.get("locations")
    return list(locations) if isinstance(locations, list) else []


def best_reference_match(name: str, references: Sequence[str]) -> Tuple[Optional[str], float]:
    """
    找出与名称最相似的引用

    Args:
        name: 分组的父地点名
        references: 引用名称列表

    Returns:
        (最佳引用名称, 分数)；无引用时为 (None, 0.0)
    """
    best: Optional[str] = None
    best_score = 0.0
    for ref in references:
        score = similarity(name, ref)
        if score > best_score:
            best_score = score
            best = ref
    return best, best_score


def match_group(
    group: LocationGroup,
    references: Sequence[str],
    threshold: float = DEFAULT_CANONICAL_THRESHOLD,
) -> LocationGroup:
    """为单个分组绑定规范引用 (原地修改并返回)"""
    ref, score = best_reference_match(group.parent_location_name, references)
    if ref is not None and score >= threshold:
        group.canonical_reference_name = ref
        group.confidence = score
    else:
        group.canonical_reference_name = None
        group.confidence = 0.0
    return group


def match_groups(
    groups: List[LocationGroup],
    entries: Any,
    threshold: float = DEFAULT_CANONICAL_THRESHOLD,
) -> List[LocationGroup]:
    """为所有分组绑定规范引用"""
    references = reference_names(entries)
    for group in groups:
        match_group(group, references, threshold)
    return groups


def seed_groups_from_references(entries: Any) -> List[LocationGroup]:
    """
    直接从引用列表构建分组 (尚无剧集证据)

    每个分组: confidence = 1，episodeUsage 为空，只有一个 "main" 子地点。
    规范化后重名的项只保留第一个。

    Args:
        entries: 引用列表 (字符串或 {name|title, type?} 字典)

    Returns:
        分组列表，保持引用顺序
    """
    if not isinstance(entries, (list, tuple)):
        return []

    groups: List[LocationGroup] = []
    seen: Dict[str, bool] = {}

    for idx, entry in enumerate(entries):
        name = entry_name(entry)
        if name is None:
            if not isinstance(entry, dict):
                continue
            name = f"Location {idx + 1}"
        key = normalize(name)
        if key in seen:
            continue
        seen[key] = True

        raw_type = entry.get("type") if isinstance(entry, dict) else None
        loc_type = raw_type if raw_type in ("exterior", "both") else "interior"
        group_id = generate_client_id("refloc", key)

        group = LocationGroup(
            id=group_id,
            parent_location_name=name,
            type=loc_type,
            sub_locations=[SubLocation(
                id=f"{group_id}-main",
                name=name,
                full_name=name,
                type=loc_type,
            )],
            episode_usage=[],
            canonical_reference_name=name,
            canonical_location_id=generate_client_id("loc", key),
            confidence=1.0,
        )
        groups.append(recompute_aggregates(group, time_of_day=[]))

    return groups
