#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
增量挂接 - 把新提取的提及挂到已有的规范分组上

规则:
- 每条提及与所有分组的父地点名计算 similarity，取最佳 (平分取靠前的分组)
- 分数 >= 0.45 时挂接到该分组的第一个 ("main") 子地点和对应集的使用记录
- 低于阈值的提及直接丢弃，挂接从不创建新分组
- 全部处理完后，对被修改的分组整体重算汇总字段

输入分组不会被修改，返回的是深拷贝。
"""

from __future__ import annotations

import copy
from collections import OrderedDict
from typing import Dict, List, Optional, Tuple

from extraction.models import EpisodeUsageRecord, LocationGroup, LocationMention, SubLocation
from extraction.normalizer import normalize
from processing.similarity import similarity
from processing.usage import recompute_aggregates


DEFAULT_ATTACH_THRESHOLD = 0.45


def best_group_index(mention: LocationMention, keys: List[str]) -> Optional[Tuple[int, float]]:
    """返回 (分组下标, 分数)，没有任何相似分组时返回 None"""
    name_key = normalize(mention.name)
    best: Optional[int] = None
    best_score = 0.0
    for i, key in enumerate(keys):
        score = similarity(name_key, key)
        if score > best_score:
            best_score = score
            best = i
    if best is None:
        return None
    return best, best_score


def main_sub_location(group: LocationGroup) -> SubLocation:
    """取分组的第一个子地点，没有时补一个 "main" 子地点"""
    if not group.sub_locations:
        group.sub_locations.append(SubLocation(
            id=f"{group.id}-main",
            name=group.parent_location_name,
            full_name=group.parent_location_name,
            type=group.type,
        ))
    return group.sub_locations[0]


def attach_to_group(
    group: LocationGroup,
    mention: LocationMention,
    titles: Dict[int, str],
) -> None:
    sub = main_sub_location(group)
    sub.add_reference(mention.episode_number, mention.scene_number)

    usage = group.usage_for(mention.episode_number)
    if usage is None:
        usage = EpisodeUsageRecord(
            episode_number=mention.episode_number,
            episode_title=titles.get(mention.episode_number) or f"Episode {mention.episode_number}",
        )
        group.episode_usage.append(usage)
    usage.add_scene(mention.scene_number, sub.id)


def attach_mentions(
    groups: List[LocationGroup],
    mentions: List[LocationMention],
    titles: Optional[Dict[int, str]] = None,
    threshold: float = DEFAULT_ATTACH_THRESHOLD,
) -> List[LocationGroup]:
    """
    将提及挂接到已有分组

    Args:
        groups: 已有的规范分组 (如从引用列表直接生成)
        mentions: 新提取的地点提及
        titles: 集号 → 集标题
        threshold: 挂接阈值

    Returns:
        分组的深拷贝，顺序不变，被挂接的分组已重算汇总字段
    """
    result = copy.deepcopy(groups)
    if not result or not mentions:
        return result

    titles = titles or {}
    keys = [normalize(g.parent_location_name) for g in result]
    touched: "OrderedDict[int, List[str]]" = OrderedDict()

    for mention in mentions:
        match = best_group_index(mention, keys)
        if match is None:
            continue
        idx, score = match
        if score < threshold:
            continue

        attach_to_group(result[idx], mention, titles)
        times = touched.setdefault(idx, [])
        if mention.time_of_day:
            times.append(mention.time_of_day)

    for idx, times in touched.items():
        group = result[idx]
        recompute_aggregates(group, time_of_day=list(group.time_of_day) + times)

    return result
