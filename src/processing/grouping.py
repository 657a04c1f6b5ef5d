#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
地点分组引擎 - 将原始提及合并为带子地点的规范地点分组

步骤:
 1. 按 normalize(name) 分桶
 2. 对每对桶的代表名称运行父子关系检测
 3. 用并查集把有关系的桶合并到不动点，链式关系 (A ⊃ B ⊃ C) 与发现顺序无关
 4. 规范父地点名: 成员中出现最多的 "父部分"，平票取最先出现的
 5. 类型: 多数投票，平票为 interior
 6. 子地点: 破折号后缀 / 去除父地点文本后的剩余部分 / "main"
 7. 每个出现的集号生成一条 EpisodeUsageRecord
"""

from __future__ import annotations

from collections import Counter, OrderedDict
from typing import Dict, List, Optional, Tuple

from extraction.models import EpisodeUsageRecord, LocationGroup, LocationMention, SubLocation
from extraction.normalizer import generate_client_id, normalize, split_dash, split_parent_part
from processing.relations import detect_parent_child, strip_parent
from processing.usage import recompute_aggregates


MAIN_SUB_LOCATION_KEY = "_main"


class UnionFind:
    """并查集，下标即桶在发现顺序中的位置；根总是集合中最小的下标"""

    def __init__(self, size: int):
        self.parent = list(range(size))

    def find(self, i: int) -> int:
        root = i
        while self.parent[root] != root:
            root = self.parent[root]
        # 路径压缩
        while self.parent[i] != root:
            nxt = self.parent[i]
            self.parent[i] = root
            i = nxt
        return root

    def union(self, a: int, b: int) -> None:
        ra, rb = self.find(a), self.find(b)
        if ra == rb:
            return
        if ra < rb:
            self.parent[rb] = ra
        else:
            self.parent[ra] = rb

    def components(self) -> List[List[int]]:
        """按根的顺序返回各集合的成员下标"""
        groups: Dict[int, List[int]] = OrderedDict()
        for i in range(len(self.parent)):
            groups.setdefault(self.find(i), []).append(i)
        return [groups[root] for root in sorted(groups)]


def bucket_mentions(
    mentions: List[LocationMention],
) -> "OrderedDict[str, List[Tuple[int, LocationMention]]]":
    """按规范化名称分桶，保留每条提及的全局序号"""
    buckets: "OrderedDict[str, List[Tuple[int, LocationMention]]]" = OrderedDict()
    for index, mention in enumerate(mentions):
        key = normalize(mention.name)
        if not key:
            continue
        buckets.setdefault(key, []).append((index, mention))
    return buckets


def pick_most_common(values: List[str]) -> Optional[str]:
    """
    多数投票，平票取最先出现的

    Args:
        values: 按出现顺序排列的候选值

    Returns:
        票数最多的值；空列表返回 None
    """
    counter = Counter(values)
    if not counter:
        return None
    max_count = max(counter.values())
    for value in counter:
        if counter[value] == max_count:
            return value
    return None


def canonical_parent_name(members: List[LocationMention]) -> str:
    """按规范化的父部分计票，返回该父部分首次出现时的原始写法"""
    first_display: Dict[str, str] = {}
    keys: List[str] = []
    for m in members:
        part = split_parent_part(m.name)
        key = normalize(part)
        first_display.setdefault(key, part)
        keys.append(key)
    winner = pick_most_common(keys)
    return first_display[winner] if winner is not None else members[0].name.strip()


def majority_type(members: List[LocationMention]) -> str:
    counter = Counter(m.type for m in members)
    ranked = counter.most_common()
    if not ranked:
        return "interior"
    if len(ranked) > 1 and ranked[0][1] == ranked[1][1]:
        return "interior"
    return ranked[0][0]


def sub_location_name(mention: LocationMention, parent_name: str) -> str:
    """
    计算提及对应的子地点名称，空串表示父地点本身 ("main")

    Args:
        mention: 地点提及
        parent_name: 规范父地点名

    Returns:
        子地点显示名称
    """
    parent_key = normalize(parent_name)
    parts = split_dash(mention.name)
    if parts and normalize(parts[0]) == parent_key:
        sub = parts[1]
    elif normalize(mention.name) != parent_key:
        sub = strip_parent(mention.name, parent_name)
    else:
        sub = ""

    if normalize(sub) == parent_key:
        return ""
    return sub


def build_group(
    members: List[LocationMention],
    titles: Optional[Dict[int, str]] = None,
) -> LocationGroup:
    """从一个合并后的桶构建 LocationGroup (含汇总字段)"""
    titles = titles or {}
    parent_name = canonical_parent_name(members)
    parent_key = normalize(parent_name)
    group_id = generate_client_id("locgroup", parent_key)

    sub_locations: "OrderedDict[str, SubLocation]" = OrderedDict()
    usage: "OrderedDict[int, EpisodeUsageRecord]" = OrderedDict()

    for m in members:
        sub_name = sub_location_name(m, parent_name)
        sub_key = normalize(sub_name) or MAIN_SUB_LOCATION_KEY

        sub = sub_locations.get(sub_key)
        if sub is None:
            if sub_key == MAIN_SUB_LOCATION_KEY:
                sub = SubLocation(
                    id=f"{group_id}-main",
                    name=parent_name,
                    full_name=parent_name,
                    type=m.type,
                )
            else:
                sub = SubLocation(
                    id=generate_client_id("subloc", f"{parent_key}/{sub_key}"),
                    name=sub_name,
                    full_name=f"{parent_name} - {sub_name}",
                    type=m.type,
                )
            sub_locations[sub_key] = sub
        sub.add_reference(m.episode_number, m.scene_number)

        record = usage.get(m.episode_number)
        if record is None:
            record = EpisodeUsageRecord(
                episode_number=m.episode_number,
                episode_title=titles.get(m.episode_number) or f"Episode {m.episode_number}",
            )
            usage[m.episode_number] = record
        record.add_scene(m.scene_number, sub.id)

    group = LocationGroup(
        id=group_id,
        parent_location_name=parent_name,
        type=majority_type(members),
        sub_locations=list(sub_locations.values()),
        episode_usage=list(usage.values()),
        canonical_location_id=generate_client_id("loc", parent_key),
    )
    return recompute_aggregates(group, time_of_day=[m.time_of_day for m in members if m.time_of_day])


def group_mentions(
    mentions: List[LocationMention],
    titles: Optional[Dict[int, str]] = None,
    containment: str = "substring",
) -> List[LocationGroup]:
    """
    将地点提及合并为规范地点分组

    Args:
        mentions: 所有剧集的地点提及
        titles: 集号 → 集标题
        containment: 父子关系检测的包含回退模式

    Returns:
        按发现顺序排列的分组 (未排序、未做规范引用匹配)
    """
    buckets = bucket_mentions(mentions)
    keys = list(buckets.keys())
    representatives = [buckets[k][0][1].name for k in keys]

    uf = UnionFind(len(keys))
    for i in range(len(keys)):
        for j in range(i + 1, len(keys)):
            if detect_parent_child(representatives[i], representatives[j], containment):
                uf.union(i, j)

    groups: List[LocationGroup] = []
    for component in uf.components():
        indexed = [item for idx in component for item in buckets[keys[idx]]]
        indexed.sort(key=lambda item: item[0])
        groups.append(build_group([m for _, m in indexed], titles))

    return groups
