#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
地点目录流水线 - 串联提取、分组、统计和规范引用匹配

完整运行:
  剧集数据 → 提及 (分解优先) → 分组 → 使用统计 → 规范引用匹配 → 排序

增量运行:
  已有分组 + 剧集数据 → 提及 → 挂接 → 重算统计 → 排序

输出按 totalEpisodes 降序，平票保持发现顺序 (稳定排序)。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional

from extraction.mentions import episode_titles, episodes_from_preproduction, extract_mentions
from extraction.models import LocationGroup
from processing.attacher import DEFAULT_ATTACH_THRESHOLD, attach_mentions
from processing.grouping import group_mentions
from processing.matcher import DEFAULT_CANONICAL_THRESHOLD, match_groups, seed_groups_from_references


@dataclass
class ExtractionConfig:
    """提取配置"""
    canonical_threshold: float = DEFAULT_CANONICAL_THRESHOLD
    attach_threshold: float = DEFAULT_ATTACH_THRESHOLD
    containment: str = "substring"


def sort_groups(groups: List[LocationGroup]) -> List[LocationGroup]:
    return sorted(groups, key=lambda g: -g.total_episodes)


def coerce_episode_input(episodes: Any) -> List[Any]:
    """剧集列表原样返回；按集号索引的前期制作数据先转换为列表"""
    if isinstance(episodes, dict):
        return episodes_from_preproduction(episodes)
    if isinstance(episodes, (list, tuple)):
        return list(episodes)
    return []


def build_location_catalog(
    episodes: Any,
    references: Any = None,
    config: Optional[ExtractionConfig] = None,
) -> List[LocationGroup]:
    """
    从剧集数据构建地点目录

    Args:
        episodes: EpisodeScriptData / JSON 字典列表，或按集号索引的前期制作数据
        references: 规范引用列表 (字符串或 {name|title} 字典)
        config: 提取配置

    Returns:
        排序后的地点分组
    """
    config = config or ExtractionConfig()
    episodes = coerce_episode_input(episodes)

    mentions = extract_mentions(episodes)
    groups = group_mentions(mentions, episode_titles(episodes), config.containment)
    match_groups(groups, references or [], config.canonical_threshold)
    return sort_groups(groups)


def attach_episode_usage(
    groups: List[LocationGroup],
    episodes: Any,
    config: Optional[ExtractionConfig] = None,
) -> List[LocationGroup]:
    """
    把剧集使用情况挂接到已有分组，不创建新分组

    Args:
        groups: 已有分组
        episodes: 同 build_location_catalog
        config: 提取配置

    Returns:
        排序后的分组 (新对象，输入不变)
    """
    config = config or ExtractionConfig()
    episodes = coerce_episode_input(episodes)

    mentions = extract_mentions(episodes)
    attached = attach_mentions(groups, mentions, episode_titles(episodes), config.attach_threshold)
    return sort_groups(attached)


def build_reference_catalog(
    references: Any,
    episodes: Any = None,
    config: Optional[ExtractionConfig] = None,
) -> List[LocationGroup]:
    """以引用列表为准构建目录，再挂接剧集使用情况"""
    seeded = seed_groups_from_references(references)
    if episodes is None:
        return seeded
    return attach_episode_usage(seeded, episodes, config)
