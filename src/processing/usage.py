#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
分集使用统计 - 从 episodeUsage 完全重新派生分组的汇总字段

派生字段:
- episodesUsed: 有使用记录的集号，升序去重
- scenesUsed: 所有集场次号的并集，升序
- totalScenes: 不同 (集号, 场次号) 的个数
- totalEpisodes: len(episodesUsed)
- firstUsedEpisode / lastUsedEpisode: episodesUsed 的最小/最大值，无使用时为 0
- timeOfDay: 观察到的时间值并集 (调用方未提供时保留原值)

始终整体重算，不做增量修补。
"""

from __future__ import annotations

from typing import Iterable, List, Optional

from extraction.models import LocationGroup


def unique(values: Iterable[str]) -> List[str]:
    """去重并保持首次出现顺序"""
    seen: List[str] = []
    for v in values:
        if v and v not in seen:
            seen.append(v)
    return seen


def recompute_aggregates(
    group: LocationGroup,
    time_of_day: Optional[Iterable[str]] = None,
) -> LocationGroup:
    """
    重算分组的汇总字段 (原地修改并返回)

    Args:
        group: 地点分组
        time_of_day: 观察到的时间值，None 表示沿用分组已有的值

    Returns:
        同一个分组对象
    """
    group.episode_usage.sort(key=lambda u: u.episode_number)

    episodes = sorted({u.episode_number for u in group.episode_usage})
    scenes = sorted({n for u in group.episode_usage for n in u.scene_numbers})
    pairs = {(u.episode_number, n) for u in group.episode_usage for n in u.scene_numbers}

    group.episodes_used = episodes
    group.scenes_used = scenes
    group.total_scenes = len(pairs)
    group.total_episodes = len(episodes)
    group.first_used_episode = episodes[0] if episodes else 0
    group.last_used_episode = episodes[-1] if episodes else 0

    if time_of_day is not None:
        group.time_of_day = unique(time_of_day)

    return group
