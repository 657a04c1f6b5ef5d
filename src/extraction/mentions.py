#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
地点提及汇总 - 对整个剧集语料执行提取

优先规则: 某集提供了非空的场景分解时，完全忽略该集剧本文本的解析结果，
同一集不会出现两种来源的重复提及。
按集号判断: 同一集号在输入中出现多次时，只要其中一条带场景分解，
该集所有条目的剧本文本都不解析。
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Set

from extraction.breakdown import import_breakdown
from extraction.models import EpisodeScriptData, LocationMention, as_int
from extraction.scene_parser import parse_scene_headings


def coerce_episodes(episodes: Any) -> List[EpisodeScriptData]:
    """接受 EpisodeScriptData 或 JSON 字典，丢弃无法识别的条目"""
    if not isinstance(episodes, (list, tuple)):
        return []
    result: List[EpisodeScriptData] = []
    for ep in episodes:
        if isinstance(ep, EpisodeScriptData):
            result.append(ep)
        elif isinstance(ep, dict):
            parsed = EpisodeScriptData.from_dict(ep)
            if parsed is not None:
                result.append(parsed)
    return result


def extract_episode_mentions(
    episode: EpisodeScriptData,
    breakdown_episodes: Optional[Set[int]] = None,
) -> List[LocationMention]:
    """
    提取单集的地点提及 (分解优先)

    Args:
        episode: 单集数据
        breakdown_episodes: 语料中带非空场景分解的集号；这些集的剧本文本不再解析

    Returns:
        地点提及列表
    """
    if episode.breakdown_scenes:
        return import_breakdown(episode.breakdown_scenes, episode.episode_number)
    if breakdown_episodes and episode.episode_number in breakdown_episodes:
        return []
    return parse_scene_headings(episode.script_text, episode.episode_number)


def extract_mentions(episodes: Iterable[Any]) -> List[LocationMention]:
    """
    提取所有剧集的地点提及

    Args:
        episodes: EpisodeScriptData 或等价的 JSON 字典列表

    Returns:
        按剧集输入顺序拼接的地点提及
    """
    corpus = coerce_episodes(list(episodes or []))
    breakdown_episodes = {ep.episode_number for ep in corpus if ep.breakdown_scenes}

    mentions: List[LocationMention] = []
    for episode in corpus:
        mentions.extend(extract_episode_mentions(episode, breakdown_episodes))
    return mentions


def episode_titles(episodes: Iterable[Any]) -> Dict[int, str]:
    """集号 → 集标题，重复集号保留第一个"""
    titles: Dict[int, str] = {}
    for episode in coerce_episodes(list(episodes or [])):
        titles.setdefault(episode.episode_number, episode.episode_title)
    return titles


def episodes_from_preproduction(data: Any) -> List[EpisodeScriptData]:
    """
    从按集号索引的前期制作数据构建剧集输入

    Args:
        data: {"1": {episodeTitle?, scriptText?, script: {text}?, scriptBreakdown: {scenes}?}, ...}

    Returns:
        按集号升序排列的 EpisodeScriptData 列表
    """
    if not isinstance(data, dict):
        return []

    episodes: List[EpisodeScriptData] = []
    for key, ep_data in data.items():
        episode_number = as_int(key)
        if episode_number is None:
            continue
        ep_data = ep_data if isinstance(ep_data, dict) else {}

        script_text: Optional[str] = ep_data.get("scriptText")
        if not isinstance(script_text, str) or not script_text:
            script = ep_data.get("script")
            script_text = script.get("text") if isinstance(script, dict) else None

        breakdown = ep_data.get("scriptBreakdown")
        scenes = breakdown.get("scenes") if isinstance(breakdown, dict) else None

        parsed = EpisodeScriptData.from_dict({
            "episodeNumber": episode_number,
            "episodeTitle": ep_data.get("episodeTitle"),
            "scriptText": script_text,
            "breakdownScenes": scenes,
        })
        if parsed is not None:
            episodes.append(parsed)

    episodes.sort(key=lambda ep: ep.episode_number)
    return episodes
