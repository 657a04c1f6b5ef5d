#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
项目导出读取器 - 把项目导出 JSON 转换为流水线输入

支持的结构:
  {
    "projectId": "...", "title": "...",
    "storyBible": {"worldBuilding": {"locations": [...]}},
    "episodes": [{episodeNumber, episodeTitle, scriptText?, breakdownScenes?}],
    "episodePreProduction": {"1": {scriptText?, scriptBreakdown: {scenes}}},
    "references": [...]                 # 可选，覆盖故事圣经中的地点
    "locationGroups": [...]             # 可选，已有目录 (增量挂接)
  }
  或直接是剧集数组。
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from extraction.mentions import coerce_episodes, episodes_from_preproduction
from extraction.models import EpisodeScriptData
from processing.matcher import story_bible_locations


@dataclass
class ProjectData:
    """单个项目的流水线输入"""
    project_id: str
    title: Optional[str] = None
    episodes: List[EpisodeScriptData] = field(default_factory=list)
    references: List[Any] = field(default_factory=list)
    location_groups: List[Dict[str, Any]] = field(default_factory=list)


def read_json(path: str) -> Any:
    """读取 JSON 文件"""
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def project_id_from_path(path: str) -> str:
    base = os.path.basename(path.rstrip("/"))
    stem, _ = os.path.splitext(base)
    return stem or "project"


def load_project(payload: Any, fallback_id: str = "project") -> ProjectData:
    """
    解析项目导出

    Args:
        payload: 已解析的 JSON
        fallback_id: 导出中没有 projectId 时使用的 id

    Returns:
        ProjectData

    Raises:
        ValueError: 顶层既不是对象也不是数组
    """
    if isinstance(payload, list):
        return ProjectData(project_id=fallback_id, episodes=coerce_episodes(payload))
    if not isinstance(payload, dict):
        raise ValueError("项目导出必须是 JSON 对象或数组")

    project_id = payload.get("projectId")
    if not isinstance(project_id, str) or not project_id.strip():
        project_id = fallback_id
    title = payload.get("title")

    episodes = coerce_episodes(payload.get("episodes"))
    if not episodes:
        episodes = episodes_from_preproduction(payload.get("episodePreProduction"))

    references = payload.get("references")
    if not isinstance(references, list):
        references = story_bible_locations(payload.get("storyBible"))

    groups = payload.get("locationGroups")

    return ProjectData(
        project_id=project_id.strip(),
        title=title if isinstance(title, str) and title else None,
        episodes=episodes,
        references=references,
        location_groups=groups if isinstance(groups, list) else [],
    )


def read_project_file(path: str) -> ProjectData:
    """读取本地项目导出文件"""
    return load_project(read_json(path), fallback_id=project_id_from_path(path))
