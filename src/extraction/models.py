#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
数据模型 - 剧集输入、地点提及与规范地点分组

输入结构 (来自项目导出 JSON，camelCase):
  EpisodeScriptData: {episodeNumber, episodeTitle, scriptText?, breakdownScenes?: [...]}
  BreakdownScene:    {sceneNumber, sceneTitle?, location?, timeOfDay?}

输出结构:
  LocationGroup → SubLocation / EpisodeUsageRecord

from_dict 对缺失或类型错误的字段一律回退为默认值，不抛异常。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


LOCATION_TYPES = ("interior", "exterior", "both")


def as_int(value: Any) -> Optional[int]:
    """宽松地把值转换为 int，失败返回 None"""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def as_str(value: Any) -> Optional[str]:
    """仅接受字符串，其余返回 None"""
    return value if isinstance(value, str) else None


@dataclass
class BreakdownScene:
    """结构化场景记录"""
    scene_number: int
    scene_title: Optional[str] = None
    location: Optional[str] = None
    time_of_day: Optional[str] = None

    @classmethod
    def from_dict(cls, obj: Dict[str, Any], position: int) -> "BreakdownScene":
        # 缺少场次号时使用在列表中的位置 (从 1 开始)
        scene_number = as_int(obj.get("sceneNumber"))
        return cls(
            scene_number=scene_number if scene_number is not None else position,
            scene_title=as_str(obj.get("sceneTitle")),
            location=as_str(obj.get("location")),
            time_of_day=as_str(obj.get("timeOfDay")),
        )


@dataclass
class EpisodeScriptData:
    """单集的剧本文本和/或场景分解"""
    episode_number: int
    episode_title: str = ""
    script_text: Optional[str] = None
    breakdown_scenes: List[BreakdownScene] = field(default_factory=list)

    @classmethod
    def from_dict(cls, obj: Dict[str, Any]) -> Optional["EpisodeScriptData"]:
        """从 JSON 对象构建，集号无效时返回 None"""
        if not isinstance(obj, dict):
            return None
        episode_number = as_int(obj.get("episodeNumber"))
        if episode_number is None:
            return None

        scenes: List[BreakdownScene] = []
        raw_scenes = obj.get("breakdownScenes")
        if isinstance(raw_scenes, list):
            for i, raw in enumerate(raw_scenes, start=1):
                if isinstance(raw, dict):
                    scenes.append(BreakdownScene.from_dict(raw, i))

        title = as_str(obj.get("episodeTitle")) or f"Episode {episode_number}"
        return cls(
            episode_number=episode_number,
            episode_title=title,
            script_text=as_str(obj.get("scriptText")),
            breakdown_scenes=scenes,
        )


@dataclass
class LocationMention:
    """一次原始的地点出现 (每场一条)，仅在单次提取中存在"""
    name: str
    full_name: str
    type: str
    episode_number: int
    scene_number: int
    scene_title: Optional[str] = None
    time_of_day: Optional[str] = None


@dataclass(frozen=True)
class SceneReference:
    episode_number: int
    scene_number: int


@dataclass
class SubLocation:
    """父地点下的子区域，"main" 子地点代表父地点本身"""
    id: str
    name: str
    full_name: str
    type: str
    scene_references: List[SceneReference] = field(default_factory=list)

    @property
    def total_scenes(self) -> int:
        return len(self.scene_references)

    def add_reference(self, episode_number: int, scene_number: int) -> bool:
        """添加场次引用，已存在时返回 False"""
        ref = SceneReference(episode_number, scene_number)
        if ref in self.scene_references:
            return False
        self.scene_references.append(ref)
        return True


@dataclass
class EpisodeUsageRecord:
    """某一集中对该地点的使用情况"""
    episode_number: int
    episode_title: str
    scene_numbers: List[int] = field(default_factory=list)
    sub_location_ids: List[str] = field(default_factory=list)

    @property
    def scene_count(self) -> int:
        return len(self.scene_numbers)

    def add_scene(self, scene_number: int, sub_location_id: Optional[str] = None) -> None:
        if scene_number not in self.scene_numbers:
            self.scene_numbers.append(scene_number)
            self.scene_numbers.sort()
        if sub_location_id and sub_location_id not in self.sub_location_ids:
            self.sub_location_ids.append(sub_location_id)


@dataclass
class LocationGroup:
    """规范地点分组 - 同一地点所有提及合并后的表示"""
    id: str
    parent_location_name: str
    type: str = "interior"
    sub_locations: List[SubLocation] = field(default_factory=list)
    episode_usage: List[EpisodeUsageRecord] = field(default_factory=list)
    canonical_reference_name: Optional[str] = None
    canonical_location_id: Optional[str] = None
    confidence: float = 0.0

    # 以下字段由 processing.usage.recompute_aggregates 派生
    total_scenes: int = 0
    total_episodes: int = 0
    episodes_used: List[int] = field(default_factory=list)
    scenes_used: List[int] = field(default_factory=list)
    time_of_day: List[str] = field(default_factory=list)
    first_used_episode: int = 0
    last_used_episode: int = 0

    def usage_for(self, episode_number: int) -> Optional[EpisodeUsageRecord]:
        for usage in self.episode_usage:
            if usage.episode_number == episode_number:
                return usage
        return None
