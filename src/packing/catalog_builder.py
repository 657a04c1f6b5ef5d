#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
地点目录构建器 - 将分组打包为 JSON 目录

功能：
 - 分组 ⇄ camelCase 字典的互相转换
 - 生成带元信息的目录信封
 - 从目录 (或裸数组) 读回分组，供增量挂接使用
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from extraction.models import (
    LOCATION_TYPES,
    EpisodeUsageRecord,
    LocationGroup,
    SubLocation,
    as_int,
)


@dataclass
class CatalogConfig:
    """目录配置"""
    project_id: str
    title: Optional[str] = None
    schema_version: int = 1


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")


def sub_location_to_dict(sub: SubLocation) -> Dict[str, Any]:
    return {
        "id": sub.id,
        "name": sub.name,
        "fullName": sub.full_name,
        "type": sub.type,
        "sceneReferences": [
            {"episodeNumber": ref.episode_number, "sceneNumber": ref.scene_number}
            for ref in sub.scene_references
        ],
        "totalScenes": sub.total_scenes,
    }


def usage_to_dict(usage: EpisodeUsageRecord) -> Dict[str, Any]:
    return {
        "episodeNumber": usage.episode_number,
        "episodeTitle": usage.episode_title,
        "sceneNumbers": sorted(usage.scene_numbers),
        "sceneCount": usage.scene_count,
        "subLocationIds": list(usage.sub_location_ids),
    }


def group_to_dict(group: LocationGroup) -> Dict[str, Any]:
    """
    构建 locationGroup 对象

    Args:
        group: 地点分组

    Returns:
        camelCase 字典；未绑定规范引用时不含 canonicalReferenceName
    """
    obj: Dict[str, Any] = {
        "id": group.id,
        "parentLocationName": group.parent_location_name,
        "type": group.type,
        "subLocations": [sub_location_to_dict(s) for s in group.sub_locations],
        "episodeUsage": [usage_to_dict(u) for u in group.episode_usage],
        "totalScenes": group.total_scenes,
        "totalEpisodes": group.total_episodes,
        "confidence": group.confidence,
        "episodesUsed": list(group.episodes_used),
        "scenesUsed": list(group.scenes_used),
        "timeOfDay": list(group.time_of_day),
        "firstUsedEpisode": group.first_used_episode,
        "lastUsedEpisode": group.last_used_episode,
    }
    if group.canonical_reference_name:
        obj["canonicalReferenceName"] = group.canonical_reference_name
    if group.canonical_location_id:
        obj["canonicalLocationId"] = group.canonical_location_id
    return obj


def sub_location_from_dict(obj: Dict[str, Any]) -> Optional[SubLocation]:
    sub_id = obj.get("id")
    name = obj.get("name")
    if not isinstance(sub_id, str) or not isinstance(name, str):
        return None
    sub = SubLocation(
        id=sub_id,
        name=name,
        full_name=obj.get("fullName") if isinstance(obj.get("fullName"), str) else name,
        type=obj.get("type") if isinstance(obj.get("type"), str) else "interior",
    )
    for ref in obj.get("sceneReferences") or []:
        if not isinstance(ref, dict):
            continue
        ep = as_int(ref.get("episodeNumber"))
        sc = as_int(ref.get("sceneNumber"))
        if ep is not None and sc is not None:
            sub.add_reference(ep, sc)
    return sub


def usage_from_dict(obj: Dict[str, Any]) -> Optional[EpisodeUsageRecord]:
    ep = as_int(obj.get("episodeNumber"))
    if ep is None:
        return None
    title = obj.get("episodeTitle")
    usage = EpisodeUsageRecord(
        episode_number=ep,
        episode_title=title if isinstance(title, str) and title else f"Episode {ep}",
    )
    for n in obj.get("sceneNumbers") or []:
        sc = as_int(n)
        if sc is not None:
            usage.add_scene(sc)
    for sub_id in obj.get("subLocationIds") or []:
        if isinstance(sub_id, str) and sub_id and sub_id not in usage.sub_location_ids:
            usage.sub_location_ids.append(sub_id)
    return usage


def group_from_dict(obj: Any) -> Optional[LocationGroup]:
    """从 camelCase 字典还原分组，缺少 id 或 parentLocationName 时返回 None"""
    if not isinstance(obj, dict):
        return None
    group_id = obj.get("id")
    name = obj.get("parentLocationName")
    if not isinstance(group_id, str) or not isinstance(name, str) or not name.strip():
        return None

    subs = [s for s in (sub_location_from_dict(x) for x in obj.get("subLocations") or [] if isinstance(x, dict)) if s]
    usage = [u for u in (usage_from_dict(x) for x in obj.get("episodeUsage") or [] if isinstance(x, dict)) if u]

    confidence = obj.get("confidence")
    confidence = float(confidence) if isinstance(confidence, (int, float)) else 0.0
    reference = obj.get("canonicalReferenceName")
    reference = reference if isinstance(reference, str) and reference else None
    if confidence <= 0:
        reference = None

    group = LocationGroup(
        id=group_id,
        parent_location_name=name,
        type=obj.get("type") if obj.get("type") in LOCATION_TYPES else "interior",
        sub_locations=subs,
        episode_usage=usage,
        canonical_reference_name=reference,
        canonical_location_id=obj.get("canonicalLocationId") if isinstance(obj.get("canonicalLocationId"), str) else None,
        confidence=max(0.0, min(1.0, confidence)),
        total_scenes=as_int(obj.get("totalScenes")) or 0,
        total_episodes=as_int(obj.get("totalEpisodes")) or 0,
        episodes_used=sorted({n for n in (as_int(x) for x in obj.get("episodesUsed") or []) if n is not None}),
        scenes_used=sorted({n for n in (as_int(x) for x in obj.get("scenesUsed") or []) if n is not None}),
        time_of_day=[t for t in obj.get("timeOfDay") or [] if isinstance(t, str)],
        first_used_episode=as_int(obj.get("firstUsedEpisode")) or 0,
        last_used_episode=as_int(obj.get("lastUsedEpisode")) or 0,
    )
    return group


def groups_from_catalog(payload: Any) -> List[LocationGroup]:
    """
    从目录信封或裸数组读取分组

    Args:
        payload: {"locationGroups": [...]} 或 [...]

    Returns:
        分组列表，无法识别的项被跳过
    """
    if isinstance(payload, dict):
        payload = payload.get("locationGroups")
    if not isinstance(payload, list):
        return []
    return [g for g in (group_from_dict(obj) for obj in payload) if g is not None]


def build_catalog(
    config: CatalogConfig,
    groups: List[LocationGroup],
    generated_at: Optional[str] = None,
) -> Dict[str, Any]:
    """
    构建完整的地点目录

    Args:
        config: 目录配置
        groups: 已排序的地点分组
        generated_at: 生成时间 (ISO 8601)，默认当前 UTC 时间

    Returns:
        目录字典
    """
    meta: Dict[str, Any] = {"projectId": config.project_id}
    if config.title:
        meta["title"] = config.title
    meta["generatedAt"] = generated_at or utc_now_iso()
    meta["groupCount"] = len(groups)

    return {
        "schemaVersion": config.schema_version,
        "catalog": meta,
        "locationGroups": [group_to_dict(g) for g in groups],
    }


def write_catalog(catalog: Dict[str, Any], output_path: str) -> None:
    """写入目录到文件"""
    os.makedirs(os.path.dirname(os.path.abspath(output_path)) or ".", exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(catalog, f, ensure_ascii=False, indent=2)
