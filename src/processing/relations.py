#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
父子地点关系检测

例: "Greenlit HQ - Loft" 与 "Greenlit HQ" → parent="Greenlit HQ", child="Loft"

按优先级检查:
 1. A 为 "P - C" 且 B == P
 2. A、B 都是破折号形式且父部分相同 (返回 A 的拆分)
 3. 交换 A、B 重复检查 1
 4. 包含回退: 短名称是长名称的子串时视为父地点
 5. 否则无关系

包含回退会把无关的长名称 (如 "Bar" 与 "Barn Loft") 误合并，这是已知行为；
containment="word" 要求按单词边界包含，containment="off" 关闭回退。
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from extraction.normalizer import normalize, split_dash


CONTAINMENT_MODES = ("substring", "word", "off")


@dataclass(frozen=True)
class ParentChild:
    parent: str
    child: str


def strip_parent(name: str, parent: str) -> str:
    """从名称中去掉父地点文本 (首次出现，大小写不敏感) 及开头的破折号"""
    words = parent.split()
    if not words:
        return name.strip()
    pattern = r"\s+".join(re.escape(w) for w in words)
    stripped = re.sub(pattern, "", name, count=1, flags=re.IGNORECASE)
    return re.sub(r"^-\s*", "", stripped.strip()).strip()


def contains(longer: str, shorter: str, mode: str) -> bool:
    if mode == "off":
        return False
    if mode == "word":
        return re.search(r"(?<!\w)" + re.escape(shorter) + r"(?!\w)", longer) is not None
    return shorter in longer


def detect_parent_child(
    loc_a: str,
    loc_b: str,
    containment: str = "substring",
) -> Optional[ParentChild]:
    """
    检测两个地点名称之间的父子关系

    Args:
        loc_a, loc_b: 地点名称
        containment: 包含回退模式 (substring / word / off)

    Returns:
        ParentChild 或 None
    """
    if containment not in CONTAINMENT_MODES:
        raise ValueError(f"unknown containment mode: {containment}")

    norm_a = normalize(loc_a)
    norm_b = normalize(loc_b)
    if not norm_a or not norm_b:
        return None

    split_a = split_dash(loc_a)
    split_b = split_dash(loc_b)

    if split_a:
        parent_a, child_a = split_a
        if norm_b == normalize(parent_a):
            return ParentChild(parent_a, child_a)
        if split_b and normalize(split_b[0]) == normalize(parent_a):
            return ParentChild(parent_a, child_a)

    if split_b:
        parent_b, child_b = split_b
        if norm_a == normalize(parent_b):
            return ParentChild(parent_b, child_b)

    if len(norm_b) > len(norm_a) and contains(norm_b, norm_a, containment):
        return ParentChild(loc_a.strip(), strip_parent(loc_b, loc_a))
    if len(norm_a) > len(norm_b) and contains(norm_a, norm_b, containment):
        return ParentChild(loc_b.strip(), strip_parent(loc_a, loc_b))

    return None
