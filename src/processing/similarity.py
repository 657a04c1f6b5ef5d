#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
名称相似度 - 按位置对齐的简单启发式 (0-1)

score = 同一位置字符相同的个数 / 较长字符串的长度

这不是编辑距离：任何插入或删除导致的错位都会显著降低分数。
规范绑定 (0.5) 和增量挂接 (0.45) 的阈值都基于该分数标定，
替换为其他度量会改变匹配结果。
"""

from __future__ import annotations

from extraction.normalizer import normalize


def similarity(a: str, b: str) -> float:
    """
    计算两个名称的相似度

    Args:
        a, b: 原始名称 (内部会先规范化)

    Returns:
        0 (任一为空) 到 1 (规范化后相同)
    """
    s1 = normalize(a)
    s2 = normalize(b)
    if not s1 or not s2:
        return 0.0
    if s1 == s2:
        return 1.0

    matches = sum(1 for c1, c2 in zip(s1, s2) if c1 == c2)
    return matches / max(len(s1), len(s2))
