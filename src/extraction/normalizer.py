#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
地点名称规范化 - 作为分组和查找的键，从不用于显示

功能：
 - normalize: 去除首尾空白、压缩连续空白、转小写 (幂等)
 - split_parent_part: 按 "父地点 - 子地点" 模式拆分
 - generate_client_id: 生成稳定的 id
"""

from __future__ import annotations

import hashlib
import re
from typing import Optional, Tuple


WHITESPACE_RE = re.compile(r"\s+")

# "Greenlit HQ - Loft" → ("Greenlit HQ", "Loft")
DASH_RE = re.compile(r"^(.+?)\s*-\s*(.+)$")


def normalize(text: str) -> str:
    """
    规范化地点名称

    Args:
        text: 原始名称

    Returns:
        小写、单空格分隔、无首尾空白的键；非字符串返回空串
    """
    if not isinstance(text, str):
        return ""
    return WHITESPACE_RE.sub(" ", text.strip()).lower()


def split_dash(name: str) -> Optional[Tuple[str, str]]:
    """按破折号模式拆分为 (父, 子)，不匹配返回 None"""
    m = DASH_RE.match(name.strip())
    if not m:
        return None
    return m.group(1).strip(), m.group(2).strip()


def split_parent_part(name: str) -> str:
    """取名称的父地点部分 (破折号前缀，无破折号时为全名)"""
    parts = split_dash(name)
    return parts[0] if parts else name.strip()


def generate_client_id(prefix: str, name: str) -> str:
    """生成稳定的 id"""
    h = hashlib.sha1(name.encode("utf-8")).hexdigest()[:10]
    return f"{prefix}-{h}"
