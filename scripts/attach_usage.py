#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
增量挂接命令行工具 - 把新剧集的地点使用情况挂到已有目录上

已有目录中的分组不会被拆分、改名或删除，也不会新增分组。

Usage:
    python scripts/attach_usage.py --catalog catalogs/show.catalog.json --input episodes_6_8.json --out catalogs/show.catalog.json
"""

import argparse
import json
import os
import sys

# 添加 src 到 Python 路径
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from packing.catalog_builder import CatalogConfig, build_catalog, groups_from_catalog, write_catalog
from processing.pipeline import ExtractionConfig, attach_episode_usage
from sources.project_loader import read_project_file


def main():
    parser = argparse.ArgumentParser(
        description="将新剧集的地点使用情况挂接到已有地点目录"
    )
    parser.add_argument("--catalog", required=True, help="已有目录 JSON 文件")
    parser.add_argument("--input", "-i", required=True, help="包含新剧集的项目导出 JSON")
    parser.add_argument("--out", "-o", required=True, help="输出目录文件")
    parser.add_argument("--attach-threshold", type=float, default=0.45)
    args = parser.parse_args()

    for path in (args.catalog, args.input):
        if not os.path.exists(path):
            raise SystemExit(f"错误: 文件不存在: {path}")

    with open(args.catalog, "r", encoding="utf-8") as f:
        existing = json.load(f)
    groups = groups_from_catalog(existing)
    if not groups:
        raise SystemExit(f"错误: 目录中没有地点分组: {args.catalog}")

    try:
        project = read_project_file(args.input)
    except ValueError as e:
        raise SystemExit(f"错误: {args.input}: {e}")

    meta = existing.get("catalog") if isinstance(existing, dict) else None
    if not isinstance(meta, dict):
        meta = {}
    catalog_config = CatalogConfig(
        project_id=meta.get("projectId") or project.project_id,
        title=meta.get("title") or project.title,
    )

    config = ExtractionConfig(attach_threshold=args.attach_threshold)
    updated = attach_episode_usage(groups, project.episodes, config)

    write_catalog(build_catalog(catalog_config, updated), args.out)

    before = sum(g.total_scenes for g in groups)
    after = sum(g.total_scenes for g in updated)
    print(f"✓ 挂接完成: {args.out} ({len(updated)} 个地点, 场次 {before} → {after})")


if __name__ == "__main__":
    main()
