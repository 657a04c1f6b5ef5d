#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
地点目录构建命令行工具

每个输入是一个项目导出 (本地 JSON 文件或 http(s) URL)，每个项目独立运行，
输出一个目录文件。

Usage:
    python scripts/build_catalog.py --input project.json --out-dir catalogs/
    python scripts/build_catalog.py --input a.json https://host/projects/b.json
    python scripts/build_catalog.py --input project.json --out-dir catalogs/ --from-references
"""

import argparse
import os
import sys
from typing import Dict, List

# 添加 src 到 Python 路径
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from packing.catalog_builder import CatalogConfig, build_catalog, write_catalog
from processing.pipeline import ExtractionConfig, build_location_catalog, build_reference_catalog
from processing.relations import CONTAINMENT_MODES
from sources.project_loader import ProjectData, load_project, project_id_from_path, read_project_file
from sources.remote import FetchConfig, fetch_project_exports, is_remote


def load_inputs(inputs: List[str], fetch_config: FetchConfig, quiet: bool) -> List[ProjectData]:
    """读取本地文件并并发下载远程导出"""
    remote_urls = [p for p in inputs if is_remote(p)]
    documents: Dict[str, object] = {}
    if remote_urls:
        documents, errors = fetch_project_exports(remote_urls, fetch_config, quiet=quiet)
        for url, err in errors.items():
            print(f"✗ 获取失败: {url} ({err})")

    projects: List[ProjectData] = []
    for path in inputs:
        try:
            if is_remote(path):
                if path not in documents:
                    continue
                projects.append(load_project(documents[path], fallback_id=project_id_from_path(path)))
            else:
                if not os.path.exists(path):
                    raise SystemExit(f"错误: 输入文件不存在: {path}")
                projects.append(read_project_file(path))
        except ValueError as e:
            raise SystemExit(f"错误: {path}: {e}")
    return projects


def run_project(project: ProjectData, config: ExtractionConfig, from_references: bool) -> dict:
    if from_references:
        groups = build_reference_catalog(project.references, project.episodes, config)
    else:
        groups = build_location_catalog(project.episodes, project.references, config)
    return build_catalog(CatalogConfig(project_id=project.project_id, title=project.title), groups)


def main():
    parser = argparse.ArgumentParser(
        description="从剧本和场景分解构建去重的地点目录"
    )
    parser.add_argument(
        "--input", "-i",
        nargs="+",
        required=True,
        help="项目导出 (JSON 文件路径或 http(s) URL)"
    )
    parser.add_argument(
        "--out-dir", "-o",
        default="catalogs",
        help="输出目录（默认: catalogs）"
    )
    parser.add_argument(
        "--from-references",
        action="store_true",
        help="以故事圣经地点为准，只挂接剧集使用情况，不新建分组"
    )
    parser.add_argument(
        "--containment",
        choices=CONTAINMENT_MODES,
        default="substring",
        help="父子关系的包含回退模式（默认: substring）"
    )
    parser.add_argument("--canonical-threshold", type=float, default=0.5)
    parser.add_argument("--attach-threshold", type=float, default=0.45)
    parser.add_argument(
        "--api-key",
        default=os.environ.get("LOCATION_CATALOG_API_KEY", ""),
        help="远程导出的 Bearer token"
    )
    parser.add_argument("--timeout", type=float, default=30.0)
    parser.add_argument("--retries", type=int, default=3)
    parser.add_argument("--quiet", action="store_true")
    args = parser.parse_args()

    config = ExtractionConfig(
        canonical_threshold=args.canonical_threshold,
        attach_threshold=args.attach_threshold,
        containment=args.containment,
    )
    fetch_config = FetchConfig(
        api_key=args.api_key or None,
        timeout=args.timeout,
        retries=args.retries,
    )

    projects = load_inputs(args.input, fetch_config, args.quiet)
    if not projects:
        raise SystemExit("错误: 没有可处理的项目")

    os.makedirs(args.out_dir, exist_ok=True)
    for project in projects:
        catalog = run_project(project, config, args.from_references)
        out_path = os.path.join(args.out_dir, f"{project.project_id}.catalog.json")
        write_catalog(catalog, out_path)
        groups = catalog["locationGroups"]
        bound = sum(1 for g in groups if g.get("canonicalReferenceName"))
        print(f"✓ {project.project_id}: {len(groups)} 个地点 (匹配引用 {bound}) → {out_path}")


if __name__ == "__main__":
    main()
