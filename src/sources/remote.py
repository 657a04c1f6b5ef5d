#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
远程项目导出获取 - 并发下载多个项目的导出 JSON

特点:
- 并发请求，信号量限制并发数
- 可选速率限制 (每秒请求数)
- 失败自动重试，指数退避
- 单个 URL 最终失败只记录错误，不影响其他 URL

环境变量:
  LOCATION_CATALOG_API_KEY: Bearer token (可选)
"""

from __future__ import annotations

import asyncio
import json
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple


@dataclass
class FetchConfig:
    """获取配置"""
    api_key: Optional[str] = None
    timeout: float = 30.0
    max_concurrency: int = 4
    retries: int = 3
    rate_limit: Optional[float] = None
    backoff_base: float = 1.0


class RateLimiter:
    """简单的速率限制器"""

    def __init__(self, rps: Optional[float]):
        self.enabled = bool(rps) and rps > 0
        self.interval = 1.0 / rps if self.enabled else 0.0
        self._last = 0.0
        self._lock = asyncio.Lock()

    async def wait(self) -> None:
        if not self.enabled:
            return
        async with self._lock:
            now = time.monotonic()
            elapsed = now - self._last
            if elapsed < self.interval:
                await asyncio.sleep(self.interval - elapsed)
            self._last = time.monotonic()


def is_remote(path: str) -> bool:
    return path.startswith("http://") or path.startswith("https://")


async def fetch_json(session, config: FetchConfig, url: str) -> Any:
    """GET 一个 JSON 文档"""
    headers = {"Accept": "application/json"}
    if config.api_key:
        headers["Authorization"] = f"Bearer {config.api_key}"

    async with session.get(url, headers=headers) as resp:
        body = await resp.text()
        if resp.status != 200:
            raise RuntimeError(f"HTTP {resp.status}: {body[:400]}")
        try:
            return json.loads(body)
        except json.JSONDecodeError as e:
            raise RuntimeError(f"Invalid JSON: {e}")


async def fetch_documents(
    urls: List[str],
    config: FetchConfig,
    quiet: bool = False,
) -> Tuple[Dict[str, Any], Dict[str, str]]:
    """
    并发获取多个 JSON 文档

    Args:
        urls: 文档 URL 列表
        config: 获取配置
        quiet: 不输出进度

    Returns:
        (url → 文档, url → 错误信息)
    """
    import aiohttp

    sem = asyncio.Semaphore(max(1, config.max_concurrency))
    limiter = RateLimiter(config.rate_limit)
    timeout = aiohttp.ClientTimeout(total=config.timeout)
    retries = max(1, config.retries)

    results: Dict[str, Any] = {}
    errors: Dict[str, str] = {}

    def log(msg: str) -> None:
        if not quiet:
            ts = time.strftime("%H:%M:%S")
            print(f"[{ts}] {msg}", flush=True)

    async with aiohttp.ClientSession(timeout=timeout) as session:
        async def worker(url: str) -> None:
            for attempt in range(1, retries + 1):
                try:
                    async with sem:
                        await limiter.wait()
                        log(f"→ {url} attempt {attempt}/{retries}")
                        results[url] = await fetch_json(session, config, url)
                        log(f"✓ {url}")
                    return

                except (aiohttp.ClientError, asyncio.TimeoutError, RuntimeError) as e:
                    if attempt >= retries:
                        errors[url] = str(e)
                        log(f"✗ {url} 失败: {str(e)[:200]}")
                        return
                    backoff = config.backoff_base * 2 ** (attempt - 1)
                    log(f"! {url} 重试 in {backoff}s: {str(e)[:200]}")
                    await asyncio.sleep(backoff)

        await asyncio.gather(*(worker(url) for url in dict.fromkeys(urls)))

    return results, errors


def fetch_project_exports(
    urls: List[str],
    config: FetchConfig,
    quiet: bool = False,
) -> Tuple[Dict[str, Any], Dict[str, str]]:
    """fetch_documents 的同步入口"""
    return asyncio.run(fetch_documents(urls, config, quiet))
