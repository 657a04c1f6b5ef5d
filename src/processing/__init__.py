"""
Processing 模块

地点提及的合并、关系检测、统计与规范引用匹配。

模块列表:
  similarity.py  按位置对齐的名称相似度
  relations.py   父子地点关系检测
  grouping.py    分桶 + 并查集合并为规范分组
  usage.py       分集使用统计 (整体重算)
  matcher.py     规范引用匹配 / 从引用列表生成分组
  attacher.py    增量挂接，不新建分组
  pipeline.py    串联以上步骤

数据流:
  提及 → [grouping] → 分组 → [usage] → [matcher] → 排序后的目录
  已有分组 + 提及 → [attacher] → [usage] → 排序后的目录
"""
