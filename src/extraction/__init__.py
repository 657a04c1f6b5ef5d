"""
Extraction 模块

从剧本文本和场景分解中提取地点提及。

模块列表:
  models.py        数据模型
  normalizer.py    名称规范化 (分组键)
  scene_parser.py  场景标题解析
  breakdown.py     场景分解导入
  mentions.py      全剧集提取，分解优先
"""
