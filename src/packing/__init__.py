"""
Packing 模块

地点目录的 JSON 打包与读取。
"""
