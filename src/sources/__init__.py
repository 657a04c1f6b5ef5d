"""
Sources 模块

读取本地或远程的项目导出。
"""
