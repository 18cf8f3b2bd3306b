"""
离线命令行工具：校验、导入、迁移
"""
