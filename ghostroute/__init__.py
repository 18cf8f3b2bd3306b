"""
Ghost Route 叙事事件后端
"""

__version__ = "0.1.0"
