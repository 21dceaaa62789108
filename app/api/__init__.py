# app/api/__init__.py
"""
API package bootstrap.

- 这里不做任何重导出
- 路由挂载统一在 `app/main.py`
"""

__all__ = []
