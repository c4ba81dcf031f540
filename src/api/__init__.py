"""
API层模块

注意：为避免在纯本地调用时强依赖 Flask，默认不导入 REST 端。
需要 REST 时，请 from src.api.rest_api import create_rest_app
"""

from .compiler_api import CompilerAPI

__all__ = ['CompilerAPI']
