"""
自定义异常类
"""


class FrontendError(Exception):
    """编译器前端通用错误。"""


class LexicalError(FrontendError):
    """词法错误（存在 UNKNOWN 记号）。"""

    def __init__(self, message, diagnostics=None):
        super().__init__(message)
        self.diagnostics = diagnostics or []


class ToySyntaxError(FrontendError):
    """语法错误。"""

    def __init__(self, message, diagnostic=None):
        super().__init__(message)
        self.diagnostic = diagnostic


class InternalCompilerError(FrontendError):
    """内部错误，正确实现下不应出现。"""


class SourceTooLargeError(FrontendError):
    """源码超过允许的最大长度。"""


class ExportError(FrontendError):
    """导出阶段错误。"""
