from .error_diagnostic import (
    SmartErrorDiagnostic, ErrorFormatter, DiagnosticResult, ErrorSuggestion,
    ErrorSeverity, ErrorCategory,
    LEXICAL_UNKNOWN, UNTERMINATED_STRING, SYNTAX_ERROR, INTERNAL_ERROR,
)

__all__ = [
    'SmartErrorDiagnostic', 'ErrorFormatter', 'DiagnosticResult', 'ErrorSuggestion',
    'ErrorSeverity', 'ErrorCategory',
    'LEXICAL_UNKNOWN', 'UNTERMINATED_STRING', 'SYNTAX_ERROR', 'INTERNAL_ERROR',
]
