from .structured_logger import StructuredLogger, ContextLogger, StructuredFormatter

__all__ = ["StructuredLogger", "ContextLogger", "StructuredFormatter"]
