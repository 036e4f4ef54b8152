from .config import ReportSettings

__all__ = ["ReportSettings"]
