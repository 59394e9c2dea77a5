from .report import ReportLifecycleView, error_response

__all__ = [
    "ReportLifecycleView", "error_response",
]
