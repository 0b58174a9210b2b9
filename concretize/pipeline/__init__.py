from .analyzer import Analysis, Analyzer

__all__ = ["Analysis", "Analyzer"]
