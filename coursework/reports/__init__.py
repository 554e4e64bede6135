from .item_analysis_report import ItemAnalysisReport

__all__ = ["ItemAnalysisReport"]
