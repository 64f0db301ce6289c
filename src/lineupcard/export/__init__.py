from .charting import ChartRenderer, MatplotlibChartRenderer
from .service import ExportService

__all__ = ["ChartRenderer", "ExportService", "MatplotlibChartRenderer"]
