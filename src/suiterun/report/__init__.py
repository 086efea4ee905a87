"""Console and HTML reporting."""

from suiterun.report.console import ConsoleReporter, detect_color
from suiterun.report.html import HtmlReportGenerator

__all__ = ["ConsoleReporter", "HtmlReportGenerator", "detect_color"]
