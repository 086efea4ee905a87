"""Static HTML summary page using Jinja2 templates."""

from datetime import datetime
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, select_autoescape

from suiterun.core.models import RunSummary
from suiterun.report.console import ConsoleReporter, extract_frames, extract_location


class HtmlReportGenerator:
    """Renders a run summary as a single static HTML page."""

    def __init__(self, title: str = "Test Results", project_name: str = ""):
        """Initialize the report generator.

        Args:
            title: Page title
            project_name: Project name shown in the header
        """
        self.title = title
        self.project_name = project_name

        template_dir = Path(__file__).parent / "templates"
        self.env = Environment(
            loader=FileSystemLoader(template_dir),
            autoescape=select_autoescape(["html", "xml"]),
        )

        self.env.filters["duration_format"] = self._format_duration
        self.env.filters["location"] = extract_location
        self.env.filters["frames"] = extract_frames

    def generate(self, summary: RunSummary, output_path: Path | str) -> Path:
        """Write the report and return its path."""
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        template = self.env.get_template("report.html")
        html_content = template.render(**self._prepare_context(summary))
        output_path.write_text(html_content, encoding="utf-8")

        return output_path

    def _prepare_context(self, summary: RunSummary) -> dict[str, Any]:
        total = summary.total
        passed = len(summary.passes)
        pass_rate = (passed / total * 100) if total > 0 else 0

        return {
            "title": self.title,
            "project_name": self.project_name,
            "generated_at": datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
            "total": total,
            "passed": passed,
            "failed": len(summary.failures),
            "errors": len(summary.errors),
            "pass_rate": pass_rate,
            "statistics": ConsoleReporter.statistics_line(summary),
            "wall_seconds": summary.total_wall_seconds,
            # slowest first
            "passes": sorted(summary.passes, key=lambda o: o.elapsed_seconds, reverse=True),
            "failures": summary.failures,
            "error_outcomes": summary.errors,
        }

    @staticmethod
    def _format_duration(seconds: float) -> str:
        """Format a duration in seconds to a human-readable string."""
        ms = seconds * 1000
        if ms < 1000:
            return f"{ms:.0f}ms"
        elif seconds < 60:
            return f"{seconds:.2f}s"
        else:
            minutes = int(seconds // 60)
            return f"{minutes}m {seconds % 60:.1f}s"
