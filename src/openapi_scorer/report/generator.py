"""Report renderer — turns a ScoreReport into JSON, Markdown or HTML text."""

import json
import logging
from html import escape
from pathlib import Path

from openapi_scorer.scoring.models import Issue, ScoreReport, Severity

logger = logging.getLogger(__name__)

REPORT_FORMATS = ("json", "markdown", "html")

SEVERITY_MARKERS = {
    Severity.CRITICAL: "🔴",
    Severity.HIGH: "🟠",
    Severity.MEDIUM: "🟡",
    Severity.LOW: "🔵",
}

# (lower bound, colour), same bands as the letter grades
SCORE_COLORS = ((90, "#28a745"), (80, "#17a2b8"), (70, "#ffc107"), (60, "#fd7e14"))
FAIL_COLOR = "#dc3545"

HTML_STYLE = """
body { font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
       line-height: 1.6; color: #333; max-width: 1200px; margin: 0 auto; padding: 20px;
       background-color: #f8f9fa; }
.container { background: white; padding: 30px; border-radius: 8px; box-shadow: 0 2px 10px rgba(0,0,0,0.1); }
.header { text-align: center; margin-bottom: 30px; padding-bottom: 20px; border-bottom: 3px solid #e9ecef; }
.score-display { font-size: 3em; font-weight: bold; margin: 10px 0; }
.grade { font-size: 2em; color: white; padding: 10px 20px; border-radius: 50%; display: inline-block; }
.stats { display: grid; grid-template-columns: repeat(auto-fit, minmax(200px, 1fr)); gap: 20px; margin: 20px 0; }
.stat-card { background: #f8f9fa; padding: 15px; border-radius: 6px; text-align: center; }
.stat-number { font-size: 2em; font-weight: bold; color: #495057; }
.criteria-table { width: 100%; border-collapse: collapse; margin: 20px 0; }
.criteria-table th, .criteria-table td { padding: 12px; text-align: left; border-bottom: 1px solid #dee2e6; }
.criteria-table th { background-color: #495057; color: white; }
.issue { margin: 15px 0; padding: 15px; border-left: 4px solid; border-radius: 4px; }
.issue.critical { border-color: #dc3545; background-color: #f8d7da; }
.issue.high { border-color: #fd7e14; background-color: #ffeaa7; }
.issue.medium { border-color: #ffc107; background-color: #fff3cd; }
.issue.low { border-color: #17a2b8; background-color: #d1ecf1; }
.issue-title { font-weight: bold; margin-bottom: 5px; }
.issue-location { font-size: 0.9em; color: #6c757d; margin-bottom: 5px; }
.issue-suggestion { font-style: italic; color: #495057; }
.progress-bar { background-color: #e9ecef; border-radius: 10px; height: 20px; overflow: hidden; }
"""


class UnsupportedFormatError(ValueError):
    """Raised for a report format outside REPORT_FORMATS."""


def generate_report(report: ScoreReport, fmt: str) -> str:
    """Render a report in the given format ('json', 'markdown' or 'html')."""
    if fmt == "json":
        return generate_json(report)
    if fmt == "markdown":
        return generate_markdown(report)
    if fmt == "html":
        return generate_html(report)
    raise UnsupportedFormatError(f"Unsupported report format: {fmt}")


def export_report(report: ScoreReport, fmt: str, output_path: Path | None = None) -> str | Path:
    """Render a report; write it to ``output_path`` when given.

    Returns the path written, or the rendered text when no path is given.
    """
    content = generate_report(report, fmt)
    if output_path is None:
        return content

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(content, encoding="utf-8")
    logger.info("Wrote %s report to %s", fmt, output_path)
    return output_path


def generate_json(report: ScoreReport) -> str:
    return json.dumps(report.to_dict(), indent=2, ensure_ascii=False)


def format_location(issue: Issue) -> str:
    """``/users → GET → responses`` style location string."""
    parts = [issue.path]
    if issue.operation:
        parts.append(issue.operation.upper())
    parts.append(issue.location)
    return " → ".join(parts)


def score_color(score: float) -> str:
    for threshold, color in SCORE_COLORS:
        if score >= threshold:
            return color
    return FAIL_COLOR


def generate_markdown(report: ScoreReport) -> str:
    info = report.spec_info
    md = [
        "# OpenAPI Specification Scoring Report",
        "",
        f"**API:** {info.title} v{info.version}",
        f"**Generated:** {report.timestamp:%Y-%m-%d %H:%M:%S %Z}",
        "",
        f"## Overall Score: {report.overall_score:g}/{report.max_score:g} (Grade: {report.grade})",
        "",
        "## Score Breakdown",
        "",
        "| Criterion | Score | Max | Weight | Issues |",
        "|-----------|-------|-----|--------|--------|",
    ]
    for result in report.results:
        md.append(
            f"| {result.criterion} | {result.score:g} | {result.max_score:g} "
            f"| {result.weight:g}% | {len(result.issues)} |"
        )

    summary = report.summary
    md += [
        "",
        "## Summary",
        "",
        f"- **Total Issues:** {report.total_issues}",
        f"- **Critical:** {summary.critical_issues}",
        f"- **High:** {summary.high_issues}",
        f"- **Medium:** {summary.medium_issues}",
        f"- **Low:** {summary.low_issues}",
        "",
        "**API Statistics:**",
        f"- Paths: {info.path_count}",
        f"- Operations: {info.operation_count}",
        "",
        "## Detailed Issues",
        "",
    ]

    for result in report.results:
        if not result.issues:
            continue
        md += [f"### {result.criterion} ({len(result.issues)} issues)", ""]
        for issue in result.issues:
            md += [
                f"#### {SEVERITY_MARKERS[issue.severity]} {issue.description}",
                "",
                f"**Location:** {format_location(issue)}",
                "",
                f"**Severity:** {issue.severity.value.upper()}",
                "",
                f"**Suggestion:** {issue.suggestion}",
                "",
            ]

    return "\n".join(md)


def generate_html(report: ScoreReport) -> str:
    info = report.spec_info
    color = score_color(report.overall_score)
    title = escape(f"{info.title} v{info.version}")
    # clamp for the bar when custom weights push the total past 100
    progress = max(0.0, min(100.0, report.overall_score))

    rows = "".join(
        f"<tr><td>{escape(r.criterion)}</td><td>{r.score:g}</td><td>{r.max_score:g}</td>"
        f"<td>{r.weight:g}%</td><td>{len(r.issues)}</td></tr>"
        for r in report.results
    )

    sections = []
    for result in report.results:
        if not result.issues:
            continue
        issues = "".join(
            f'<div class="issue {issue.severity.value}">'
            f'<div class="issue-title">{SEVERITY_MARKERS[issue.severity]} {escape(issue.description)}</div>'
            f'<div class="issue-location"><strong>Location:</strong> {escape(format_location(issue))}</div>'
            f'<div class="issue-suggestion"><strong>Suggestion:</strong> {escape(issue.suggestion)}</div>'
            f"</div>"
            for issue in result.issues
        )
        sections.append(f"<h3>{escape(result.criterion)} ({len(result.issues)} issues)</h3>{issues}")

    details = "".join(sections)

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>OpenAPI Scoring Report - {escape(info.title)}</title>
<style>{HTML_STYLE}</style>
</head>
<body>
<div class="container">
<div class="header">
<h1>OpenAPI Specification Scoring Report</h1>
<h2>{title}</h2>
<div class="score-display" style="color: {color}">{report.overall_score:g}/{report.max_score:g}</div>
<div class="grade" style="background: {color}">{report.grade}</div>
<div class="progress-bar"><div style="height: 100%; width: {progress:g}%; background-color: {color}"></div></div>
<p>Generated: {report.timestamp.isoformat()}</p>
</div>
<div class="section">
<h2>Statistics</h2>
<div class="stats">
<div class="stat-card"><div class="stat-number">{report.total_issues}</div><div>Total Issues</div></div>
<div class="stat-card"><div class="stat-number">{info.path_count}</div><div>API Paths</div></div>
<div class="stat-card"><div class="stat-number">{info.operation_count}</div><div>Operations</div></div>
<div class="stat-card"><div class="stat-number">{report.summary.critical_issues}</div><div>Critical Issues</div></div>
</div>
</div>
<div class="section">
<h2>Score Breakdown</h2>
<table class="criteria-table">
<thead><tr><th>Criterion</th><th>Score</th><th>Max Score</th><th>Weight</th><th>Issues</th></tr></thead>
<tbody>{rows}</tbody>
</table>
</div>
<div class="section">
<h2>Detailed Issues</h2>
{details}
</div>
</div>
</body>
</html>"""
