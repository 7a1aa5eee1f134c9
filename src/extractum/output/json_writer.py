"""JSON output writer for repository reports."""

import json
from datetime import datetime
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

from extractum.models import Issue, IssueDetails, PullRequest, Repository


class RepositoryStats(BaseModel):
    """Counts derived from the fetched data."""

    total_issues: int = 0
    merged_prs: int = 0
    total_comments: int = 0


class RepositoryReport(BaseModel):
    """Complete extraction report for JSON output."""

    repository: Repository
    generated_at: datetime
    stats: RepositoryStats
    issues: list[IssueDetails] = Field(default_factory=list)
    pull_requests: list[PullRequest] = Field(default_factory=list)


def build_report(
    repository: Repository,
    issues: list[Issue],
    pull_requests: list[PullRequest],
    issue_details: Optional[list[IssueDetails]] = None,
) -> RepositoryReport:
    """Build a report from fetched repository data.

    Args:
        repository: Repository metadata
        issues: Issues without pull requests
        pull_requests: Pull requests, merged or not
        issue_details: Issues with their comments, when comments were fetched

    Returns:
        RepositoryReport ready for JSON serialization
    """
    details = issue_details
    if details is None:
        details = [IssueDetails(issue=issue) for issue in issues]

    stats = RepositoryStats(
        total_issues=len(issues),
        merged_prs=sum(1 for pr in pull_requests if pr.is_merged),
        total_comments=sum(len(d.comments) for d in details),
    )

    return RepositoryReport(
        repository=repository,
        generated_at=datetime.now(),
        stats=stats,
        issues=details,
        pull_requests=pull_requests,
    )


def write_json_report(
    report: RepositoryReport,
    output_path: Optional[Path] = None,
) -> Path:
    """Write a repository report to a JSON file.

    Args:
        report: Report to write
        output_path: Output file path (optional)

    Returns:
        Path to written file
    """
    if output_path is None:
        # Generate default path
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        name = report.repository.full_name.replace("/", "_") or "repository"
        output_dir = Path("output")
        output_dir.mkdir(exist_ok=True)
        output_path = output_dir / f"{name}_{timestamp}.json"

    # Ensure parent directory exists
    output_path.parent.mkdir(parents=True, exist_ok=True)

    # Write JSON with pretty formatting
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(report.model_dump(mode="json"), f, indent=2, ensure_ascii=False)

    return output_path
