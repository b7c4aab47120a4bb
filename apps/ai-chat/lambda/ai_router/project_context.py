"""Project-portfolio context appended to the system prompt for project chats."""

import json
import logging
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

logger = logging.getLogger(__name__)

ProjectStatus = Literal["green", "yellow", "red"]
ProjectPhase = Literal["discovery", "build", "hardening", "launch", "maintenance", "paused"]

STATUS_INDICATORS: dict[str, str] = {"green": "🟢", "yellow": "🟡", "red": "🔴"}


class RecentChange(BaseModel):
    date: str
    summary: str


class RoadmapItem(BaseModel):
    milestone: str
    target: str
    status: ProjectStatus


class ProjectSummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    slug: str
    name: str
    url: str | None = None
    one_liner: str = Field(alias="oneLiner")
    status: ProjectStatus
    phase: ProjectPhase
    last_updated: str = Field(alias="lastUpdated")
    tech_stack: list[str] = Field(default_factory=list, alias="techStack")
    recent_changes: list[RecentChange] = Field(default_factory=list, alias="recentChanges")
    next_steps: list[str] = Field(default_factory=list, alias="nextSteps")
    roadmap: list[RoadmapItem] = Field(default_factory=list)
    known_issues: list[str] = Field(default_factory=list, alias="knownIssues")
    security_status: ProjectStatus = Field(alias="securityStatus")


_PROJECT_LIST = TypeAdapter(list[ProjectSummary])


def load_projects(path: Path | None) -> list[ProjectSummary]:
    """Load project summaries from a JSON list; a missing path yields no projects."""
    if path is None:
        return []
    if not path.exists():
        logger.warning("Projects file not found", extra={"path": str(path)})
        return []
    return _PROJECT_LIST.validate_python(json.loads(path.read_text(encoding="utf-8")))


def _section(title: str, lines: list[str]) -> str:
    if not lines:
        return f"  {title}: none"
    return f"  {title}:\n" + "\n".join(lines)


def _format_project(project: ProjectSummary) -> str:
    return "\n".join(
        [
            f"{STATUS_INDICATORS[project.status]} {project.name} ({project.slug})",
            f"  Status: {project.status} | Phase: {project.phase} | "
            f"Security: {project.security_status}",
            f"  URL: {project.url or 'none'}",
            f"  Summary: {project.one_liner}",
            f"  Tech: {', '.join(project.tech_stack)}",
            f"  Last Updated: {project.last_updated}",
            _section(
                "Recent Changes",
                [f"    - {change.date}: {change.summary}" for change in project.recent_changes],
            ),
            _section(
                "Next Steps",
                [f"    {index}. {step}" for index, step in enumerate(project.next_steps, start=1)],
            ),
            _section(
                "Roadmap",
                [
                    f"    - {item.milestone} ({item.target}) [{item.status}]"
                    for item in project.roadmap
                ],
            ),
            _section("Known Issues", [f"    ⚠ {issue}" for issue in project.known_issues]),
        ]
    )


def build_project_system_prompt(projects: list[ProjectSummary]) -> str:
    summaries = "\n\n---\n\n".join(_format_project(project) for project in projects)
    return f"""
You are a project management AI assistant for a development portfolio.
You have complete knowledge of all active projects and their current state.

YOUR CAPABILITIES:
- Summarize status across all projects or a specific one
- Recommend what to work on next based on priorities, statuses, and known issues
- Answer questions about any project's tech stack, roadmap, issues, or recent changes
- Generate status reports (brief or detailed)
- Identify cross-project risks or patterns

RESPONSE STYLE:
- Be concise and actionable
- Use status indicators (🟢 🟡 🔴) when referencing project health
- When recommending priorities, explain your reasoning
- Reference specific project data (dates, issues, milestones) to back up your answers

CURRENT PORTFOLIO ({len(projects)} projects):

{summaries}
""".strip()
