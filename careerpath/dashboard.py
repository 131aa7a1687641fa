"""
Dashboard Rendering

Rich renderables for the analysis dashboard and the chat transcript. Pure
presentation: nothing here mutates state or calls a gateway.
"""

from datetime import datetime
from typing import List

from rich.console import Console, Group, RenderableType
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from careerpath.models.analysis import CareerAnalysis, SkillGap
from careerpath.models.chat import ChatMessage
from careerpath.models.profile import Profile

SCORE_SCALE = 10
_IMPORTANCE_STYLES = {"high": "bold red", "medium": "yellow", "low": "green"}


def score_bar(current: int, target: int, scale: int = SCORE_SCALE) -> Text:
    """
    Draw current vs target proficiency as a one-line bar.

    Scores outside 0..scale are clamped for drawing only.

    Example:
        score_bar(4, 8) -> "████▒▒▒▒··"  (4 filled, 4 still to gain, 2 unused)
    """
    current_cells = min(max(current, 0), scale)
    target_cells = min(max(target, 0), scale)
    gap_cells = max(target_cells - current_cells, 0)
    rest = scale - current_cells - gap_cells

    bar = Text()
    bar.append("█" * current_cells, style="cyan")
    bar.append("▒" * gap_cells, style="magenta")
    bar.append("·" * rest, style="dim")
    return bar


def _importance_text(importance: str) -> Text:
    return Text(importance, style=_IMPORTANCE_STYLES.get(importance.strip().lower(), ""))


def skill_gap_table(skill_gaps: List[SkillGap]) -> Table:
    """Skill gap chart: one row per skill with current/target scores and a bar."""
    table = Table(title="Skill Gap Analysis", expand=True)
    table.add_column("Skill", style="bold")
    table.add_column("Current", justify="right")
    table.add_column("Target", justify="right")
    table.add_column("Gap", no_wrap=True)
    table.add_column("Importance")
    table.add_column("Recommendation", ratio=2)

    for gap in skill_gaps:
        table.add_row(
            gap.skill,
            str(gap.current_score),
            str(gap.target_score),
            score_bar(gap.current_score, gap.target_score),
            _importance_text(gap.importance),
            gap.recommendation,
        )
    return table


def roadmap_table(analysis: CareerAnalysis) -> Table:
    table = Table(title="Roadmap", expand=True)
    table.add_column("Phase", style="bold cyan")
    table.add_column("Title", style="bold")
    table.add_column("Description", ratio=2)
    table.add_column("Duration", no_wrap=True)

    for step in analysis.roadmap:
        table.add_row(step.phase, step.title, step.description, step.duration)
    return table


def profile_header(profile: Profile) -> Panel:
    body = Text()
    body.append(f"{profile.current_role or 'Current role not set'}", style="bold")
    body.append("  →  ")
    body.append(f"{profile.target_role or 'Target role not set'}", style="bold green")
    body.append(
        f"\n{profile.years_experience} years experience · {profile.career_path}"
        f" · {profile.time_commitment}"
    )
    if profile.skills:
        body.append(f"\nSkills: {', '.join(profile.skills)}", style="dim")
    return Panel(body, title=profile.name or "Your Profile", border_style="blue")


def build_dashboard(profile: Profile, analysis: CareerAnalysis) -> RenderableType:
    """Assemble the full dashboard for a profile and its analysis."""
    resources = "\n".join(f"{i}. {r}" for i, r in enumerate(analysis.recommended_resources, 1))
    return Group(
        profile_header(profile),
        Panel(Markdown(analysis.executive_summary), title="Executive Summary"),
        skill_gap_table(analysis.skill_gaps),
        roadmap_table(analysis),
        Panel(Markdown(analysis.salary_insights), title="Salary & Market Insights"),
        Panel(resources or "No resources returned", title="Recommended Resources"),
    )


def render_dashboard(console: Console, profile: Profile, analysis: CareerAnalysis) -> None:
    console.print(build_dashboard(profile, analysis))


def format_time(timestamp_ms: int) -> str:
    """Epoch milliseconds as local HH:MM."""
    return datetime.fromtimestamp(timestamp_ms / 1000).strftime("%H:%M")


def message_panel(message: ChatMessage) -> Panel:
    is_user = message.role == "user"
    return Panel(
        Markdown(message.text),
        title="You" if is_user else "Consultant",
        subtitle=format_time(message.timestamp),
        title_align="right" if is_user else "left",
        border_style="green" if is_user else "blue",
    )


def render_transcript(console: Console, messages: List[ChatMessage]) -> None:
    for message in messages:
        console.print(message_panel(message))
