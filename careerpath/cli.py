"""Typer CLI for CareerPath.

Runs the whole app in the terminal: onboarding prompts, the analysis
dashboard and the consultant chat.
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import Optional, Sequence

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.table import Table

from careerpath.consultant_chat import ConsultantChat
from careerpath.coordinator import ANALYSIS_FAILED_MESSAGE, AppView, CareerCoordinator
from careerpath.dashboard import message_panel, render_dashboard, render_transcript
from careerpath.errors import AnalysisError, ConfigurationError, ExtractionError
from careerpath.models.config import AppParams
from careerpath.models.profile import CAREER_PATHS, LEARNING_STYLES, TIME_COMMITMENTS
from careerpath.onboarding import LAST_STEP, OnboardingFlow, OnboardingStep
from careerpath.utils.credential_manager import CredentialManager
from careerpath.utils.document_loader import SUPPORTED_EXTENSIONS
from careerpath.utils.logger import configure_logging, get_logger

app = typer.Typer(
    name="careerpath",
    help="AI career consultant: CV analysis, skill gaps and a roadmap to your target role",
    add_completion=False,
)
console = Console()

EXTRACTION_FAILED_MESSAGE = "Could not analyze CV. Please enter details manually."
REMOVE_SKILL_COMMAND = "/remove"

STEP_TITLES = {
    OnboardingStep.UPLOAD_OR_SKIP: "Upload your CV",
    OnboardingStep.PERSONAL: "Personal details",
    OnboardingStep.SKILLS_AND_TARGET: "Skills & target role",
    OnboardingStep.PREFERENCES: "Preferences",
    OnboardingStep.GOALS_AND_SUBMIT: "Goals",
}


def _step_header(flow: OnboardingFlow) -> None:
    title = STEP_TITLES[flow.step]
    if flow.step > OnboardingStep.UPLOAD_OR_SKIP:
        markers = "".join(
            "[green]●[/green]" if done else "[dim]○[/dim]" for done in flow.progress
        )
        title = f"{title}  {markers}"
    console.print()
    console.rule(title)


def _is_interactive() -> bool:
    return sys.stdin.isatty()


def _ask_navigation(flow: OnboardingFlow) -> None:
    """Ask whether to continue or go back."""
    choice = Prompt.ask("Next (n) or back (b)", choices=["n", "b"], default="n")
    if choice == "b":
        flow.back()
    else:
        flow.next()


def _ask_text(label: str, current: str) -> str:
    """Prompt for a text field, keeping the current value on Enter."""
    return Prompt.ask(label, default=current, show_default=bool(current))


def _pick_one(label: str, options: Sequence[str], current: str) -> str:
    """Numbered single choice; Enter keeps the current option."""
    for i, option in enumerate(options, 1):
        marker = "[green]*[/green]" if option == current else " "
        console.print(f"  {marker} {i}. {option}")
    choices = [str(i) for i in range(1, len(options) + 1)]
    picked = Prompt.ask(label, choices=choices, default=str(options.index(current) + 1))
    return options[int(picked) - 1]


async def _upload_step(flow: OnboardingFlow) -> None:
    console.print(
        "Upload your CV to pre-fill your profile "
        f"({', '.join(SUPPORTED_EXTENSIONS)}), or press Enter to fill it in manually."
    )
    path = Prompt.ask("Path to CV", default="", show_default=False).strip()
    if not path:
        flow.skip_upload()
        return

    try:
        with console.status("Analyzing your CV..."):
            await flow.upload_file(Path(path).expanduser())
    except ExtractionError:
        console.print(f"[red]{EXTRACTION_FAILED_MESSAGE}[/red]")
        return

    console.print("[green]✓[/green] Profile pre-filled from your CV")


def _personal_step(flow: OnboardingFlow) -> None:
    profile = flow.profile
    flow.update_personal(
        name=_ask_text("Full name", profile.name),
        current_role=_ask_text("Current role", profile.current_role),
    )
    years = Prompt.ask("Years of experience", default=str(profile.years_experience))
    flow.set_years_experience(years)
    _ask_navigation(flow)


def _skills_step(flow: OnboardingFlow) -> None:
    flow.set_target_role(_ask_text("Target role", flow.profile.target_role))

    console.print(
        f"Add skills one at a time. Type {REMOVE_SKILL_COMMAND} <skill> to remove one, "
        "Enter when done."
    )
    while True:
        if flow.profile.skills:
            console.print(f"  Skills: [cyan]{escape(', '.join(flow.profile.skills))}[/cyan]")
        entry = Prompt.ask("Skill", default="", show_default=False)
        if not entry.strip():
            break
        command, _, skill = entry.strip().partition(" ")
        if command.lower() == REMOVE_SKILL_COMMAND:
            flow.remove_skill(skill.strip())
        else:
            flow.add_skill(entry)
    _ask_navigation(flow)


def _preferences_step(flow: OnboardingFlow) -> None:
    profile = flow.profile
    console.print("[bold]Career path[/bold]")
    flow.select_career_path(_pick_one("Career path", CAREER_PATHS, profile.career_path))

    console.print("[bold]Learning styles[/bold] (toggle by number, Enter when done)")
    while True:
        for i, style in enumerate(LEARNING_STYLES, 1):
            marker = "[green]x[/green]" if style in flow.profile.learning_styles else " "
            console.print(f"  [{marker}] {i}. {style}")
        picked = Prompt.ask("Toggle", default="", show_default=False).strip()
        if not picked:
            break
        if picked.isdigit() and 1 <= int(picked) <= len(LEARNING_STYLES):
            flow.toggle_learning_style(LEARNING_STYLES[int(picked) - 1])
        else:
            console.print(f"[yellow]Enter a number from 1 to {len(LEARNING_STYLES)}[/yellow]")

    console.print("[bold]Weekly time commitment[/bold]")
    flow.select_time_commitment(
        _pick_one("Time commitment", TIME_COMMITMENTS, profile.time_commitment)
    )
    _ask_navigation(flow)


async def _goals_step(coordinator: CareerCoordinator) -> None:
    flow = coordinator.onboarding
    flow.set_bio(_ask_text("Career goals / bio", flow.profile.bio))

    if not Confirm.ask("Generate your career plan?", default=True):
        flow.back()
        return

    try:
        with console.status("Analyzing your profile and building your roadmap..."):
            await coordinator.complete_onboarding()
    except AnalysisError:
        console.print(f"[red]{ANALYSIS_FAILED_MESSAGE}[/red]")
        if not Confirm.ask("Try again?", default=True):
            flow.back()


async def run_onboarding(coordinator: CareerCoordinator) -> None:
    """Walk the user through onboarding until an analysis is received."""
    flow = coordinator.onboarding
    while coordinator.analysis is None:
        _step_header(flow)
        if flow.step == OnboardingStep.UPLOAD_OR_SKIP:
            await _upload_step(flow)
        elif flow.step == OnboardingStep.PERSONAL:
            _personal_step(flow)
        elif flow.step == OnboardingStep.SKILLS_AND_TARGET:
            _skills_step(flow)
        elif flow.step == OnboardingStep.PREFERENCES:
            _preferences_step(flow)
        elif flow.step == LAST_STEP:
            await _goals_step(coordinator)


async def run_chat(chat: ConsultantChat) -> None:
    """Consultant chat REPL. /reset starts over, /back returns to the menu."""
    console.print("[dim]Type /reset to start a new conversation, /back to return.[/dim]")
    render_transcript(console, chat.messages)

    while True:
        text = Prompt.ask("[bold green]You[/bold green]")
        command = text.strip().lower()
        if command == "/back":
            return
        if command == "/reset":
            chat.reset()
            console.clear()
            render_transcript(console, chat.messages)
            continue

        with console.status("Consultant is typing..."):
            reply = await chat.send(text)
        if reply is not None:
            console.print(message_panel(reply))


def _menu() -> str:
    table = Table(show_header=False, box=None)
    table.add_row("[bold]d[/bold]", "Dashboard")
    table.add_row("[bold]c[/bold]", "Chat with your consultant")
    table.add_row("[bold]q[/bold]", "Quit")
    console.print(table)
    return Prompt.ask("Choose", choices=["d", "c", "q"], default="c")


async def run_app(coordinator: CareerCoordinator) -> None:
    await run_onboarding(coordinator)
    render_dashboard(console, coordinator.profile, coordinator.analysis)

    while True:
        choice = _menu()
        if choice == "q":
            return
        if choice == "d":
            coordinator.show(AppView.DASHBOARD)
            render_dashboard(console, coordinator.profile, coordinator.analysis)
        else:
            coordinator.show(AppView.CHAT)
            await run_chat(coordinator.chat)


@app.command()
def run(
    config: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Path to app_params.json"
    ),
    env_file: Optional[Path] = typer.Option(
        None, "--env-file", help="Path to .env file holding GEMINI_API_KEY"
    ),
    log_level: Optional[str] = typer.Option(
        None, "--log-level", help="Override configured log level"
    ),
) -> None:
    """Build your profile, get a career analysis and chat with your consultant."""
    try:
        params = AppParams.load(config)
        if log_level:
            params = AppParams(**{**params.model_dump(), "log_level": log_level})
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Configuration error:[/red] {escape(str(e))}")
        raise typer.Exit(code=1)

    configure_logging(params.log_file, params.log_level)
    logger = get_logger(phase="startup", component="cli")
    logger.info("CareerPath starting", models=params.models.model_dump())

    console.print(
        Panel(
            "[bold cyan]CareerPath[/bold cyan]: your AI career consultant",
            subtitle="CV analysis · skill gaps · roadmap",
        )
    )

    try:
        credentials = CredentialManager(env_file or Path(params.env_file))
        if _is_interactive():
            api_key = credentials.prompt_for_api_key()
        else:
            api_key = credentials.require_api_key()
        console.print(
            f"[dim]Using Gemini API key {CredentialManager.mask_credential(api_key)}[/dim]"
        )
        coordinator = CareerCoordinator.from_settings(params, api_key)
    except ConfigurationError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(code=1)

    try:
        asyncio.run(run_app(coordinator))
    except (KeyboardInterrupt, EOFError):
        console.print("\n[dim]Goodbye.[/dim]")
    logger.info("CareerPath exiting", view=coordinator.view.value)
