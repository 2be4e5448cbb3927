"""Command-line interface for SydAI."""

import random
from datetime import timedelta
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from sydai.exceptions import PointsError
from sydai.leaderboard.service import MAX_PAGE_SIZE
from sydai.logging_config import configure_logging, get_logger
from sydai.services import Services, build_services
from sydai.settings import settings
from sydai.storage.db import Database

# Configure logging
configure_logging()
logger = get_logger(__name__)

# Create Typer app
app = typer.Typer(
    name="sydai",
    help="SydAI - gamified chat backend (points, check-ins, leaderboard, referrals)",
    no_args_is_help=True,
)

# Rich console for pretty output
console = Console()

DatabaseUrlOption = Annotated[
    str | None,
    typer.Option("--database-url", "-d", help="Database URL (defaults to DATABASE_URL)"),
]

DEMO_USERNAMES = [
    "CryptoKing", "AIWizard", "TechGuru", "DataMaster", "CodeNinja",
    "WebDev", "CloudExpert", "SecurityPro", "MLEnthusiast", "DevOpsHero",
    "FullStackDev", "BackendPro", "FrontendAce", "MobileGenius", "GameDev",
]
DEMO_PASSWORD = "demo-password"


def _services(database_url: str | None) -> Services:
    db = Database(database_url or settings.database_url, echo=settings.sql_echo)
    db.create_tables()
    return build_services(db, settings)


def seed_demo_data(services: Services, rng: random.Random | None = None) -> int:
    """Create the demo leaderboard population.

    Fifteen users with random point totals (the first five checked in
    yesterday) plus ``DefaultUser`` with 500 points. Existing usernames are
    skipped.

    Returns:
        Number of users created
    """
    rng = rng or random.Random()
    yesterday = services.checkin.clock() - timedelta(days=1)
    created = 0

    demo = [(name, rng.randint(100, 10099)) for name in DEMO_USERNAMES]
    demo.append(("DefaultUser", 500))

    for index, (username, points) in enumerate(demo):
        try:
            user = services.auth.create_user(
                email=f"{username.lower()}@example.com",
                username=username,
                password=DEMO_PASSWORD,
            )
        except ValueError:
            logger.info("seed_user_skipped", username=username)
            continue

        if index < 5:
            services.ledger.record_checkin(user.id, yesterday)
            points -= 10
        services.ledger.award_points(user.id, points, operation="adjustment", description="Demo seed")
        services.messages.post_welcome(user.id)
        created += 1

    logger.info("seed_completed", created=created)
    return created


@app.command("init")
def init_database(database_url: DatabaseUrlOption = None) -> None:
    """Initialize the database and create tables."""
    console.print("[bold blue]Initializing database...[/bold blue]")
    _services(database_url).close()
    console.print("[bold green]✓[/bold green] Database initialized successfully")


@app.command("seed")
def seed(
    database_url: DatabaseUrlOption = None,
    random_seed: Annotated[int | None, typer.Option("--random-seed", help="Seed for reproducible points")] = None,
) -> None:
    """Populate the database with demo users."""
    services = _services(database_url)
    try:
        created = seed_demo_data(services, random.Random(random_seed))
    finally:
        services.close()
    console.print(f"[bold green]✓[/bold green] Created {created} demo users")


@app.command("leaderboard")
def show_leaderboard(
    database_url: DatabaseUrlOption = None,
    page: Annotated[int, typer.Option("--page", "-p", min=0, help="Zero-based page")] = 0,
    page_size: Annotated[int, typer.Option("--size", "-s", min=1, max=MAX_PAGE_SIZE, help="Entries per page")] = 10,
) -> None:
    """Show one page of the leaderboard."""
    services = _services(database_url)
    try:
        result = services.leaderboard.get_page(page, page_size)
    finally:
        services.close()

    if not result.entries:
        console.print("[yellow]No users on this page[/yellow]")
        return

    table = Table(title=f"Leaderboard (page {result.page}, {result.total_users:,}+ users)")
    table.add_column("Rank", style="cyan", justify="right")
    table.add_column("Username", style="green")
    table.add_column("Points", justify="right")

    for entry in result.entries:
        table.add_row(str(entry.rank), entry.username, f"{entry.points:,}")

    console.print(table)


@app.command("referral-stats")
def show_referral_stats(
    user_id: Annotated[int, typer.Argument(help="User ID")],
    database_url: DatabaseUrlOption = None,
) -> None:
    """Show a user's referral code and earnings."""
    services = _services(database_url)
    try:
        stats = services.referral.get_stats(user_id)
    except PointsError as e:
        console.print(f"[bold red]✗[/bold red] {e.message}")
        raise typer.Exit(1)
    finally:
        services.close()

    console.print(f"[bold]Code:[/bold] {stats.code}")
    console.print(f"[bold]Link:[/bold] {stats.link}")
    console.print(f"[bold]Referrals:[/bold] {stats.total_referrals}")
    console.print(f"[bold]Points earned:[/bold] {stats.total_points}")


if __name__ == "__main__":
    app()
