"""Output formatters for messages, durations and timestamps."""

from datetime import datetime

from shadfocus_cli.utils.clock import ms_to_datetime
from shadfocus_cli.utils.ui.console import get_console

console = get_console()


def format_duration(seconds: int) -> str:
    """Human duration: ``"1h 5m"``, ``"25m"`` or ``"< 1m"``."""
    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    if hours > 0:
        return f"{hours}h {minutes}m"
    if minutes == 0:
        return "< 1m"
    return f"{minutes}m"


def format_clock(seconds: int) -> str:
    """Timer face: ``MM:SS``, or ``H:MM:SS`` from one hour up."""
    seconds = max(0, seconds)
    hours, rest = divmod(seconds, 3600)
    minutes, secs = divmod(rest, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes:02d}:{secs:02d}"


def format_timestamp(timestamp_ms: int, now: datetime | None = None) -> str:
    """Local date and time of an epoch-ms timestamp, omitting the year when current."""
    value = ms_to_datetime(timestamp_ms)
    now = now or datetime.now().astimezone()
    if value.year == now.year:
        return value.strftime("%b %d %H:%M")
    return value.strftime("%Y-%m-%d %H:%M")


def format_tags(tags) -> str:
    return " ".join(f"#{tag}" for tag in tags)


def format_error(message: str) -> None:
    """Format and display an error message."""
    console.print(f"[bold red]Error:[/bold red] {message}")


def format_success(message: str) -> None:
    """Format and display a success message."""
    console.print(f"[bold green]Success:[/bold green] {message}")


def format_warning(message: str) -> None:
    """Format and display a warning message."""
    console.print(f"[bold yellow]Warning:[/bold yellow] {message}")


def format_info(message: str) -> None:
    """Format and display an info message."""
    console.print(f"[bold blue]Info:[/bold blue] {message}")
