# planqa/interface/cli.py

from typing import List
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.prompt import Prompt
from rich import box
from rich.text import Text

from planqa.domain.models import Chunk


console = Console()


def display_welcome_banner() -> None:
    console.print(Panel.fit(
        "[bold cyan]📄 Plan Document Q&A[/bold cyan]\n"
        "[dim]Hybrid retrieval: cosine similarity + keyword/synonym scoring[/dim]",
        box=box.DOUBLE,
        border_style="cyan",
    ))


def display_indexing_status(document_stats: List[dict]) -> None:
    table = Table(box=box.SIMPLE, show_header=True, header_style="bold")
    table.add_column("Document")
    table.add_column("Chunks", justify="right")
    for row in document_stats:
        table.add_row(row["document_id"], str(row["count"]))
    console.print(table)

    total = sum(row["count"] for row in document_stats)
    console.print(f"[green]✓[/green] Index ready — [bold]{total}[/bold] chunks "
                  f"across [bold]{len(document_stats)}[/bold] documents.\n")


def prompt_for_document(document_ids: List[str]) -> str:
    if len(document_ids) == 1:
        return document_ids[0]
    return Prompt.ask(
        "\n[bold yellow]📄 Document[/bold yellow]",
        choices=document_ids,
        default=document_ids[0],
    )


def prompt_for_query() -> str:
    return Prompt.ask("\n[bold yellow]❓ Your question[/bold yellow]")


def display_results(query: str, results: List[Chunk]) -> None:
    console.print(f"\n[bold]Results for:[/bold] [italic]\"{query}\"[/italic]\n")

    if not results:
        console.print("[dim]No relevant passages found in this document.[/dim]")
        return

    for rank, chunk in enumerate(results, start=1):
        color = _rank_to_color(rank)

        panel_content = Text()
        panel_content.append("📄 Page: ", style="dim")
        panel_content.append(str(chunk.page_number), style="bold white")
        panel_content.append("  🔖 Chunk: ", style="dim")
        panel_content.append(chunk.sequence_id)
        panel_content.append(f"\n\n{chunk.text}")

        console.print(Panel(
            panel_content,
            title=f"[bold]#{rank}[/bold]",
            border_style=color,
            box=box.ROUNDED,
            padding=(1, 2),
        ))


def display_error(message: str) -> None:
    console.print(f"\n[bold red]✗ Error:[/bold red] {message}\n")


def ask_continue() -> bool:
    answer = Prompt.ask(
        "\n[dim]Ask another question?[/dim]",
        choices=["y", "n"],
        default="y",
    )
    return answer.lower() == "y"


def _rank_to_color(rank: int) -> str:
    if rank == 1:
        return "green"
    elif rank <= 3:
        return "yellow"
    else:
        return "red"
