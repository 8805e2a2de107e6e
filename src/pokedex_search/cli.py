#!/usr/bin/env python3
"""
Pokédex Search CLI
Search the Pokémon TCG API from the terminal and browse the matching cards.
"""

import asyncio
import sys
from typing import Optional, List
import argparse

import requests
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich.prompt import Prompt
from rich.align import Align

from .config import CLI_API_BASE_URL, CLI_CACHE_RESULTS, DEFAULT_LIMIT
from .events import SearchEventEmitter, SearchEventType
from .models.card import PokemonCard
from .models.search import SearchQuery
from .tools.card_lookup import CardLookupClient, InvalidResponseBodyError

console = Console()

EXIT_COMMANDS = ['quit', 'exit', 'q']


class PokedexSearchCLI:
    """Main CLI application class"""

    def __init__(
        self,
        base_url: str = CLI_API_BASE_URL,
        cache_results: bool = CLI_CACHE_RESULTS,
        limit: int = DEFAULT_LIMIT
    ):
        self.events = SearchEventEmitter()
        self.client = CardLookupClient(
            cache_results=cache_results,
            base_url=base_url,
            event_emitter=self.events
        )
        self.limit = limit
        self.selected_types: List[str] = []
        self.known_types: Optional[List[str]] = None
        self.current_status_text = ""
        self._setup_event_handlers()

    def _update_status(self, status_text: str):
        """Update the current status display"""
        # Print only when it changes to reduce noise
        if status_text != self.current_status_text:
            console.print(f"[dim]Status:[/dim] {status_text}")
            self.current_status_text = status_text

    def _setup_event_handlers(self):
        """Set up event handlers for progress display"""

        def on_search_started(data):
            self._update_status(f"[cyan]Fetching: {data['query_string']}[/cyan]")

        def on_cache_hit(data):
            self._update_status(f"[green]Cache hit: {data['count']} cards[/green]")

        def on_cards_fetched(data):
            status_text = f"[green]Fetched {data['count']} cards[/green]"
            if not data['cached']:
                status_text += " [dim](caching disabled)[/dim]"
            self._update_status(status_text)

        def on_cache_reset(data):
            self._update_status(f"[yellow]Cleared {data['cleared_queries']} cached queries[/yellow]")

        def on_types_fetched(data):
            self._update_status(f"[cyan]Loaded {data['count']} types[/cyan]")

        def on_error_occurred(data):
            error_type = data.get('error_type', 'unknown')
            message = data.get('message', 'An error occurred')
            self._update_status(f"[red]ERROR {error_type}: {message}[/red]")

        self.events.on(SearchEventType.CARD_SEARCH_STARTED, on_search_started)
        self.events.on(SearchEventType.CACHE_HIT, on_cache_hit)
        self.events.on(SearchEventType.CARDS_FETCHED, on_cards_fetched)
        self.events.on(SearchEventType.CACHE_RESET, on_cache_reset)
        self.events.on(SearchEventType.TYPES_FETCHED, on_types_fetched)
        self.events.on(SearchEventType.ERROR_OCCURRED, on_error_occurred)

    def show_banner(self):
        """Display the application banner"""
        banner = Panel(
            Align.center(
                Text("Pokédex Search", style="bold red") + "\n" +
                Text(f"Cards from {self.client.base_url}", style="dim")
            ),
            border_style="red",
            padding=(1, 2)
        )
        console.print(banner)

    def format_card_results(self, cards: List[PokemonCard]) -> Table:
        """Format search results into a rich table with image links"""
        table = Table(
            title="Search Results",
            border_style="green",
            header_style="bold green"
        )

        table.add_column("#", justify="right", style="cyan")
        table.add_column("Name", style="bold white")
        table.add_column("Types", style="blue")
        table.add_column("HP", justify="right", style="yellow")
        table.add_column("Weaknesses", style="magenta")
        table.add_column("Card ID", style="dim white")

        for card in cards:
            pokedex_num = str(card.pokedex_num) if card.pokedex_num is not None else "N/A"
            hp = str(card.hp) if card.has_hp else "N/A"
            # Clickable name if an image is available
            name_cell = Text(card.name, style=f"link {card.image_url}") if card.image_url else Text(card.name)

            table.add_row(
                pokedex_num,
                name_cell,
                ", ".join(card.types) or "-",
                hp,
                ", ".join(card.weaknesses) or "-",
                card.api_id,
            )

        return table

    def show_cards(self, cards: List[PokemonCard]):
        if cards:
            console.print(self.format_card_results(cards))
        else:
            console.print("[yellow]No matching cards found.[/yellow]")

    async def load_types(self) -> List[str]:
        """Fetch the type list once per session"""
        if self.known_types is None:
            self.known_types = await CardLookupClient.list_types(
                base_url=self.client.base_url,
                session=self.client.session,
                event_emitter=self.events
            )
        return self.known_types

    async def show_types(self):
        """Display the types that can be used as filters"""
        types = await self.load_types()
        console.print("\n[bold]Available types:[/bold]")
        for type_name in types:
            marker = "[green]*[/green]" if type_name in self.selected_types else " "
            console.print(f"  {marker} {type_name}")
        console.print()

    async def set_type_filter(self, raw: str) -> List[str]:
        """
        Replace the type filter from a comma separated list

        Names are matched case-insensitively against the API's type list;
        unknown names are reported and left out. An empty list clears the filter.
        """
        requested = [part.strip() for part in raw.split(",") if part.strip()]
        if not requested:
            self.selected_types = []
            console.print("[dim]Type filter cleared.[/dim]")
            return self.selected_types

        by_lower = {type_name.lower(): type_name for type_name in await self.load_types()}
        selected = []
        for name in requested:
            canonical = by_lower.get(name.lower())
            if canonical is None:
                console.print(f"[yellow]Unknown type: {name}[/yellow]")
            elif canonical not in selected:
                selected.append(canonical)

        self.selected_types = selected
        if selected:
            console.print(f"[dim]Filtering by:[/dim] {', '.join(selected)}")
        return self.selected_types

    def build_query(self, name: str) -> SearchQuery:
        return SearchQuery(name=name, types=list(self.selected_types), limit=self.limit)

    def show_cache_stats(self):
        stats = self.client.cache_stats()
        lines = [
            f"[bold]Caching:[/bold] {'on' if stats['enabled'] else 'off'}",
            f"[bold]Cached queries:[/bold] {stats['cached_queries']}",
            f"[bold]Known cards:[/bold] {stats['cached_cards']}",
        ]
        console.print(Panel("\n".join(lines), title="Cache", border_style="dim", padding=(0, 1)))

    async def single_search(self, name: str):
        """Perform a single search and display results"""
        try:
            cards = await self.client.search(self.build_query(name))
        except (requests.exceptions.RequestException, InvalidResponseBodyError) as e:
            console.print(f"[red]Error during search: {e}[/red]")
            sys.exit(1)

        self.show_cards(cards)

    async def handle_command(self, line: str) -> bool:
        """Run an interactive ':' command, returns False when the line was not one"""
        command, _, argument = line.partition(" ")
        if command == ":types":
            if argument.strip():
                await self.set_type_filter(argument)
            else:
                await self.set_type_filter("")
                await self.show_types()
        elif command == ":reset":
            self.client.reset_cache()
        elif command == ":stats":
            self.show_cache_stats()
        elif command == ":help":
            self.show_help()
        else:
            return False
        return True

    def show_help(self):
        console.print("\n[bold]Commands:[/bold]")
        console.print("  [cyan]:types A,B[/cyan]  filter by types ([cyan]:types[/cyan] alone clears and lists them)")
        console.print("  [cyan]:reset[/cyan]      forget cached searches")
        console.print("  [cyan]:stats[/cyan]      show cache statistics")
        console.print("  [cyan]quit[/cyan]        leave\n")

    async def interactive_search(self):
        """Run interactive search mode"""
        console.print("\n[bold]Interactive Search Mode[/bold]")
        console.print("Type a Pokémon name, [cyan]:help[/cyan] for commands, or 'quit' to exit.\n")

        while True:
            try:
                line = Prompt.ask("[cyan]Pokémon name").strip()

                if line.lower() in EXIT_COMMANDS:
                    break

                if not line:
                    console.print("[yellow]Please enter a name.[/yellow]")
                    continue

                if line.startswith(":"):
                    if not await self.handle_command(line):
                        console.print(f"[yellow]Unknown command: {line}[/yellow]")
                    continue

                cards = await self.client.search(self.build_query(line))
                self.show_cards(cards)
                console.print()

            except KeyboardInterrupt:
                console.print("\n[yellow]Search cancelled.[/yellow]")
                break
            except (requests.exceptions.RequestException, InvalidResponseBodyError) as e:
                console.print(f"[red]Error during search: {e}[/red]")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Search Pokémon cards from the command line",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  pokedex-search bulbasaur
  pokedex-search pikachu -t Lightning -l 5
  pokedex-search --types
  pokedex-search                  (interactive mode)
        """
    )

    parser.add_argument(
        "name",
        nargs="?",
        help="Pokémon name to search for (if not provided, enters interactive mode)"
    )

    parser.add_argument(
        "-t", "--type",
        dest="types",
        action="append",
        default=[],
        help="Only return cards of this type (repeatable)"
    )

    parser.add_argument(
        "-l", "--limit",
        type=int,
        default=DEFAULT_LIMIT,
        help=f"Number of cards to request (default: {DEFAULT_LIMIT})"
    )

    parser.add_argument(
        "--base-url",
        default=CLI_API_BASE_URL,
        help=f"API root URL (default: {CLI_API_BASE_URL})"
    )

    parser.add_argument(
        "--no-cache",
        action="store_true",
        help="Always query the API, even for repeated searches"
    )

    parser.add_argument(
        "--types",
        dest="list_types",
        action="store_true",
        help="List the available Pokémon types and exit"
    )

    parser.add_argument(
        "--version",
        action="version",
        version="Pokédex Search 1.0"
    )

    return parser


def main(argv: Optional[List[str]] = None):
    """Main CLI entry point"""
    args = build_parser().parse_args(argv)

    async def run_cli():
        cli = PokedexSearchCLI(
            base_url=args.base_url,
            cache_results=CLI_CACHE_RESULTS and not args.no_cache,
            limit=args.limit
        )

        if args.list_types:
            try:
                await cli.show_types()
            except (requests.exceptions.RequestException, InvalidResponseBodyError) as e:
                console.print(f"[red]Error loading types: {e}[/red]")
                sys.exit(1)
            return

        cli.show_banner()

        if args.types:
            cli.selected_types = list(args.types)

        if args.name:
            # Single search mode
            console.print(f"[bold]Searching for:[/bold] {args.name}\n")
            await cli.single_search(args.name)
        else:
            await cli.interactive_search()
            console.print("\n[dim]Thanks for using Pokédex Search![/dim]")

    try:
        asyncio.run(run_cli())
    except KeyboardInterrupt:
        console.print("\n[yellow]Goodbye![/yellow]")
        sys.exit(0)


if __name__ == "__main__":
    main()
