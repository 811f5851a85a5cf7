"""Terminal host for pass-the-device impostor sessions."""

from typing import Callable, Dict, List, Optional, Sequence

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .core.categories import split_by_lines
from .core.fsm import Phase, RoundState, SessionError, SessionStateMachine
from .core.roles import RoleCard
from .core.rulesets import TableRules
from .core.schemas import Category

console = Console()

Prompt = Callable[..., str]
Confirm = Callable[..., bool]


class GameNarrator:
    """Renders menus, table settings and role cards."""

    def __init__(self, out: Optional[Console] = None):
        self.console = out or console

    def title(self, text: str) -> None:
        self.console.print()
        self.console.rule(f"[bold]{text}[/bold]")

    def notice(self, message: str) -> None:
        """Blocking notice for a rejected action."""
        self.console.print(Panel(message, title="Notice", style="yellow"))

    def options(self, choices: Dict[str, str]) -> None:
        for key, label in choices.items():
            self.console.print(f"  [bold cyan]{key}[/bold cyan]  {label}")

    def categories(self, categories: Sequence[Category]) -> None:
        if not categories:
            self.console.print("[dim]No categories yet. Create the first one![/dim]")
            return
        table = Table(show_header=True, header_style="bold cyan")
        table.add_column("#", style="dim", width=4)
        table.add_column("Name")
        table.add_column("Words", justify="right")
        table.add_column("Id", style="dim")
        for number, category in enumerate(categories, start=1):
            table.add_row(str(number), category.name, str(len(category.words)), category.id)
        self.console.print(table)

    def word_list(self, words: Sequence[str]) -> None:
        if not words:
            self.console.print("[dim](no words)[/dim]")
            return
        self.console.print("  ".join(f"[dim]{number}.[/dim]{word}" for number, word in enumerate(words, start=1)))

    def table_setup(self, pool_label: str, rules: TableRules) -> None:
        self.console.print(f"[bold]Words:[/bold] {pool_label}")
        self.console.print(f"[bold]Table:[/bold] {rules.describe()} (max impostors {rules.max_impostors})")

    def turn(self, round_state: RoundState) -> None:
        self.console.print(
            f"Round {round_state.round_num} - Player [bold]{round_state.turn_index + 1}[/bold] "
            f"of {round_state.players}"
        )

    def role_card(self, card: RoleCard) -> None:
        if card.is_impostor:
            body = "[bold red]You are the IMPOSTOR[/bold red]\n[dim]You do not know the word[/dim]"
        else:
            body = f"[dim]The word is[/dim]\n[bold]{card.word}[/bold]"
        self.console.print(Panel(body, title=f"Player {card.player + 1}", style="red" if card.is_impostor else "green"))

    def hide(self) -> None:
        self.console.clear()

    def between_rounds(self) -> None:
        self.console.print("[bold]Round in progress.[/bold] Discuss who the impostor is before moving on.")


class SessionHost:
    """Turns keyboard input into state machine actions, one phase at a time."""

    def __init__(
        self,
        machine: SessionStateMachine,
        narrator: Optional[GameNarrator] = None,
        *,
        prompt: Prompt = typer.prompt,
        confirm: Confirm = typer.confirm,
    ):
        self.machine = machine
        self.narrator = narrator or GameNarrator()
        self._prompt = prompt
        self._confirm = confirm
        self._draft: Optional[List[str]] = None
        self._handlers = {
            Phase.MENU: self._menu,
            Phase.CATEGORIES: self._categories,
            Phase.MANAGE: self._manage,
            Phase.CUSTOM: self._custom,
            Phase.PLAYERS: self._players,
            Phase.REVEAL: self._reveal,
            Phase.BETWEEN: self._between,
        }
        machine.services.confirm_reset = self.confirm_reset

    def run(self) -> None:
        """Loop until the user quits from the menu."""
        while True:
            try:
                if not self._handlers[self.machine.phase]():
                    return
            except SessionError as exc:
                self.narrator.notice(str(exc))

    def confirm_reset(self, pool_key: str) -> bool:
        return self._confirm("Every word has been used. Restart the cycle?", default=True)

    # Phase screens ---------------------------------------------------------------

    def _menu(self) -> bool:
        self.narrator.title("The Impostor")
        self.narrator.options({"1": "Categories", "2": "Custom words", "q": "Quit"})
        choice = self._choose()
        if choice == "1":
            self.machine.open_categories()
        elif choice == "2":
            self._draft = None
            self.machine.open_custom()
        elif choice == "q":
            return False
        return True

    def _categories(self) -> bool:
        self.narrator.title("Pick a category")
        categories = self.machine.categories.list_all()
        self.narrator.categories(categories)
        self.narrator.options({"<number>": "Play this category", "m": "Manage categories", "b": "Back"})
        choice = self._choose()
        if choice == "m":
            self.machine.open_manage()
        elif choice == "b":
            self.machine.back_to_menu()
        else:
            category = self._category_by_number(categories, choice)
            if category is not None:
                self.machine.select_category(category.id)
        return True

    def _manage(self) -> bool:
        self.narrator.title("Manage categories")
        categories = self.machine.categories.list_all()
        self.narrator.categories(categories)
        self.narrator.options({"a": "Create", "e": "Edit", "d": "Delete", "b": "Back"})
        choice = self._choose()
        if choice == "a":
            name = self._prompt("Name", default="", show_default=False)
            words = self._read_lines("Words, one per line (blank line to finish)")
            self.machine.create_category(name, words)
        elif choice == "e":
            category = self._category_by_number(categories, self._choose("Category number"))
            if category is not None:
                self._edit_category(category)
        elif choice == "d":
            category = self._category_by_number(categories, self._choose("Category number"))
            if category is not None and self._confirm(f"Delete {category.name}?", default=False):
                self.machine.delete_category(category.id)
        elif choice == "b":
            self.machine.close_manage()
        return True

    def _custom(self) -> bool:
        if self._draft is None:
            self._draft = self.machine.custom_words.load()
        self.narrator.title("Your words (Custom)")
        self.narrator.word_list(self._draft)
        self.narrator.options({
            "a": "Add words",
            "r": "Remove a word",
            "c": "Clear",
            "s": "Save as category",
            "g": "Continue",
            "b": "Back",
        })
        choice = self._choose()
        if choice == "a":
            self._draft.extend(self._read_lines("Words, one per line (blank line to finish)"))
        elif choice == "r":
            self._remove_numbered(self._draft)
        elif choice == "c":
            self._draft = []
        elif choice == "s":
            if not self._draft:
                self.narrator.notice("There are no words to save")
            else:
                name = self._prompt("Name of the new category", default="Custom")
                self.machine.save_custom_as_category(name, self._draft)
                self.narrator.notice("Saved to categories")
        elif choice == "g":
            self.machine.confirm_custom(self._draft)
        elif choice == "b":
            self._draft = None
            self.machine.back_to_menu()
        return True

    def _players(self) -> bool:
        self.narrator.title("Set up the table")
        self.narrator.table_setup(self.machine.pool_label, self.machine.rules)
        self.narrator.options({
            "p": "Number of players",
            "i": "Number of impostors",
            "s": "Start",
            "c": "Change words",
            "b": "Back",
        })
        choice = self._choose()
        if choice == "p":
            self.machine.set_players(self._read_int("Players"))
        elif choice == "i":
            self.machine.set_impostors(self._read_int("Impostors"))
        elif choice == "s":
            self.machine.start_game()
        elif choice == "c":
            self._draft = None
            self.machine.change_pool()
        elif choice == "b":
            self.machine.back_to_menu()
        return True

    def _reveal(self) -> bool:
        round_state = self.machine.round
        self.narrator.turn(round_state)
        if round_state.revealed:
            self.narrator.role_card(self.machine.current_card())
            self.narrator.options({"h": "Hide", "n": "Next player", "b": "Back to menu"})
        else:
            self.narrator.options({"r": "Reveal", "n": "Next player", "b": "Back to menu"})
        choice = self._choose()
        if choice in ("r", "h"):
            if not self.machine.toggle_reveal():
                self.narrator.hide()
        elif choice == "n":
            if round_state.revealed:
                self.narrator.hide()
            self.machine.next_player()
        elif choice == "b":
            self.machine.back_to_menu()
        return True

    def _between(self) -> bool:
        self.narrator.title("Between rounds")
        self.narrator.between_rounds()
        self.narrator.options({"n": "Next round", "m": "Back to menu"})
        choice = self._choose()
        if choice == "n":
            self.machine.next_round()
        elif choice == "m":
            self._draft = None
            self.machine.reset_all()
        return True

    # Input helpers ---------------------------------------------------------------

    def _choose(self, label: str = "Choice") -> str:
        return self._prompt(label, default="", show_default=False).strip().lower()

    def _read_int(self, label: str) -> int:
        while True:
            raw = self._prompt(label, default="", show_default=False).strip()
            try:
                return int(raw)
            except ValueError:
                self.narrator.notice("Please enter a whole number")

    def _read_lines(self, label: str) -> List[str]:
        self.narrator.console.print(f"[bold]{label}[/bold]")
        lines: List[str] = []
        while True:
            line = self._prompt(">", default="", show_default=False)
            if not line.strip():
                break
            lines.append(line)
        return split_by_lines("\n".join(lines))

    def _remove_numbered(self, words: List[str]) -> None:
        raw = self._choose("Word number")
        if raw.isdigit() and 1 <= int(raw) <= len(words):
            del words[int(raw) - 1]
        else:
            self.narrator.notice(f"No word number {raw!r}")

    def _category_by_number(self, categories: Sequence[Category], raw: str) -> Optional[Category]:
        if raw.isdigit() and 1 <= int(raw) <= len(categories):
            return categories[int(raw) - 1]
        self.narrator.notice(f"No category number {raw!r}")
        return None

    def _edit_category(self, category: Category) -> None:
        words = list(category.words)
        name = self._prompt("Name", default=category.name)
        self.narrator.word_list(words)
        while self._confirm("Remove a word?", default=False):
            self._remove_numbered(words)
            self.narrator.word_list(words)
        words.extend(self._read_lines("Words to add, one per line (blank line to finish)"))
        self.machine.update_category(category.id, name, words)
