"""Line-oriented search and fusion shell.

A line is a query plus optional flags, for example::

    battle axe r7
    golden apple --fuse 2 --depth 3 --store 3
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
import logging
import re

from rich.console import Console
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from fusehelper.application.fusion_service import FuseApplicationService, FusionResult, describe_item
from fusehelper.data.fusion import FusionNode, FusionPolicy
from fusehelper.data.models import Item
from fusehelper.data.pricing import clamp_store_level
from fusehelper.data.recipes import recipe_label
from fusehelper.data.totals import TotalsTable

logger = logging.getLogger(__name__)

_FLAG_RE = re.compile(r"^--([a-z-]+)(?:=(\d+))?$", re.IGNORECASE)
_RECIPE_FLAGS = {"fuse", "recipe"}
_RANK_FLAGS = {"fuse-rank", "depth"}
_STORE_FLAGS = {"store"}
_VALUE_FLAGS = _RECIPE_FLAGS | _RANK_FLAGS | _STORE_FLAGS

HELP_TEXT = """\
Commands:
  help           Show this help
  quit / exit    Exit the app
  <query>        Search items by name (partial match, typo-tolerant)

Filters:
  - Append rank: "r8" or "rank 8" or trailing number (e.g., "katana r7")
  - Exact item name: "battle axe"; name + rank: "battle axe r7"

Options:
  --full                 Show up to 50 suggestions instead of top 5
  --fuse [N]             Enter fusion mode. Optional N selects recipe index (1-based)
  --recipe [N]           Same as --fuse [N]
  --depth N              Alias of --fuse-rank N; leaves must be rank <= N
  --fuse-rank N          Leaves must be rank <= N
  --store N              Price analysis at store level N (1..5).
                         With --store, totals table shows Price and Total price.
                         With --depth and --store, items without prices are treated as owned

Examples:
  golden apple --fuse
  golden apple --fuse 2
  golden apple --fuse --depth 3
  golden apple --fuse --store 3
  golden apple --fuse --depth 3 --store 3"""


@dataclass
class ShellFlags:
    recipe_index: int | None = None
    fuse_rank_limit: int | None = None
    store_level: int | None = None
    full: bool = False
    do_fuse: bool = False

    @property
    def fusion_mode(self) -> bool:
        return self.do_fuse or self.recipe_index is not None or self.fuse_rank_limit is not None


def parse_flags(line: str) -> tuple[ShellFlags, str]:
    """Split ``--flags`` off a line; returns (flags, remaining query)."""
    flags = ShellFlags()
    parts = line.split()
    kept: list[str] = []
    i = 0
    while i < len(parts):
        part = parts[i]
        i += 1
        match = _FLAG_RE.match(part)
        name = match.group(1).lower() if match else ""
        if not match or (name != "full" and name not in _VALUE_FLAGS):
            kept.append(part)
            continue

        if name == "full":
            flags.full = True
            continue

        value = match.group(2)
        if value is None and i < len(parts) and parts[i].isdigit():
            value = parts[i]
            i += 1

        if name in _RECIPE_FLAGS:
            flags.do_fuse = True
            if value is not None:
                flags.recipe_index = int(value)
        elif value is None:
            kept.append(part)
        elif name in _RANK_FLAGS:
            flags.fuse_rank_limit = int(value)
        else:
            flags.store_level = clamp_store_level(int(value))

    return flags, " ".join(kept)


def _node_label(node: FusionNode) -> Text:
    label = Text(f"{node.name} (R{node.rank})")
    if node.missing:
        label.append(" [missing]", style="red")
    elif node.cycle:
        label.append(" [cycle]", style="yellow")
    elif node.truncated:
        label.append(" [truncated]", style="yellow")
    elif node.is_leaf:
        label.append(" [END]", style="green")
    return label


def build_tree(node: FusionNode, tree: Tree | None = None) -> Tree:
    branch = tree.add(_node_label(node)) if tree is not None else Tree(_node_label(node))
    if node.children and node.recipe is not None:
        branch.add(Text(f"= {recipe_label(node.recipe)}", style="dim"))
    for child in node.children:
        build_tree(child, branch)
    return branch


def totals_table(table: TotalsTable) -> Table:
    priced = table.store_level is not None
    out = Table(show_footer=priced)
    out.add_column("Count")
    out.add_column("Item", footer="Total price" if priced else "")
    out.add_column("Rank")
    if priced:
        out.add_column("Price", footer=str(table.total_price))
    for row in table.rows:
        cells = [str(row.count), row.name, str(row.rank)]
        if priced:
            cells.append(str(row.price) if row.price is not None else "-")
        out.add_row(*cells)
    return out


def item_header(item: Item) -> str:
    type_label = f" [{item.type}]" if item.type else ""
    return f"{item.name} (Rank {item.rank}){type_label}"


def print_summary(console: Console, item: Item) -> None:
    summary = describe_item(item)
    console.print(Text(item_header(item)))
    if summary["description"]:
        console.print(Text(summary["description"]))
    if summary["rank_up_note"]:
        console.print(Text(summary["rank_up_note"]))
    if summary["stats"]:
        stats = ", ".join(f"{s['code']}: {s['value']}" for s in summary["stats"])
        console.print(Text(f"Stats: {stats}"))
    console.print(f"Recipes to create: {summary['recipe_count']}")
    if summary["recipes"]:
        table = Table()
        table.add_column("#")
        table.add_column("Ingredient 1")
        table.add_column("Ingredient 2")
        for recipe in summary["recipes"]:
            table.add_row(str(recipe["number"]), *recipe["ingredients"])
        console.print(table)


def print_fusion(console: Console, result: FusionResult) -> None:
    if result.recipe is None:
        print_summary(console, result.item)
        return

    console.print(Text(item_header(result.item)))
    console.print(Text(f"Recipe {result.recipe_index}: {recipe_label(result.recipe)}"))
    for node in result.nodes:
        console.print(build_tree(node))
    if result.totals.rows:
        console.print("Totals:")
        console.print(totals_table(result.totals))


def handle_line(service: FuseApplicationService, line: str, console: Console) -> bool:
    """Process one input line; returns False when the shell should exit."""
    text = line.strip()
    if not text:
        return True
    command = text.lower()
    if command == "help":
        console.print(Text(HELP_TEXT))
        return True
    if command in ("quit", "exit"):
        return False

    flags, query = parse_flags(text)
    result = service.find(query, full=flags.full)
    item = result.selected

    if item is not None:
        if flags.fusion_mode:
            policy = FusionPolicy(fuse_rank_limit=flags.fuse_rank_limit, store_level=flags.store_level)
            print_fusion(console, service.fuse_item(item, recipe_index=flags.recipe_index, policy=policy))
        else:
            print_summary(console, item)
    elif result.suggestions:
        console.print("No exact match. Did you mean:")
        for number, suggestion in enumerate(result.suggestions, start=1):
            console.print(Text(f"  {number}. {item_header(suggestion.item)}"))
        console.print("Enter full name to see details.")
    else:
        console.print("No matches.")
    return True


def run_shell(
    service: FuseApplicationService,
    console: Console | None = None,
    read_line: Callable[[str], str] | None = None,
) -> None:
    console = console or Console()
    read_line = read_line or console.input
    database = service.database
    source = database.source.name if database.source else "dataset"
    console.print(f"Loaded {len(database.items)} items from {source}")
    console.print('Type a name to search (partial allowed). Type "help" for help.')

    while True:
        try:
            line = read_line("> ")
        except (EOFError, KeyboardInterrupt):
            break
        if not handle_line(service, line, console):
            break
    console.print("Bye.")
