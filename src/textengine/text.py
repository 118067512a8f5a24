import rich.tree
from rich.markup import escape

from textengine.console import Console
from textengine.models import Decision, Dialog, Tree


def format_link(link: str, tree_link: bool) -> str:
    if not link:
        return ""
    return f"-> tree {link}" if tree_link else f"-> {link}"


def format_decision(decision: Decision) -> str:
    parts = [f"[{decision.id}] {decision.message}"]
    if decision.score:
        parts.append(f"({decision.score:+})")
    if not decision.enabled:
        parts.append("(disabled)")
    return " ".join(parts)


def render_dialog(console: Console, dialog: Dialog, decisions: list[Decision]):
    """
    Print a dialog message with its decisions indented below it.
    """
    console.out(dialog.message, *[format_decision(decision) for decision in decisions])


def render_tree(name: str, tree: Tree) -> rich.tree.Tree:
    """
    Build an overview of a game tree: dialogs, their decisions, links and scores.
    """
    root = rich.tree.Tree(f"[bold]{escape(name)}[/] [dim]root: {escape(tree.root)}, score: {tree.score}")
    for dialog in tree.dialogs.values():
        link = format_link(dialog.link, dialog.tree_link)
        node = root.add(f"[yellow]{escape(dialog.id)}[/]: {escape(dialog.message)} [blue]{escape(link)}")
        for decision in dialog.decisions.values():
            style = "" if decision.enabled else "[dim]"
            link = format_link(decision.link, decision.tree_link)
            node.add(f"{style}{escape(format_decision(decision))} [blue]{escape(link)}")
    return root
