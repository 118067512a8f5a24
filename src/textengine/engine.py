"""
Engine: loads plot scripts into game trees and walks through them, following
dialog and tree links and keeping the score of every tree.
"""

from pathlib import Path

import typer

from textengine.config import Config
from textengine.console import Console
from textengine.errors import (
    DisabledDecisionError,
    DuplicateIdError,
    NotFoundError,
    TextEngineError,
)
from textengine.game import walk_script_files
from textengine.models import Decision, Dialog, Tree
from textengine.parser import parse_script
from textengine.text import render_dialog

app = typer.Typer()


class Engine:
    def __init__(self, config: Config | None = None, console: Console | None = None):
        self.config = config or Config()
        self.console = console or Console(self.config)
        self.trees: dict[str, Tree] = {}
        # traversal position, both None when nothing is being played
        self.current_tree: str | None = None
        self.current_dialog: str | None = None

    def parse_plot_scripts(self, files) -> list[str]:
        """
        Parse scripts in order, one tree per file keyed by its path.
        Depending on config a failing script stops the batch or is skipped.
        """
        loaded = []
        for file in files:
            key = str(file)
            try:
                if key in self.trees:
                    raise DuplicateIdError(f"duplicate script: {key}")
                self.trees[key] = parse_script(Path(file), self.config, self.console)
            except TextEngineError as e:
                if self.config.abort_on_error:
                    raise
                self.console.warning(f"skipping script: {key}", e.message)
                continue
            loaded.append(key)
        return loaded

    def _tree(self, key: str) -> Tree:
        if key not in self.trees:
            raise NotFoundError(f"cannot find tree: {key}")
        return self.trees[key]

    def tree(self, key: str) -> Tree:
        return self._tree(key).model_copy(deep=True)

    def dialog(self, key: str, dialog_id: str) -> Dialog:
        return self._tree(key).dialog(dialog_id)

    def decision(self, key: str, dialog_id: str, decision_id: str) -> Decision:
        return self._tree(key).dialog(dialog_id).decision(decision_id)

    def update_dialog(self, key: str, dialog_id: str, /, **changes) -> Dialog:
        return self._tree(key).update_dialog(dialog_id, **changes)

    def update_decision(self, key: str, dialog_id: str, decision_id: str, /, **changes) -> Decision:
        return self._tree(key).update_decision(dialog_id, decision_id, **changes)

    def set_score(self, key: str, value: int):
        self._tree(key).score = value

    def increment_score(self, key: str, value: int):
        self._tree(key).increment_score(value)

    def score(self, key: str | None = None) -> int:
        return self._tree(key or self.current_tree).score

    # traversal

    def resolve_tree(self, link: str) -> str:
        """
        Find the key of a loaded tree by its exact key or by a unique file stem.
        """
        if link in self.trees:
            return link
        matches = [key for key in self.trees if Path(key).stem == link]
        if len(matches) != 1:
            raise NotFoundError(f"cannot find tree: {link}")
        return matches[0]

    def enter(self, key: str) -> Dialog:
        """
        Start playing a tree from its root dialog.
        """
        tree = self._tree(key)
        dialog = tree.dialog(tree.root)
        self.current_tree, self.current_dialog = key, dialog.id
        self.console.info(f"entered {key} at {dialog.id}")
        return dialog

    @property
    def finished(self) -> bool:
        return self.current_dialog is None

    @property
    def current(self) -> Dialog | None:
        if self.finished:
            return None
        return self._tree(self.current_tree).dialog(self.current_dialog)

    def visible_decisions(self) -> list[Decision]:
        if self.finished:
            return []
        decisions = self.current.all_decisions()
        if self.config.display_disabled_decisions:
            return decisions
        return [decision for decision in decisions if decision.enabled]

    def locate(self, link: str, tree_link: bool) -> tuple[str, str] | None:
        """
        Resolve a link to a tree key and dialog id without moving there.
        """
        if not link:
            return None
        if tree_link:
            key = self.resolve_tree(link)
            return key, self._tree(key).dialog(self.trees[key].root).id
        return self.current_tree, self._tree(self.current_tree).dialog(link).id

    def move(self, target: tuple[str, str] | None) -> Dialog | None:
        if target is None:
            self.console.info(f"reached the end of {self.current_tree}")
            self.current_dialog = None
            return None
        self.current_tree, self.current_dialog = target
        self.console.info(f"moved to {self.current_dialog} in {self.current_tree}")
        return self.current

    def follow(self, link: str, tree_link: bool) -> Dialog | None:
        """
        Move to a link target, an empty link ends the traversal.
        """
        return self.move(self.locate(link, tree_link))

    def choose(self, decision_id: str) -> Dialog | None:
        """
        Choose a decision of the current dialog, apply its score and follow its link.
        The link is resolved before the score changes, so a broken link leaves the state as is.
        """
        if self.finished:
            raise TextEngineError("no dialog is being played")
        decision = self.current.decision(decision_id)
        if not decision.enabled:
            raise DisabledDecisionError(f"decision is disabled: {decision_id}")

        target = self.locate(decision.link, decision.tree_link)
        self._tree(self.current_tree).increment_score(decision.score)
        self.console.info(f"chose {decision_id}", f"score: {self.score()}")
        return self.move(target)

    def advance(self) -> Dialog | None:
        """
        Follow the link of a dialog that has no enabled decisions.
        """
        if self.finished:
            raise TextEngineError("no dialog is being played")
        dialog = self.current
        if any(decision.enabled for decision in dialog.decisions.values()):
            raise TextEngineError(f"dialog {dialog.id} has decisions, choose one")
        return self.follow(dialog.link, dialog.tree_link)


@app.command("play")
def play(ctx: typer.Context, paths: list[Path], start: str = typer.Option(None, help="key of the tree to start with")):
    """
    Load plot scripts and play them in the terminal.
    """
    engine = Engine(ctx.obj)
    keys = engine.parse_plot_scripts(walk_script_files(paths))
    if not keys:
        raise TextEngineError("no scripts were loaded")

    dialog = engine.enter(engine.resolve_tree(start) if start else keys[0])
    while dialog is not None:
        decisions = engine.visible_decisions()
        render_dialog(engine.console, dialog, decisions)
        if not any(decision.enabled for decision in decisions):
            typer.prompt("continue", default="", show_default=False)
            dialog = engine.advance()
            continue

        choice = typer.prompt("choose")
        if choice not in {decision.id for decision in decisions if decision.enabled}:
            engine.console.out(f"cannot choose {choice}", style="red")
            continue
        dialog = engine.choose(choice)

    engine.console.out(f"the end, score: {engine.score()}", style="bold")


if __name__ == "__main__":
    app()
