"""
Plot script parsing pipeline. We don't use a grammar for the script layout and instead work our way like this.
1. Indenter: Construct a tree from indentation, assign known tokens to lines.
2. Transformer: Tokenize markers, merge continuation lines, build dialogs and decisions into a game tree.

Layout of a script:

    # comments and blank lines are skipped
    $[intro] You wake up in a dark room.
      the air smells of dust.
      > Open the door $D[hall]
      >(+5) Wait for help $D[rescue]
      >! Climb out of the window $T[forest]
    $[hall] A long hall. $D[end]

Unindented lines start a dialog, indented `>` lines start a decision of the dialog above,
other indented lines continue the dialog or decision they belong to.
A score like `(+5)` counts only right after `>` or `>!`, so `> (3) apples` is plain text.
"""

import re
from pathlib import Path

import rich
import typer
from lark import Token, Transformer, Tree
from lark.exceptions import VisitError

from textengine.config import Config
from textengine.console import Console
from textengine.errors import MalformedScriptError, ScriptIOError
from textengine.game import walk_script_files
from textengine.markers import parse_line
from textengine.models import Decision, Dialog, Meta, ParsedDecision
from textengine.models import Token as MarkerToken
from textengine.models import Tree as GameTree
from textengine.text import render_tree

app = typer.Typer()

"""
Stage 1: Indentation parser
Construct a raw tree from indented structure for further processing.
"""

decision_re = re.compile(r"^>(?P<disabled>!)?(?:\((?P<score>[+-]?\d+)\))?\s*(?P<text>.*)$")


def is_empty(line: str) -> bool:
    return not line.strip() or line.strip().startswith("#")


def line_token(line: str) -> str:
    if line.lstrip().startswith(">"):
        return "DECISION"
    elif not line[0].isspace():
        return "DIALOG"
    else:
        return "LINE"


def build_script_tree(lines) -> Tree:
    """
    Group script lines into dialog and decision blocks by indentation.
    """
    root = Tree("script", [], meta=Meta(line=0, indent=-1))
    stack = [root]
    for lineno, line in enumerate(lines, start=1):
        line = line.rstrip("\r\n")
        if is_empty(line):
            continue
        strip = line.strip()
        indent = len(line) - len(line.lstrip())
        kind = line_token(line)
        meta = Meta(line=lineno, indent=indent, kind=kind)

        # we dedented so we pop all blocks that we exited
        while len(stack) > 1 and indent <= stack[-1].meta.indent:
            stack.pop()

        parent = stack[-1]
        if kind != "DIALOG" and parent is root:
            raise MalformedScriptError(f"line {lineno}: text outside of a dialog: {strip}")
        if kind == "DECISION" and parent.meta.kind == "DECISION":
            raise MalformedScriptError(f"line {lineno}: decision nested in a decision: {strip}")

        if kind == "LINE":
            stack[-1].children.append(Token(kind, strip, line=lineno))
        else:
            # add block[header, body], put following lines in body
            header = Token(kind, strip, line=lineno)
            body = Tree("body", [], meta=meta)
            stack[-1].children.append(Tree("block", [header, body], meta=meta))
            stack.append(body)

    return root


"""
Stage 2: Transform
Tokenize markers of headers and their continuation lines, build decisions, dialogs and the game tree.
"""


def clean_message(text: str) -> str:
    return "\n".join(line.strip() for line in text.split("\n")).strip()


class PlotTransformer(Transformer):
    def __init__(self, config: Config | None = None):
        super().__init__()
        self.config = config or Config()

    def tokenize(self, header: str, lines: list[Token]) -> MarkerToken:
        # continuation lines share the header's token, so markers can't repeat across them
        trim = self.config.trim_whitespaces_behind_markers
        token = parse_line(header, trim=trim)
        for line in lines:
            token.text += "\n"
            parse_line(line.value, token, trim=trim)
        return token

    def body(self, children):
        return children

    def block(self, children):
        header, body = children
        lines = [child for child in body if isinstance(child, Token)]

        match header:
            case Token("DECISION"):
                search = decision_re.search(header.value)
                return ParsedDecision(
                    line=header.line,
                    token=self.tokenize(search["text"], lines),
                    enabled=not search["disabled"],
                    score=int(search["score"] or 0),
                )
            case Token("DIALOG"):
                token = self.tokenize(header.value, lines)
                if not token.has_id:
                    raise MalformedScriptError(f"line {header.line}: dialog without id: {token.text}")
                dialog = Dialog(
                    id=token.id,
                    message=clean_message(token.text),
                    link=token.link,
                    tree_link=token.tree_link,
                )
                parsed = [child for child in body if isinstance(child, ParsedDecision)]
                for position, item in enumerate(parsed, start=1):
                    # decisions without an id are numbered by position
                    dialog.insert_decision(
                        Decision(
                            id=item.token.id if item.token.has_id else str(position),
                            message=clean_message(item.token.text),
                            link=item.token.link,
                            tree_link=item.token.tree_link,
                            enabled=item.enabled,
                            score=item.score,
                        )
                    )
                return dialog
            case _:
                raise ValueError("unknown header type: " + header.type)

    def script(self, dialogs):
        if not dialogs:
            raise MalformedScriptError("script has no dialogs")
        tree = GameTree(root=dialogs[0].id, score=self.config.initial_score)
        for dialog in dialogs:
            tree.insert_dialog(dialog)
        return tree


def transform_script_tree(script: Tree, config: Config | None = None) -> GameTree:
    try:
        return PlotTransformer(config).transform(script)
    except VisitError as e:
        # surface the engine error instead of lark's wrapper
        raise e.orig_exc from None


def parse_text(text: str, config: Config | None = None) -> GameTree:
    return transform_script_tree(build_script_tree(text.splitlines()), config)


def parse_script(path: Path, config: Config | None = None, console: Console | None = None) -> GameTree:
    """
    Parse a plot script file into a game tree. The file is closed before the tree is built.
    """
    config = config or Config()
    console = console or Console(config)
    try:
        file = open(path, encoding="utf-8")
    except OSError as e:
        raise ScriptIOError(f"cannot open file: {path}") from e

    with file:
        try:
            script = build_script_tree(file)
        except (OSError, UnicodeDecodeError) as e:
            raise ScriptIOError(f"cannot read file: {path}") from e

    tree = transform_script_tree(script, config)
    decisions = sum(len(dialog.decisions) for dialog in tree.dialogs.values())
    console.info(f"{path}: parsed {len(tree.dialogs)} dialogs", f"{decisions} decisions", f"root: {tree.root}")
    return tree


@app.command("parse")
def parse_and_print(ctx: typer.Context, paths: list[Path]):
    """
    Parse plot scripts and print their dialog trees.
    """
    config = ctx.obj or Config()
    console = Console(config)
    scripts = list(walk_script_files(paths))
    for path in scripts:
        tree = parse_script(path, config, console)
        rich.print(render_tree(str(path), tree))

    rich.print(f"parsed {len(scripts)} scripts")


if __name__ == "__main__":
    app()
