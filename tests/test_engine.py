from pathlib import Path

import pytest
from pydantic import ValidationError

from textengine.config import Config
from textengine.engine import Engine
from textengine.errors import (
    DisabledDecisionError,
    DuplicateIdError,
    NotFoundError,
    ScriptIOError,
    TextEngineError,
)

DATA = Path(__file__).parent / "data"
INTRO = str(DATA / "intro.plot")
FOREST = str(DATA / "forest.plot")


def make_engine(**config):
    engine = Engine(Config(**config))
    engine.parse_plot_scripts([INTRO, FOREST])
    return engine


def test_parse_plot_scripts():
    engine = Engine()
    assert engine.parse_plot_scripts([Path(INTRO), Path(FOREST)]) == [INTRO, FOREST]
    assert list(engine.trees) == [INTRO, FOREST]
    assert engine.tree(INTRO).root == "intro"
    assert engine.dialog(FOREST, "clearing").link == "intro"
    assert engine.decision(INTRO, "intro", "door").link == "hall"


def test_duplicate_script():
    engine = make_engine()
    with pytest.raises(DuplicateIdError, match="duplicate script"):
        engine.parse_plot_scripts([INTRO])


def test_missing_script_aborts_batch():
    engine = Engine()
    with pytest.raises(ScriptIOError, match="cannot open file"):
        engine.parse_plot_scripts([INTRO, DATA / "missing.plot", FOREST])
    assert list(engine.trees) == [INTRO]


def test_missing_script_skipped():
    engine = Engine(Config(abort_on_error=False))
    missing = str(DATA / "missing.plot")
    assert engine.parse_plot_scripts([INTRO, missing, FOREST]) == [INTRO, FOREST]
    assert missing not in engine.trees


def test_missing_tree():
    with pytest.raises(NotFoundError, match="cannot find tree: nowhere"):
        make_engine().tree("nowhere")


def test_tree_is_a_copy():
    engine = make_engine()
    tree = engine.tree(INTRO)
    tree.score = 100
    tree.update_dialog("intro", message="changed")
    assert engine.tree(INTRO).score == 0
    assert engine.dialog(INTRO, "intro").message.startswith("You wake up")


def test_mutators():
    engine = make_engine()
    engine.update_dialog(INTRO, "end", link="intro")
    engine.update_decision(INTRO, "intro", "3", enabled=True, message="Jump")
    engine.set_score(INTRO, 10)
    engine.increment_score(INTRO, -4)

    assert engine.dialog(INTRO, "end").link == "intro"
    assert engine.decision(INTRO, "intro", "3").enabled
    assert engine.decision(INTRO, "intro", "3").message == "Jump"
    assert engine.score(INTRO) == 6


def test_enter():
    engine = make_engine()
    assert engine.finished
    dialog = engine.enter(INTRO)
    assert dialog.id == "intro"
    assert engine.current.id == "intro"
    assert not engine.finished


def test_visible_decisions():
    engine = make_engine()
    engine.enter(INTRO)
    assert [d.id for d in engine.visible_decisions()] == ["door", "2", "3", "4"]

    engine = make_engine(display_disabled_decisions=False)
    engine.enter(INTRO)
    assert [d.id for d in engine.visible_decisions()] == ["door", "2", "4"]


def test_walk_to_the_end():
    engine = make_engine()
    engine.enter(INTRO)
    assert engine.choose("door").id == "hall"
    assert engine.advance().id == "end"
    assert engine.advance() is None
    assert engine.finished
    assert engine.visible_decisions() == []
    assert engine.score() == 0


def test_choose_applies_score():
    engine = make_engine(initial_score=1)
    engine.enter(INTRO)
    assert engine.choose("4").id == "intro"
    assert engine.score() == -1
    assert engine.choose("2").id == "rescue"
    assert engine.score() == 4
    assert engine.score(FOREST) == 1


def test_broken_link_is_fatal_at_traversal():
    engine = make_engine()
    engine.enter(INTRO)
    engine.choose("2")
    with pytest.raises(NotFoundError, match="cannot find dialog with id: missing"):
        engine.advance()
    assert engine.current.id == "rescue"


def test_broken_link_leaves_score():
    engine = make_engine()
    engine.update_decision(INTRO, "intro", "2", link="missing")
    engine.enter(INTRO)
    with pytest.raises(NotFoundError):
        engine.choose("2")
    assert engine.score() == 0
    assert engine.current.id == "intro"


def test_choose_invalid():
    engine = make_engine()
    engine.enter(INTRO)
    with pytest.raises(DisabledDecisionError, match="decision is disabled: 3"):
        engine.choose("3")
    with pytest.raises(NotFoundError, match="cannot find decision with id: 9"):
        engine.choose("9")


def test_tree_links():
    engine = make_engine()
    engine.update_decision(INTRO, "intro", "3", enabled=True)
    engine.enter(INTRO)
    dialog = engine.choose("3")
    assert dialog.id == "clearing"
    assert engine.current_tree == FOREST

    # forest links back by file stem
    assert engine.advance().id == "intro"
    assert engine.current_tree == INTRO


def test_missing_tree_link():
    engine = Engine()
    engine.parse_plot_scripts([FOREST])
    engine.enter(FOREST)
    with pytest.raises(NotFoundError, match="cannot find tree: intro"):
        engine.advance()


def test_advance_with_decisions():
    engine = make_engine()
    engine.enter(INTRO)
    with pytest.raises(TextEngineError, match="has decisions"):
        engine.advance()


def test_not_playing():
    engine = make_engine()
    with pytest.raises(TextEngineError, match="no dialog is being played"):
        engine.choose("door")
    with pytest.raises(TextEngineError, match="no dialog is being played"):
        engine.advance()


def test_undecodable_script_skipped(tmp_path):
    bad = tmp_path / "bad.plot"
    bad.write_bytes(b"$[a] caf\xe9\n")
    engine = Engine(Config(abort_on_error=False))
    assert engine.parse_plot_scripts([bad, INTRO]) == [INTRO]
    assert str(bad) not in engine.trees


def test_update_rejects_id_change():
    engine = make_engine()
    with pytest.raises(ValidationError):
        engine.update_decision(INTRO, "intro", "door", id="window")
    with pytest.raises(ValidationError):
        engine.update_dialog(INTRO, "hall", id="corridor")
    assert engine.decision(INTRO, "intro", "door").id == "door"
    assert engine.dialog(INTRO, "hall").id == "hall"
