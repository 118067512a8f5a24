from pydantic import BaseModel, ConfigDict, Field

from textengine.errors import DuplicateIdError, NotFoundError


class Entity(BaseModel):
    model_config = ConfigDict(validate_assignment=True)


# Tree models
class Decision(Entity):
    """A choosable option of a dialog."""

    id: str = Field(frozen=True)
    message: str
    # id of another dialog, or of another tree when tree_link is set
    link: str = ""
    tree_link: bool = False
    enabled: bool = True
    # added to the tree score when chosen
    score: int = 0


class Dialog(Entity):
    """A node of the tree, followed by its decisions or by its link when there are none."""

    id: str = Field(frozen=True)
    message: str
    link: str = ""
    tree_link: bool = False
    decisions: dict[str, Decision] = {}

    def insert_decision(self, decision: Decision):
        """
        Insert a decision, the first decision with a given id wins.
        """
        if decision.id in self.decisions:
            raise DuplicateIdError(f"duplicate decision id: {decision.id}")
        self.decisions[decision.id] = decision

    def decision(self, id: str) -> Decision:
        """
        Get a copy of the decision with a given id.
        """
        if id not in self.decisions:
            raise NotFoundError(f"cannot find decision with id: {id}")
        return self.decisions[id].model_copy(deep=True)

    def all_decisions(self) -> list[Decision]:
        return [decision.model_copy(deep=True) for decision in self.decisions.values()]

    def update_decision(self, id: str, /, **changes) -> Decision:
        """
        Update message, link, tree_link, enabled or score of a stored decision.
        Changes apply to a copy that replaces the stored decision once all of them validate.
        """
        if id not in self.decisions:
            raise NotFoundError(f"cannot find decision with id: {id}")
        decision = self.decisions[id].model_copy(deep=True)
        for name, value in changes.items():
            setattr(decision, name, value)
        self.decisions[id] = decision
        return decision.model_copy(deep=True)


class Tree(Entity):
    """The dialogs of one plot script, usually one per level."""

    # id of the first dialog
    root: str = Field(frozen=True)
    score: int = 0
    dialogs: dict[str, Dialog] = {}

    def insert_dialog(self, dialog: Dialog):
        if dialog.id in self.dialogs:
            raise DuplicateIdError(f"duplicate dialog id: {dialog.id}")
        self.dialogs[dialog.id] = dialog

    def dialog(self, id: str) -> Dialog:
        if id not in self.dialogs:
            raise NotFoundError(f"cannot find dialog with id: {id}")
        return self.dialogs[id].model_copy(deep=True)

    def update_dialog(self, id: str, /, **changes) -> Dialog:
        if id not in self.dialogs:
            raise NotFoundError(f"cannot find dialog with id: {id}")
        dialog = self.dialogs[id].model_copy(deep=True)
        for name, value in changes.items():
            setattr(dialog, name, value)
        self.dialogs[id] = dialog
        return dialog.model_copy(deep=True)

    def update_decision(self, dialog_id: str, decision_id: str, /, **changes) -> Decision:
        if dialog_id not in self.dialogs:
            raise NotFoundError(f"cannot find dialog with id: {dialog_id}")
        return self.dialogs[dialog_id].update_decision(decision_id, **changes)

    def increment_score(self, value: int):
        """
        Add to the score, use a negative value to decrement.
        """
        self.score += value


# Parser models
class Token(BaseModel):
    """Text of one or more script lines with markers moved into id and link."""

    text: str = ""
    id: str = ""
    link: str = ""
    tree_link: bool = False
    has_id: bool = False
    has_link: bool = False


class Line(BaseModel):
    line: int


class Meta(BaseModel):
    line: int
    indent: int
    kind: str | None = None


class ParsedDecision(Line):
    token: Token
    enabled: bool = True
    score: int = 0
