from pydantic import BaseModel, Field


class Config(BaseModel):
    """
    Settings shared by the console, the script parser and the engine.
    """

    # indentation for subsequent lines in Console.out, use "" for no indent
    output_indent: str = "  "
    # 0 - log nothing, 1 - errors only, 2 - errors and warnings, 3 - everything
    log_level: int = Field(default=1, ge=0, le=3)
    # strip spaces right after a marker's closing bracket
    trim_whitespaces_behind_markers: bool = True
    # false hides disabled decisions instead of showing them as unchoosable
    display_disabled_decisions: bool = True
    # starting score of every tree
    initial_score: int = 0
    # stop the whole batch on the first script that fails to load
    abort_on_error: bool = True
