from pathlib import Path

SCRIPT_GLOB = "*.plot"


def walk_script_files(paths):
    """
    Iterate over script files, directories are searched recursively for plot scripts.
    """
    for path in map(Path, paths):
        if path.is_dir():
            yield from sorted(path.rglob(SCRIPT_GLOB))
        else:
            yield path
