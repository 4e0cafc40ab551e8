from __future__ import annotations

import typer

from rt.model import Phase

PROJECTS_HELP = "Project key; repeat for several (default: every project of the train)"


def parse_phase(value: str) -> Phase:
    try:
        return Phase(value.lower())
    except ValueError:
        choices = ", ".join(p.value for p in Phase)
        raise typer.BadParameter(f"expected one of: {choices}")
