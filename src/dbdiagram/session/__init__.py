"""Interactive preview session: debounced rendering and drag/resize write-back."""

from dbdiagram.session.debounce import Debouncer
from dbdiagram.session.interaction import ActiveElement, InteractionController, InteractionMode
from dbdiagram.session.preview import PreviewSession

__all__ = [
    "ActiveElement",
    "Debouncer",
    "InteractionController",
    "InteractionMode",
    "PreviewSession",
]
