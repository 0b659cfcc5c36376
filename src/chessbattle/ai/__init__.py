"""AI collaborator boundary: move-chooser protocol, reply resolution, Qt worker."""

from chessbattle.ai.chooser import CancelCheck, IMoveChooser, MoveRequest
from chessbattle.ai.qt_bridge import MoveChooserWorker
from chessbattle.ai.resolver import (
    MoveResolution,
    MoveResolver,
    ResolutionSource,
    clean_response,
    match_response,
)
from chessbattle.ai.session import AISession

__all__ = [
    "AISession",
    "CancelCheck",
    "IMoveChooser",
    "MoveChooserWorker",
    "MoveRequest",
    "MoveResolution",
    "MoveResolver",
    "ResolutionSource",
    "clean_response",
    "match_response",
]
