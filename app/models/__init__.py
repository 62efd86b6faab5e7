from app import db  # noqa: F401 - imported for model imports

from .game import Game
from .pick import PickEntry, PickSelection
from .setting import Setting
from .standing import Standing

__all__ = [
    "Game",
    "PickEntry",
    "PickSelection",
    "Setting",
    "Standing",
]
