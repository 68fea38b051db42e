# Area: Session
"""
Session state: the connected session value, the game store and the grid.
"""

from .grid import GridState
from .game_store import GameSessionStore
from .session import Session, check_network, open_session

__all__ = [
    "GridState",
    "GameSessionStore",
    "Session",
    "check_network",
    "open_session",
]
