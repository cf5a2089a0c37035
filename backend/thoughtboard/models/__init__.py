from thoughtboard.models.user import User
from thoughtboard.models.board import Board
from thoughtboard.models.thought import Thought, ThoughtType
from thoughtboard.models.connection import Connection

__all__ = ["User", "Board", "Thought", "ThoughtType", "Connection"]
