"""MiniMax handler."""

from .client import MiniMaxHandler
from .models import MINIMAX_DEFAULT_MODEL_ID, MINIMAX_MODELS

__all__ = ["MiniMaxHandler", "MINIMAX_DEFAULT_MODEL_ID", "MINIMAX_MODELS"]
