"""
Monte Carlo Tree Search モジュール

UCB1方式のMCTS実装を提供
"""

from .mcts import MCTS
from .node import GameTreeNode

__all__ = [
    "MCTS",
    "GameTreeNode",
]
