"""
評価システムモジュール

プレイヤー同士の対戦・評価機能を提供
"""

from .players import (
    Player,
    RandomPlayer,
    PerfectPlayer,
    MCTSPlayer,
    create_player,
)
from .arena import Arena, MatchResult, evaluate_player

__all__ = [
    "Player",
    "RandomPlayer",
    "PerfectPlayer",
    "MCTSPlayer",
    "create_player",
    "Arena",
    "MatchResult",
    "evaluate_player",
]
