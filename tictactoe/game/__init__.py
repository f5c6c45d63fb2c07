"""
盤面・ルールモジュール

N×N 盤面の状態管理と勝敗判定を提供
"""

from .board import (
    CellStatus,
    GameStatus,
    IllegalMoveError,
    Rules,
    Board,
    index,
)

__all__ = [
    "CellStatus",
    "GameStatus",
    "IllegalMoveError",
    "Rules",
    "Board",
    "index",
]
