"""
N×N 盤面とルール

- 盤面はプレイヤー視点のセル状態 (自分 / 相手 / 空き) の配列
- 勝利ライン（列・行・対角線 2本、計 2N+2 本）は盤面サイズから一度だけ計算
- judge() で盤面を 継続 / 勝ち / 負け / 引き分け に分類
"""

from enum import Enum, IntEnum
from typing import List, Optional

import numpy as np


class CellStatus(IntEnum):
    """
    セルの状態（盤面の持ち主の視点）

    値を ±1 / 0 にしておくと、ラインの合計が ±N かどうかで
    一方が揃えたかを判定できる
    """
    MINE = 1
    OPPONENT = -1
    VACANT = 0


class GameStatus(Enum):
    """対局状態（WIN / LOSE は盤面の持ち主から見た結果）"""
    CONTD = "continuing"
    WIN = "win"
    LOSE = "lose"
    DRAW = "draw"

    def is_terminal(self) -> bool:
        return self is not GameStatus.CONTD


class IllegalMoveError(ValueError):
    """空いていないセルへの着手など、呼び出し側の契約違反"""


def index(x: int, y: int, size: int) -> int:
    """座標 (x, y) をセルインデックスに変換"""
    return size * y + x


class Rules:
    """
    勝敗判定ルール

    勝利ラインの表は生成時に一度だけ計算し、以降は読み取り専用
    """

    def __init__(self, size: int = 3):
        """
        Args:
            size (int): 盤面の一辺の長さ N
        """
        if size < 1:
            raise ValueError(f"Board size must be positive, got {size}")

        self.size = size
        self.num_cells = size * size
        self.alignments = self._build_alignments(size)

    @staticmethod
    def _build_alignments(size: int) -> np.ndarray:
        """
        勝利ラインを生成

        並び順: 列 N 本 → 行 N 本 → 主対角線 → 反対角線

        Returns:
            np.ndarray: (2N+2, N) のセルインデックス表（書き込み不可）
        """
        lines = []
        for i in range(size):
            lines.append([index(i, j, size) for j in range(size)])
        for i in range(size):
            lines.append([index(j, i, size) for j in range(size)])
        lines.append([index(i, i, size) for i in range(size)])
        lines.append([index(size - i - 1, i, size) for i in range(size)])

        alignments = np.array(lines, dtype=np.int64)
        alignments.setflags(write=False)
        return alignments

    def line_counts(self, cells: np.ndarray, status: CellStatus) -> np.ndarray:
        """各ラインに含まれる指定状態のセル数 (2N+2,)"""
        return (cells[self.alignments] == status).sum(axis=1)

    def judge(self, cells: np.ndarray) -> GameStatus:
        """
        盤面を判定

        各ラインを 全部自分: +1, 全部相手: -1, それ以外: 0 として合計する。
        両者が同時に揃ったラインを持つことはないので合計の符号で勝敗が決まる。

        Args:
            cells (np.ndarray): (N*N,) のセル状態

        Returns:
            GameStatus: 盤面の持ち主から見た状態
        """
        line_sums = cells[self.alignments].sum(axis=1)
        result = int(np.sum(line_sums == self.size)) - int(np.sum(line_sums == -self.size))

        if result > 0:
            return GameStatus.WIN
        elif result < 0:
            return GameStatus.LOSE
        elif not np.any(cells == CellStatus.VACANT):
            return GameStatus.DRAW
        return GameStatus.CONTD


class Board:
    """
    プレイヤーごとの盤面

    共有盤面は存在せず、各プレイヤーが自分視点の盤面を1枚ずつ持つ
    """

    def __init__(self, size: int = 3, cells: Optional[np.ndarray] = None):
        self.size = size
        self.num_cells = size * size

        if cells is None:
            self.cells = np.full(self.num_cells, CellStatus.VACANT, dtype=np.int8)
        else:
            self.cells = np.array(cells, dtype=np.int8)
            if self.cells.shape != (self.num_cells,):
                raise ValueError(
                    f"Expected {self.num_cells} cells, got {self.cells.shape}"
                )

    def copy(self) -> "Board":
        return Board(self.size, self.cells)

    def reset(self):
        self.cells.fill(CellStatus.VACANT)

    def is_vacant(self, p: int) -> bool:
        return 0 <= p < self.num_cells and self.cells[p] == CellStatus.VACANT

    def place(self, p: int, status: CellStatus):
        """
        セルに着手

        Raises:
            IllegalMoveError: 盤外または既に埋まっているセル
        """
        if not 0 <= p < self.num_cells:
            raise IllegalMoveError(f"Cell {p} is out of range (0-{self.num_cells - 1})")
        if self.cells[p] != CellStatus.VACANT:
            raise IllegalMoveError(f"Cell {p} is not vacant")

        self.cells[p] = status

    def vacant_cells(self) -> np.ndarray:
        """空きセルのインデックス（昇順）"""
        return np.flatnonzero(self.cells == CellStatus.VACANT)

    def center(self) -> Optional[int]:
        """中央のセル（N が偶数の場合は None）"""
        if self.size % 2 == 0:
            return None
        return index(self.size // 2, self.size // 2, self.size)

    def render(self) -> str:
        """
        盤面の文字列表現

        o: 自分, x: 相手, 空白: 空き
        """
        marks = {
            CellStatus.MINE: "o",
            CellStatus.OPPONENT: "x",
            CellStatus.VACANT: " ",
        }
        border = "+" + "-" * self.size + "+"
        rows: List[str] = [border]
        for y in range(self.size):
            row = "".join(
                marks[CellStatus(int(self.cells[index(x, y, self.size)]))]
                for x in range(self.size)
            )
            rows.append(f"|{row}|")
        rows.append(border)
        return "\n".join(rows)

    def __str__(self) -> str:
        return self.render()
