"""
三目並べプレイヤークラス

対局用の様々なプレイヤーを実装:
- RandomPlayer: ランダムに着手
- PerfectPlayer: ルールベース（中央 → 相手のリーチを阻止 → 自分のラインを伸ばす）
- MCTSPlayer: UCB1方式のMCTS

全プレイヤー共通の契約:
- play(): 自分の手を決めて自分の盤面に記録し、セルインデックスを返す
- update(p): 相手の手 p を自分の盤面に記録し、自分視点の対局状態を返す
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

import numpy as np

from tictactoe.game.board import Board, CellStatus, GameStatus, IllegalMoveError, Rules
from tictactoe.mcts.mcts import MCTS
from tictactoe.mcts.node import GameTreeNode

logger = logging.getLogger(__name__)


class Player(ABC):
    """
    プレイヤーの基底クラス
    """

    def __init__(self, rules: Rules, rng: np.random.Generator, name: str):
        """
        Args:
            rules: 勝敗判定ルール（盤面サイズもここから決まる）
            rng: プロセス全体で共有する乱数生成器
            name: プレイヤー名
        """
        self.rules = rules
        self.rng = rng
        self.name = name
        self.board = Board(rules.size)

    @abstractmethod
    def play(self) -> int:
        """
        着手を選択し、自分の盤面に記録

        Returns:
            int: 着手したセルインデックス
        """
        pass

    def update(self, p: int) -> GameStatus:
        """
        相手の着手を自分の盤面に記録

        Args:
            p: 相手が着手したセルインデックス

        Returns:
            GameStatus: 自分視点の対局状態

        Raises:
            IllegalMoveError: 空いていないセル
        """
        self.board.place(p, CellStatus.OPPONENT)
        return self.judge()

    def judge(self) -> GameStatus:
        return self.rules.judge(self.board.cells)

    def reset(self):
        """ゲーム開始時の初期化"""
        self.board.reset()

    def dump(self):
        """現在の盤面を表示"""
        print(self.board.render())

    def _mark(self, p: int) -> int:
        self.board.place(p, CellStatus.MINE)
        return p


class RandomPlayer(Player):
    """
    ランダムプレイヤー

    空きセルの中から一様に選択
    """

    def __init__(self, rules: Rules, rng: np.random.Generator, name: str = "Random"):
        super().__init__(rules, rng, name)

    def play(self) -> int:
        """ランダムに着手を選択"""
        vacant = self.board.vacant_cells()
        if len(vacant) == 0:
            raise IllegalMoveError("No vacant cell to play")

        return self._mark(int(self.rng.choice(vacant)))


class PerfectPlayer(RandomPlayer):
    """
    ルールベースプレイヤー

    1. 中央が空いていれば中央（N が奇数の場合）
    2. ライン表の順に走査し、
       - 相手が N-1 個以上置いたラインの空きを塞ぐ
       - 自分の石が最も多いラインの空きを埋める
    3. どちらも無ければランダム
    """

    def __init__(self, rules: Rules, rng: np.random.Generator, name: str = "Perfect"):
        super().__init__(rules, rng, name)

    def play(self) -> int:
        center = self.board.center()
        if center is not None and self.board.is_vacant(center):
            return self._mark(center)

        cells = self.board.cells
        n_opponent = self.rules.line_counts(cells, CellStatus.OPPONENT)
        n_mine = self.rules.line_counts(cells, CellStatus.MINE)
        max_mine = n_mine.max()
        size = self.rules.size

        for i, line in enumerate(self.rules.alignments):
            # 相手のラインを阻止 / 自分のラインを完成
            if n_opponent[i] >= size - 1 or n_mine[i] >= max_mine:
                vacant = self._first_vacant(line)
                if vacant is not None:
                    return self._mark(vacant)

        # 良い手が無い
        return super().play()

    def _first_vacant(self, line: np.ndarray) -> Optional[int]:
        for p in line:
            if self.board.is_vacant(int(p)):
                return int(p)
        return None


class MCTSPlayer(Player):
    """
    MCTSベースのAIプレイヤー

    探索木は対局中ずっと保持し、実際の着手（自分・相手とも）に合わせて
    カーソルを進める。カーソル以下の統計情報は次の手番でも再利用される。
    """

    def __init__(
        self,
        rules: Rules,
        rng: np.random.Generator,
        num_simulations: int = 1,
        center_first: bool = False,
        name: str = "MCTS",
    ):
        """
        Args:
            rules: 勝敗判定ルール
            rng: プロセス全体で共有する乱数生成器
            num_simulations: 1手あたりの探索サイクル数
            center_first: 中央が空いていれば探索せずに中央に打つ
            name: プレイヤー名
        """
        super().__init__(rules, rng, name)

        if num_simulations < 1:
            raise ValueError(f"num_simulations must be >= 1, got {num_simulations}")

        self.num_simulations = num_simulations
        self.center_first = center_first

        self.mcts = MCTS(rules, rng)
        self.root = GameTreeNode(-1, rules.num_cells)
        self.cursor = self.root

    def reset(self):
        """新しい対局用に探索木を作り直す"""
        super().reset()
        self.mcts = MCTS(self.rules, self.rng)
        self.root = GameTreeNode(-1, self.rules.num_cells)
        self.cursor = self.root

    def play(self) -> int:
        center = self.board.center()
        if self.center_first and center is not None and self.board.is_vacant(center):
            # 定跡: 探索せず中央に打つ（統計情報は更新しない）
            move = center
        else:
            self.mcts.search(self.cursor, self.board, self.num_simulations)
            move = self.mcts.get_best_move(self.cursor)

        logger.debug("mine move %d", move)
        self._mark(move)
        self.cursor = self.cursor.get_or_create_child(move)

        return move

    def update(self, p: int) -> GameStatus:
        logger.debug("opp. move %d", p)
        status = super().update(p)

        # 既存の子ノードがあれば統計ごと引き継ぐ
        self.cursor = self.cursor.get_or_create_child(p)

        return status


PLAYER_KINDS = ("random", "perfect", "mcts")


def create_player(
    kind: str,
    rules: Rules,
    rng: np.random.Generator,
    name: Optional[str] = None,
    **kwargs,
) -> Player:
    """
    種類名からプレイヤーを作成

    Args:
        kind: "random" / "perfect" / "mcts"
        rules: 勝敗判定ルール
        rng: 乱数生成器
        name: プレイヤー名（省略時は各クラスの既定名）
        **kwargs: MCTSPlayer用の追加設定 (num_simulations, center_first)

    Returns:
        Player: インスタンス
    """
    if name is not None:
        kwargs["name"] = name

    if kind == "random":
        return RandomPlayer(rules, rng, **_only(kwargs, "name"))
    elif kind == "perfect":
        return PerfectPlayer(rules, rng, **_only(kwargs, "name"))
    elif kind == "mcts":
        return MCTSPlayer(
            rules, rng, **_only(kwargs, "name", "num_simulations", "center_first")
        )

    raise ValueError(f"Unknown player kind: {kind} (choose from {', '.join(PLAYER_KINDS)})")


def _only(kwargs: dict, *keys: str) -> dict:
    return {k: v for k, v in kwargs.items() if k in keys}
