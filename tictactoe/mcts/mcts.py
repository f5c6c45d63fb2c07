"""
モンテカルロ木探索 (Monte Carlo Tree Search)

UCB1方式のMCTS実装:
- UCB1式による選択
- 空きセルのみを展開（遅延生成）
- 一様ランダムなプレイアウト
- プレイアウト経路全体へのバックプロパゲーション
"""

import logging
from typing import List

import numpy as np

from tictactoe.game.board import Board, CellStatus, GameStatus, IllegalMoveError, Rules
from .node import GameTreeNode

logger = logging.getLogger(__name__)


class MCTS:
    """
    モンテカルロ木探索

    1サイクルの流れ:
    1. Expand: 現在ノードの空きセルに子ノードを作成
    2. Select: UCB1スコアが最大の子ノードを選択
    3. Playout: 選択した手から終局までランダムに打ち、経路上にノードを追加
    4. Backpropagate: 経路上の全ノードに結果を反映
    """

    def __init__(self, rules: Rules, rng: np.random.Generator):
        """
        Args:
            rules (Rules): 勝敗判定ルール
            rng (np.random.Generator): プロセス全体で共有する乱数生成器
        """
        self.rules = rules
        self.rng = rng

        # エンジン全体のプレイアウト回数（対局中リセットしない）
        self.total_playouts = 0

    def search(self, node: GameTreeNode, board: Board, num_simulations: int = 1):
        """
        探索サイクルを指定回数実行

        Args:
            node (GameTreeNode): 現在局面のノード（カーソル）
            board (Board): 現在の実盤面
            num_simulations (int): サイクル数
        """
        for _ in range(num_simulations):
            self.run_cycle(node, board)

    def run_cycle(self, node: GameTreeNode, board: Board) -> GameStatus:
        """
        1回の探索サイクルを実行

        Args:
            node (GameTreeNode): 現在局面のノード（カーソル）
            board (Board): 現在の実盤面（変更しない）

        Returns:
            GameStatus: プレイアウトの終局結果（エンジン視点）

        Raises:
            IllegalMoveError: 既に終局している盤面
        """
        if self.rules.judge(board.cells).is_terminal():
            raise IllegalMoveError("Cannot search from a finished game")

        # 1. Expand
        if node.needs_expansion(board):
            created = node.expand(board)
            logger.debug("expanded node %d with %d children", node.move, created)

        # 2. Select
        selected = node.best_child(self.total_playouts)
        if selected is None:
            raise IllegalMoveError("No vacant cell to search")
        self.total_playouts += 1

        # 3. Playout
        path, status = self._playout(selected, board)

        # 4. Backpropagate
        self._backpropagate(path, status)

        return status

    def _playout(self, selected: GameTreeNode, board: Board) -> tuple:
        """
        選択した手から終局までランダムに打つ

        木に無い手は経路上に子ノードとして追加する

        Returns:
            tuple: (path, status)
                - path (List[GameTreeNode]): 訪問順のノード列
                - status (GameStatus): 終局結果
        """
        tmp_board = board.copy()
        tmp_board.place(selected.move, CellStatus.MINE)

        path: List[GameTreeNode] = [selected]
        trace = selected
        my_turn = True

        status = self.rules.judge(tmp_board.cells)
        while status == GameStatus.CONTD:
            my_turn = not my_turn
            next_move = int(self.rng.choice(tmp_board.vacant_cells()))
            tmp_board.place(next_move, CellStatus.MINE if my_turn else CellStatus.OPPONENT)

            trace = trace.get_or_create_child(next_move)
            path.append(trace)
            status = self.rules.judge(tmp_board.cells)

        return path, status

    def _backpropagate(self, path: List[GameTreeNode], status: GameStatus):
        """
        結果を経路上の全ノードに伝播

        Args:
            path (List[GameTreeNode]): 選択ノードから終局ノードまで
            status (GameStatus): 終局結果
        """
        won = status == GameStatus.WIN

        # リーフノードから順に更新
        for node in reversed(path):
            node.update(won)

    def get_best_move(self, node: GameTreeNode) -> int:
        """
        UCB1スコアが最大の子ノードの着手を返す

        Raises:
            IllegalMoveError: 子ノードが無い
        """
        best = node.best_child(self.total_playouts)
        if best is None:
            raise IllegalMoveError("Node has no children to choose from")
        return best.move
