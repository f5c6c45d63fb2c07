"""
MCTSノード定義

UCB1方式のMCTSで使用する木構造のノードクラス
UCB1スコア計算と統計情報を管理
"""

import numpy as np
from typing import List, Optional

from tictactoe.game.board import Board


class GameTreeNode:
    """
    MCTSの木構造ノード

    各ノードは以下の情報を保持:
    - このノードに至る着手 (move)
    - 訪問回数 (N)
    - 勝利回数 (W)
    - セルごとの子ノード（N*N 個のスロット、未生成は None）

    UCB1式:
        W / N + sqrt(2 * ln(T / N))

    T はエンジン全体のプレイアウト回数
    """

    def __init__(self, move: int, num_cells: int):
        """
        Args:
            move (int): 親からこのノードに至る着手（ルートは -1）
            num_cells (int): 盤面のセル数 N*N
        """
        self.move = move

        # 統計情報
        self.visit_count = 0  # N
        self.win_count = 0  # W

        # 子ノード: セルインデックスで参照
        self.children: List[Optional[GameTreeNode]] = [None] * num_cells

        # 展開済みフラグ
        self.is_expanded = False

    def is_leaf(self) -> bool:
        """リーフノードかどうか"""
        return all(child is None for child in self.children)

    def score(self, total_playouts: int) -> float:
        """
        UCB1スコア

        Args:
            total_playouts (int): エンジン全体のプレイアウト回数

        Returns:
            float: 未訪問ノードは 0
        """
        if self.visit_count == 0:
            return 0.0

        win_rate = self.win_count / self.visit_count
        return float(win_rate + np.sqrt(2.0 * np.log(total_playouts / self.visit_count)))

    def expand(self, board: Board) -> int:
        """
        空きセルのうち子ノードが未生成のものに子ノードを作成

        既存の子ノードとその統計情報には触れない

        Args:
            board (Board): このノードが表す盤面

        Returns:
            int: 新しく作成した子ノードの数
        """
        created = 0
        for p in board.vacant_cells():
            p = int(p)
            if self.children[p] is None:
                self.children[p] = GameTreeNode(p, len(self.children))
                created += 1

        self.is_expanded = True
        return created

    def needs_expansion(self, board: Board) -> bool:
        """空きセルに対応する子ノードが欠けているか"""
        return any(self.children[int(p)] is None for p in board.vacant_cells())

    def best_child(self, total_playouts: int) -> Optional["GameTreeNode"]:
        """
        UCB1スコアが最大の子ノードを選択

        同点の場合はセルインデックスの小さい方を優先

        Returns:
            GameTreeNode: 子ノードが1つも無い場合は None
        """
        best_score = -float('inf')
        best = None

        for child in self.children:
            if child is None:
                continue

            child_score = child.score(total_playouts)
            if child_score > best_score:
                best_score = child_score
                best = child

        return best

    def get_or_create_child(self, p: int) -> "GameTreeNode":
        """セル p の子ノードを取得（無ければ統計 0 で作成）"""
        if self.children[p] is None:
            self.children[p] = GameTreeNode(p, len(self.children))
        return self.children[p]

    def update(self, won: bool):
        """
        ノードの統計情報を更新（バックプロパゲーション）

        Args:
            won (bool): プレイアウトがエンジン側の勝ちで終わったか
        """
        self.visit_count += 1
        if won:
            self.win_count += 1

    def get_visit_counts(self) -> dict:
        """
        子ノードの訪問回数を取得

        Returns:
            dict: {move: visit_count}
        """
        return {
            child.move: child.visit_count
            for child in self.children
            if child is not None
        }

    def __repr__(self) -> str:
        """デバッグ用の文字列表現"""
        num_children = sum(1 for child in self.children if child is not None)
        return (f"GameTreeNode(move={self.move}, "
                f"N={self.visit_count}, "
                f"W={self.win_count}, "
                f"children={num_children})")
