"""
MCTSのテストケース

- GameTreeNodeの基本機能テスト
- MCTS探索サイクルのテスト
"""

import math

import numpy as np
import pytest

from tictactoe.game.board import Board, CellStatus, GameStatus, IllegalMoveError, Rules
from tictactoe.mcts.node import GameTreeNode
from tictactoe.mcts.mcts import MCTS


def iter_nodes(node):
    """部分木の全ノードを列挙"""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(child for child in current.children if child is not None)


class TestGameTreeNode:
    """GameTreeNodeの基本機能テスト"""

    def test_node_initialization(self):
        """ノードの初期化テスト"""
        node = GameTreeNode(-1, 9)

        assert node.move == -1
        assert node.visit_count == 0
        assert node.win_count == 0
        assert len(node.children) == 9
        assert node.is_leaf()
        assert not node.is_expanded

    def test_node_update(self):
        """ノードの統計更新テスト"""
        node = GameTreeNode(0, 9)

        node.update(True)
        assert node.visit_count == 1
        assert node.win_count == 1

        node.update(False)
        assert node.visit_count == 2
        assert node.win_count == 1

    def test_score_unvisited_is_zero(self):
        node = GameTreeNode(0, 9)
        assert node.score(0) == 0.0
        assert node.score(1000) == 0.0

    def test_score_formula(self):
        node = GameTreeNode(0, 9)
        node.visit_count = 2
        node.win_count = 1

        expected = 0.5 + math.sqrt(2.0 * math.log(8 / 2))
        assert node.score(8) == pytest.approx(expected)

    def test_score_increases_with_wins(self):
        a = GameTreeNode(0, 9)
        b = GameTreeNode(1, 9)
        a.visit_count = b.visit_count = 5
        a.win_count = 2
        b.win_count = 3

        assert b.score(20) > a.score(20)

    def test_score_increases_with_total_playouts(self):
        node = GameTreeNode(0, 9)
        node.visit_count = 3
        node.win_count = 1

        scores = [node.score(total) for total in range(3, 12)]
        assert all(later > earlier for earlier, later in zip(scores, scores[1:]))

    def test_node_expansion(self):
        """空きセルにのみ子ノードが作成されること"""
        node = GameTreeNode(-1, 9)
        board = Board(3)
        board.place(0, CellStatus.MINE)
        board.place(4, CellStatus.OPPONENT)

        created = node.expand(board)

        assert created == 7
        assert node.is_expanded
        assert node.children[0] is None
        assert node.children[4] is None
        for p in (1, 2, 3, 5, 6, 7, 8):
            assert node.children[p].move == p
            assert node.children[p].visit_count == 0

    def test_expansion_is_idempotent(self):
        """展開済みノードを再展開しても子ノードと統計は変わらないこと"""
        node = GameTreeNode(-1, 9)
        board = Board(3)
        node.expand(board)

        node.children[3].update(True)
        before = list(node.children)

        assert not node.needs_expansion(board)
        assert node.expand(board) == 0
        assert all(a is b for a, b in zip(before, node.children))
        assert node.children[3].visit_count == 1
        assert node.children[3].win_count == 1

    def test_best_child_skips_absent(self):
        node = GameTreeNode(-1, 9)
        assert node.best_child(0) is None

        child = node.get_or_create_child(7)
        assert node.best_child(0) is child

    def test_best_child_tie_prefers_lowest_cell(self):
        node = GameTreeNode(-1, 9)
        for p in (5, 2, 8):
            node.get_or_create_child(p)

        assert node.best_child(0).move == 2

    def test_best_child_highest_score(self):
        node = GameTreeNode(-1, 9)
        low = node.get_or_create_child(1)
        high = node.get_or_create_child(6)
        low.visit_count, low.win_count = 4, 1
        high.visit_count, high.win_count = 4, 3

        assert node.best_child(10) is high

    def test_get_or_create_child_keeps_existing(self):
        node = GameTreeNode(-1, 9)
        child = node.get_or_create_child(3)
        child.update(False)

        assert node.get_or_create_child(3) is child
        assert node.get_visit_counts() == {3: 1}


class TestMCTS:
    """MCTS探索サイクルのテスト"""

    @pytest.fixture
    def rules(self):
        return Rules(3)

    @pytest.fixture
    def mcts(self, rules):
        return MCTS(rules, np.random.default_rng(0))

    def test_mcts_initialization(self, mcts, rules):
        assert mcts.rules is rules
        assert mcts.total_playouts == 0

    def test_single_cycle(self, mcts):
        root = GameTreeNode(-1, 9)
        board = Board(3)

        status = mcts.run_cycle(root, board)

        assert status.is_terminal()
        assert mcts.total_playouts == 1
        assert all(child is not None for child in root.children)
        assert sum(root.get_visit_counts().values()) == 1
        # 実盤面は変更されない
        assert len(board.vacant_cells()) == 9

    def test_playout_path_depth(self, mcts):
        """1回のプレイアウトで選択ノードから終局までの経路が木に追加されること"""
        root = GameTreeNode(-1, 9)
        mcts.run_cycle(root, Board(3))

        selected = [c for c in root.children if c.visit_count == 1]
        assert len(selected) == 1

        # 3x3 では最短でも自分の手3つ + 相手の手2つ
        depth = 0
        node = selected[0]
        while node is not None:
            assert node.visit_count == 1
            depth += 1
            node = node.best_child(mcts.total_playouts)
        assert 5 <= depth <= 9

    def test_thousand_cycles(self, mcts):
        """1000サイクル後の統計"""
        root = GameTreeNode(-1, 9)
        board = Board(3)

        mcts.search(root, board, num_simulations=1000)

        assert mcts.total_playouts == 1000
        child_visits = sum(root.get_visit_counts().values())
        assert 1 <= child_visits <= 1000
        # ルート自身は数えない
        assert root.visit_count == 0

    def test_statistics_invariants(self, mcts):
        """全ノードで 0 <= W <= N、子の訪問回数の合計 <= N"""
        root = GameTreeNode(-1, 9)
        mcts.search(root, Board(3), num_simulations=300)

        for node in iter_nodes(root):
            assert 0 <= node.win_count <= node.visit_count
            if node is not root:
                child_visits = sum(node.get_visit_counts().values())
                assert child_visits <= node.visit_count

    def test_children_only_for_vacant_cells(self, mcts):
        root = GameTreeNode(-1, 9)
        board = Board(3)
        board.place(0, CellStatus.MINE)
        board.place(8, CellStatus.OPPONENT)

        mcts.search(root, board, num_simulations=50)

        assert root.children[0] is None
        assert root.children[8] is None
        for node in iter_nodes(root):
            if node is not root:
                assert node.move not in (0, 8)

    def test_search_from_finished_game_raises(self, mcts):
        board = Board(3)
        for p in (0, 1, 2):
            board.place(p, CellStatus.MINE)

        with pytest.raises(IllegalMoveError):
            mcts.run_cycle(GameTreeNode(-1, 9), board)

    def test_forced_win(self, rules):
        """勝ち手が1つしか残っていない局面では全プレイアウトが勝ち"""
        mcts = MCTS(rules, np.random.default_rng(1))
        board = Board(3, [1, 1, 0,
                          -1, -1, 1,
                          -1, 1, -1])
        root = GameTreeNode(-1, 9)

        for _ in range(5):
            assert mcts.run_cycle(root, board) == GameStatus.WIN

        assert root.children[2].visit_count == 5
        assert root.children[2].win_count == 5
        assert mcts.get_best_move(root) == 2

    def test_same_seed_same_tree(self, rules):
        """同じシードなら同じ統計になること"""
        counts = []
        for _ in range(2):
            mcts = MCTS(rules, np.random.default_rng(42))
            root = GameTreeNode(-1, 9)
            mcts.search(root, Board(3), num_simulations=100)
            counts.append([
                (c.visit_count, c.win_count) for c in root.children
            ])

        assert counts[0] == counts[1]

    def test_get_best_move_without_children(self, mcts):
        with pytest.raises(IllegalMoveError):
            mcts.get_best_move(GameTreeNode(-1, 9))
