"""
対戦管理システム (Arena)

2つのプレイヤーを対戦させ、結果を記録する
"""

from dataclasses import dataclass
from typing import List
import time

from tictactoe.game.board import GameStatus
from .players import Player


@dataclass
class MatchResult:
    """
    対戦結果

    Attributes:
        player1_name: プレイヤー1の名前
        player2_name: プレイヤー2の名前
        winner: 勝者 (1: player1, 2: player2, 0: 引き分け)
        starting_player: 先手 (1: player1, 2: player2)
        num_moves: 総手数
        duration: 対戦時間（秒）
        final_board: 終局盤面（player1視点の文字列表現）
    """
    player1_name: str
    player2_name: str
    winner: int
    starting_player: int
    num_moves: int
    duration: float
    final_board: str = ""

    def __str__(self) -> str:
        """結果の文字列表現"""
        if self.winner == 1:
            result = f"{self.player1_name} wins"
        elif self.winner == 2:
            result = f"{self.player2_name} wins"
        else:
            result = "Draw"

        return (
            f"{result} | "
            f"First: {self.player1_name if self.starting_player == 1 else self.player2_name} | "
            f"Moves: {self.num_moves} | "
            f"Time: {self.duration:.3f}s"
        )


class Arena:
    """
    対戦管理システム

    2つのプレイヤーに交互に play() / update() を呼び出し、
    どちらかの update() が終局を返すまで進める
    """

    def __init__(self, verbose: bool = True):
        """
        Args:
            verbose: 詳細な出力を行うか
        """
        self.verbose = verbose

    def play_game(
        self,
        player1: Player,
        player2: Player,
        starting_player: int = 1,
    ) -> MatchResult:
        """
        1ゲームを実行

        Args:
            player1: プレイヤー1
            player2: プレイヤー2
            starting_player: 先手 (1: player1, 2: player2)

        Returns:
            MatchResult: 対戦結果
        """
        if starting_player not in (1, 2):
            raise ValueError(f"starting_player must be 1 or 2, got {starting_player}")

        # プレイヤーリセット
        player1.reset()
        player2.reset()

        # 先手・後手の割り当て (side番号はplayer番号)
        if starting_player == 1:
            current, waiting = (player1, 1), (player2, 2)
        else:
            current, waiting = (player2, 2), (player1, 1)

        start_time = time.time()
        num_moves = 0

        # ゲームループ
        while True:
            mover, mover_side = current
            receiver, receiver_side = waiting

            move = mover.play()
            num_moves += 1
            status = receiver.update(move)

            if self.verbose:
                print(f"{mover.name} plays: {move}")

            if status.is_terminal():
                break

            # 手番交代
            current, waiting = waiting, current

        duration = time.time() - start_time

        # 着手を受けた側の視点で判定されている
        if status == GameStatus.WIN:
            winner = receiver_side
        elif status == GameStatus.LOSE:
            winner = mover_side
        else:
            winner = 0

        result = MatchResult(
            player1_name=player1.name,
            player2_name=player2.name,
            winner=winner,
            starting_player=starting_player,
            num_moves=num_moves,
            duration=duration,
            final_board=player1.board.render(),
        )

        if self.verbose:
            print(f"\n{result}")
            print(result.final_board + "\n")

        return result

    def play_matches(
        self,
        player1: Player,
        player2: Player,
        num_games: int = 10,
        alternate_colors: bool = True,
    ) -> List[MatchResult]:
        """
        複数ゲームを実行

        Args:
            player1: プレイヤー1
            player2: プレイヤー2
            num_games: ゲーム数
            alternate_colors: 先後を交代するか

        Returns:
            List[MatchResult]: 対戦結果のリスト
        """
        results = []

        for game_idx in range(num_games):
            if self.verbose:
                print(f"=== Game {game_idx + 1}/{num_games} ===")

            # 先後を交代
            if alternate_colors:
                starting_player = 1 if (game_idx % 2 == 0) else 2
            else:
                starting_player = 1

            result = self.play_game(player1, player2, starting_player)
            results.append(result)

        # サマリー表示
        if self.verbose:
            self._print_summary(results, player1.name, player2.name)

        return results

    def _print_summary(
        self,
        results: List[MatchResult],
        player1_name: str,
        player2_name: str,
    ):
        """対戦結果のサマリーを表示"""
        print("\n" + "=" * 70)
        print("Match Summary")
        print("=" * 70)

        player1_wins = sum(1 for r in results if r.winner == 1)
        player2_wins = sum(1 for r in results if r.winner == 2)
        draws = sum(1 for r in results if r.winner == 0)

        total_games = len(results)
        player1_win_rate = player1_wins / total_games * 100 if total_games > 0 else 0
        player2_win_rate = player2_wins / total_games * 100 if total_games > 0 else 0

        avg_moves = sum(r.num_moves for r in results) / total_games if total_games > 0 else 0
        avg_duration = sum(r.duration for r in results) / total_games if total_games > 0 else 0

        print(f"\nTotal Games: {total_games}")
        print(f"{player1_name}: {player1_wins} wins ({player1_win_rate:.1f}%)")
        print(f"{player2_name}: {player2_wins} wins ({player2_win_rate:.1f}%)")
        print(f"Draws: {draws}")
        print(f"\nAverage Moves: {avg_moves:.1f}")
        print(f"Average Duration: {avg_duration:.3f}s")
        print("=" * 70 + "\n")


def evaluate_player(
    player: Player,
    opponent: Player,
    num_games: int = 10,
    verbose: bool = True,
    alternate_colors: bool = True,
) -> dict:
    """
    プレイヤーを評価

    Args:
        player: 評価対象のプレイヤー
        opponent: 対戦相手
        num_games: ゲーム数
        verbose: 詳細な出力
        alternate_colors: 先後を交代するか

    Returns:
        dict: 評価結果
            - win_rate: 勝率
            - loss_rate: 敗率
            - draw_rate: 引き分け率
            - avg_moves: 平均手数
            - results: 対戦結果リスト
    """
    arena = Arena(verbose=verbose)
    results = arena.play_matches(
        player, opponent, num_games=num_games, alternate_colors=alternate_colors
    )

    wins = sum(1 for r in results if r.winner == 1)
    losses = sum(1 for r in results if r.winner == 2)
    draws = sum(1 for r in results if r.winner == 0)

    return {
        "win_rate": wins / num_games if num_games > 0 else 0,
        "loss_rate": losses / num_games if num_games > 0 else 0,
        "draw_rate": draws / num_games if num_games > 0 else 0,
        "avg_moves": sum(r.num_moves for r in results) / num_games if num_games > 0 else 0,
        "results": results,
    }
