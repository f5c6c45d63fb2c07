"""対局速度・勝率のベンチマーク

- ランダムプレイヤー同士の対戦で1秒あたりの対局数（Games/sec）を計測する
- MCTSプレイヤーを各対戦相手と戦わせて勝率を計測する

使用方法:
    python benchmark.py --size 3 --games 1000
"""

import argparse
import time

import numpy as np

from tictactoe.game.board import Rules
from tictactoe.eval.players import MCTSPlayer, PerfectPlayer, RandomPlayer
from tictactoe.eval.arena import Arena, evaluate_player


def benchmark_games(rules: Rules, rng: np.random.Generator, num_games: int = 1000) -> None:
    """ランダム同士の対局速度を計測

    Args:
        rules: 勝敗判定ルール
        rng: 乱数生成器
        num_games: 対局数
    """
    print(f"=== {rules.size}x{rules.size} 三目並べ ベンチマーク ===")
    print(f"対局数: {num_games:,}")
    print()

    arena = Arena(verbose=False)
    player1 = RandomPlayer(rules, rng, name="Random-1")
    player2 = RandomPlayer(rules, rng, name="Random-2")

    wins = {1: 0, 2: 0, 0: 0}
    total_moves = 0

    start_time = time.perf_counter()

    for _ in range(num_games):
        result = arena.play_game(player1, player2)
        wins[result.winner] += 1
        total_moves += result.num_moves

    elapsed_time = time.perf_counter() - start_time

    # 結果表示
    print("=== 結果 ===")
    print(f"経過時間:     {elapsed_time:.2f} 秒")
    print(f"対局速度:     {num_games / elapsed_time:,.0f} games/sec")
    print(f"着手速度:     {total_moves / elapsed_time:,.0f} moves/sec")
    print(f"平均手数:     {total_moves / num_games:.1f} 手/局")
    print()
    print("=== 勝敗統計 ===")
    print(f"先手勝ち:     {wins[1]:,} ({100*wins[1]/num_games:.1f}%)")
    print(f"後手勝ち:     {wins[2]:,} ({100*wins[2]/num_games:.1f}%)")
    print(f"引き分け:     {wins[0]:,} ({100*wins[0]/num_games:.1f}%)")
    print()


def benchmark_mcts(
    rules: Rules,
    rng: np.random.Generator,
    num_games: int = 100,
    num_simulations: int = 1,
) -> None:
    """MCTSの対戦相手別勝率を計測

    Args:
        rules: 勝敗判定ルール
        rng: 乱数生成器
        num_games: 各対戦相手とのゲーム数
        num_simulations: 1手あたりの探索サイクル数
    """
    print(f"=== MCTS ({num_simulations} cycles/move) ===")

    ai_player = MCTSPlayer(rules, rng, num_simulations=num_simulations)
    opponents = [
        RandomPlayer(rules, rng),
        PerfectPlayer(rules, rng),
    ]

    for opponent in opponents:
        start = time.perf_counter()
        eval_result = evaluate_player(ai_player, opponent, num_games=num_games, verbose=False)
        elapsed = time.perf_counter() - start

        print(f"vs {opponent.name:10s}: "
              f"win {eval_result['win_rate'] * 100:5.1f}% / "
              f"draw {eval_result['draw_rate'] * 100:5.1f}% / "
              f"loss {eval_result['loss_rate'] * 100:5.1f}% "
              f"({num_games / elapsed:,.0f} games/sec)")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Tic-Tac-Toe MCTS benchmark")
    parser.add_argument('--size', type=int, default=3)
    parser.add_argument('--games', type=int, default=1000)
    parser.add_argument('--simulations', type=int, default=1)
    parser.add_argument('--seed', type=int, default=0)
    args = parser.parse_args()

    rules = Rules(args.size)
    rng = np.random.default_rng(args.seed)

    benchmark_games(rules, rng, args.games)
    benchmark_mcts(rules, rng, max(1, args.games // 10), args.simulations)
