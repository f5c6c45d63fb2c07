"""
N×N 三目並べ MCTS - CLIエントリポイント

対戦・評価用のコマンドラインインターフェース
"""

import argparse
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

import numpy as np
import yaml

from tictactoe.game.board import Rules
from tictactoe.eval.players import PLAYER_KINDS, create_player
from tictactoe.eval.arena import Arena, evaluate_player

DEFAULT_CONFIG = {
    'game': {'board_size': 3},
    'system': {'seed': None},
    'players': {'player1': 'mcts', 'player2': 'random'},
    'mcts': {'num_simulations': 1, 'center_first': False},
    'arena': {'num_games': 20, 'alternate_colors': True},
}


def load_config(config_path: Optional[str]) -> dict:
    """
    YAML設定ファイルを読み込む

    ファイルに無い項目は DEFAULT_CONFIG で補う

    Args:
        config_path: 設定ファイルのパス（None なら既定値のみ）

    Returns:
        dict: 設定辞書
    """
    config = {section: dict(values) for section, values in DEFAULT_CONFIG.items()}

    if config_path is None:
        return config

    with open(config_path, 'r', encoding='utf-8') as f:
        loaded = yaml.safe_load(f) or {}

    for section, values in loaded.items():
        if not isinstance(values, dict):
            raise ValueError(f"Config section '{section}' must be a mapping")
        config.setdefault(section, {}).update(values)

    return config


def setup_rng(seed: Optional[int]) -> np.random.Generator:
    """
    乱数生成器を作成

    プロセス開始時に一度だけ呼び、以降は同じ生成器を使い回す

    Args:
        seed: シード値（None なら OS のエントロピーから生成）

    Returns:
        np.random.Generator: 乱数生成器
    """
    if seed is None:
        seed = int(np.random.SeedSequence().entropy % (2 ** 32))

    print(f"seed = {seed}")
    return np.random.default_rng(seed)


def apply_overrides(config: dict, args) -> dict:
    """コマンドライン引数で設定を上書き"""
    if args.size is not None:
        config['game']['board_size'] = args.size
    if args.seed is not None:
        config['system']['seed'] = args.seed
    if args.player1 is not None:
        config['players']['player1'] = args.player1
    if args.player2 is not None:
        config['players']['player2'] = args.player2
    if args.simulations is not None:
        config['mcts']['num_simulations'] = args.simulations
    if args.center_first:
        config['mcts']['center_first'] = True
    return config


def build_players(config: dict, rng: np.random.Generator) -> tuple:
    """
    設定からプレイヤーを2人作成

    Returns:
        tuple: (rules, player1, player2)
    """
    rules = Rules(config['game']['board_size'])
    mcts_options = {
        'num_simulations': config['mcts']['num_simulations'],
        'center_first': config['mcts']['center_first'],
    }

    players = []
    for key in ('player1', 'player2'):
        kind = config['players'][key]
        players.append(create_player(
            kind, rules, rng, name=f"{kind}-{key[-1]}", **mcts_options
        ))

    return rules, players[0], players[1]


def match_command(args):
    """
    対戦コマンド（1局）

    Args:
        args: argparseの引数
    """
    config = apply_overrides(load_config(args.config), args)
    rng = setup_rng(config['system']['seed'])
    _, player1, player2 = build_players(config, rng)

    arena = Arena(verbose=args.verbose)
    result = arena.play_game(player1, player2, starting_player=1)

    print(f"winner = {result.winner}")
    player1.dump()


def eval_command(args):
    """
    評価コマンド（複数局）

    Args:
        args: argparseの引数
    """
    config = apply_overrides(load_config(args.config), args)
    if args.games is not None:
        config['arena']['num_games'] = args.games

    rng = setup_rng(config['system']['seed'])
    _, player1, player2 = build_players(config, rng)
    num_games = config['arena']['num_games']

    print("=" * 70)
    print("Evaluation")
    print("=" * 70)
    print(f"\nBoard size: {config['game']['board_size']}")
    print(f"{player1.name} vs {player2.name}")
    print(f"Games: {num_games}")

    eval_result = evaluate_player(
        player=player1,
        opponent=player2,
        num_games=num_games,
        verbose=args.verbose,
        alternate_colors=config['arena']['alternate_colors'],
    )

    print(f"\nResult {player1.name} vs {player2.name}:")
    print(f"  Win Rate:  {eval_result['win_rate'] * 100:.1f}%")
    print(f"  Loss Rate: {eval_result['loss_rate'] * 100:.1f}%")
    print(f"  Draw Rate: {eval_result['draw_rate'] * 100:.1f}%")
    print(f"  Avg Moves: {eval_result['avg_moves']:.1f}")

    # 結果を保存（オプション）
    if args.save_results:
        output_dir = Path("data/eval")
        output_dir.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        result_file = output_dir / f"eval_{timestamp}.json"

        eval_data = {
            "timestamp": datetime.now().isoformat(),
            "config": config,
            "results": {
                key: eval_result[key]
                for key in ("win_rate", "loss_rate", "draw_rate", "avg_moves")
            },
        }

        with open(result_file, "w") as f:
            json.dump(eval_data, f, indent=2)

        print(f"\nResults saved to: {result_file}")


def add_common_arguments(parser: argparse.ArgumentParser):
    """サブコマンド共通の引数"""
    parser.add_argument(
        '--config',
        type=str,
        default=None,
        help='Path to YAML config file (e.g. configs/default.yaml)'
    )
    parser.add_argument('--size', type=int, default=None, help='Board size N')
    parser.add_argument('--seed', type=int, default=None, help='Random seed')
    parser.add_argument(
        '--player1', choices=PLAYER_KINDS, default=None, help='Kind of player 1 (moves first)'
    )
    parser.add_argument(
        '--player2', choices=PLAYER_KINDS, default=None, help='Kind of player 2'
    )
    parser.add_argument(
        '--simulations', type=int, default=None, help='MCTS search cycles per move'
    )
    parser.add_argument(
        '--center-first',
        action='store_true',
        help='MCTS takes the center cell without searching when it is vacant'
    )
    parser.add_argument('--verbose', action='store_true', help='Show each move')
    parser.add_argument('--debug', action='store_true', help='Enable debug logging')


def main(argv=None):
    """メインエントリポイント"""
    parser = argparse.ArgumentParser(description="N×N Tic-Tac-Toe MCTS - CLI")

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # Match コマンド
    match_parser = subparsers.add_parser('match', help='Play a single game')
    add_common_arguments(match_parser)
    match_parser.set_defaults(func=match_command)

    # Eval コマンド
    eval_parser = subparsers.add_parser('eval', help='Play several games and report rates')
    add_common_arguments(eval_parser)
    eval_parser.add_argument(
        '--games', type=int, default=None, help='Number of games (default: 20)'
    )
    eval_parser.add_argument(
        '--save-results',
        action='store_true',
        help='Save evaluation results to JSON file'
    )
    eval_parser.set_defaults(func=eval_command)

    args = parser.parse_args(argv)

    if hasattr(args, 'func'):
        logging.basicConfig(
            level=logging.DEBUG if args.debug else logging.WARNING,
            format="%(name)s: %(message)s",
        )
        args.func(args)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
