"""
N×N 三目並べ MCTS

UCB1方式のモンテカルロ木探索で N×N の三目並べを対局する
"""
