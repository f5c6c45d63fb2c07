"""N×N 三目並べ MCTS のインストールスクリプト

使用方法:
    pip install -e .[test]
"""

from setuptools import find_packages, setup

setup(
    name="tictactoe-mcts",
    version="0.1.0",
    description="N×N tic-tac-toe played by Monte Carlo Tree Search (UCB1)",
    packages=find_packages(include=["tictactoe", "tictactoe.*"]),
    py_modules=["main"],
    python_requires=">=3.8",
    install_requires=[
        "numpy",
        "PyYAML",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "tictactoe-mcts=main:main",
        ],
    },
)
