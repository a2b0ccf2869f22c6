"""CLI launcher for headless Q-learning runs."""

from __future__ import annotations

import argparse
import logging
import sys

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="q-snake",
        description="Q-Snake tabular Q-learning training and benchmarking.",
    )
    sub = parser.add_subparsers(dest="command", help="Available commands.")

    # --- train ---
    train_p = sub.add_parser("train", help="Run headless Q-learning episodes.")
    train_p.add_argument(
        "--config", type=str, default=None,
        help="Path to a JSON config file (flags override its values).",
    )
    train_p.add_argument("--episodes", type=int, default=None)
    train_p.add_argument("--training-episodes", type=int, default=None)
    train_p.add_argument("--grid-width", type=int, default=None)
    train_p.add_argument("--grid-height", type=int, default=None)
    train_p.add_argument(
        "--boundary", type=str, default=None, choices=["open", "walled"],
    )
    train_p.add_argument("--learning-rate", type=float, default=None)
    train_p.add_argument("--gamma", type=float, default=None)
    train_p.add_argument("--epsilon-start", type=float, default=None)
    train_p.add_argument("--epsilon-end", type=float, default=None)
    train_p.add_argument("--epsilon-decay", type=float, default=None)
    train_p.add_argument(
        "--epsilon-decay-mode", type=str, default=None,
        choices=["additive", "multiplicative"],
    )
    train_p.add_argument(
        "--state-encoding", type=str, default=None,
        choices=["position", "full"],
    )
    train_p.add_argument(
        "--fallback", type=str, default=None,
        choices=["any_safe", "path_to_food"],
    )
    train_p.add_argument("--max-steps", type=int, default=None)
    train_p.add_argument("--log-interval", type=int, default=None)
    train_p.add_argument("--seed", type=int, default=None)
    train_p.add_argument(
        "--save-config", type=str, default=None,
        help="Write the effective config to this JSON path.",
    )
    train_p.add_argument(
        "--show-board", action="store_true",
        help="Print the final board after training.",
    )

    # --- benchmark ---
    bench_p = sub.add_parser(
        "benchmark", help="Measure learning-loop throughput.",
    )
    bench_p.add_argument("--num-episodes", type=int, default=100)
    bench_p.add_argument("--grid-width", type=int, default=20)
    bench_p.add_argument("--grid-height", type=int, default=20)
    bench_p.add_argument("--max-steps", type=int, default=500)
    bench_p.add_argument(
        "--state-encoding", type=str, default="full",
        choices=["position", "full"],
    )

    return parser


def _run_train(args: argparse.Namespace) -> int:
    from q_snake.ai.config import TrainingConfig
    from q_snake.ai.train import Trainer

    config = (
        TrainingConfig.load(args.config)
        if args.config else TrainingConfig()
    )

    overrides: dict = {}
    flag_map = {
        "episodes": "max_episodes",
        "training_episodes": "max_training_episodes",
        "grid_width": "grid_width",
        "grid_height": "grid_height",
        "boundary": "boundary",
        "learning_rate": "learning_rate",
        "gamma": "gamma",
        "epsilon_start": "epsilon_start",
        "epsilon_end": "epsilon_end",
        "epsilon_decay": "epsilon_decay",
        "epsilon_decay_mode": "epsilon_decay_mode",
        "state_encoding": "state_encoding",
        "fallback": "fallback",
        "max_steps": "max_steps_per_episode",
        "log_interval": "log_interval",
        "seed": "seed",
    }
    for cli_name, cfg_name in flag_map.items():
        val = getattr(args, cli_name, None)
        if val is not None:
            overrides[cfg_name] = val

    if overrides:
        d = config.to_dict()
        d.update(overrides)
        config = TrainingConfig.from_dict(d)

    if args.save_config:
        config.save(args.save_config)

    trainer = Trainer(config)
    summary = trainer.train()
    print(  # noqa: T201
        f"Episodes: {summary['episodes']} | best score: {summary['best_score']} "
        f"| mean score (last 100): {summary['mean_score']:.2f} "
        f"| epsilon: {summary['epsilon']:.3f}"
    )
    if args.show_board:
        print(trainer.controller.render())  # noqa: T201
    return 0


def _run_benchmark(args: argparse.Namespace) -> int:
    from q_snake.ai.benchmark import benchmark_throughput

    result = benchmark_throughput(
        num_episodes=args.num_episodes,
        grid_width=args.grid_width,
        grid_height=args.grid_height,
        max_steps=args.max_steps,
        state_encoding=args.state_encoding,
    )
    print(result.summary())  # noqa: T201
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ``q-snake`` CLI."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    handlers = {
        "train": _run_train,
        "benchmark": _run_benchmark,
    }
    try:
        return handlers[args.command](args)
    except ValueError as exc:
        parser.error(str(exc))


if __name__ == "__main__":
    sys.exit(main())
