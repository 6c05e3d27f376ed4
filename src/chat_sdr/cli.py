"""Replay a text file into the transition-memory region and report accuracy.

Usage (from project root):
    chat-sdr --input data/hello.txt --config configs/small_text.yaml --epochs 10 --log
    python -m chat_sdr.cli --list-configs
"""
from __future__ import annotations

import argparse
import logging
from typing import Sequence

from tqdm import tqdm

from chat_sdr.config import AppConfig, TextMode, list_config_files
from chat_sdr.errors import ChatSdrError
from chat_sdr.runtime.text_runtime import TextRuntime, build_runtime

log = logging.getLogger(__name__)


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--input", type=str, default=None, help="Path to a text file to feed to the model.")
    parser.add_argument("--config", type=str, default=None, help="Path to a YAML config file (see configs/).")
    parser.add_argument("--steps", type=int, default=-1, help="Number of input steps (default: whole text x epochs).")
    parser.add_argument("--epochs", type=int, default=1, help="Number of passes through the text.")
    parser.add_argument("--log", action="store_true", help="Log every step plus ~20 progress lines (epoch, accuracy, context).")
    parser.add_argument("--no-progress", action="store_true", help="Disable the progress bar.")
    parser.add_argument("--verbose", action="store_true", help="Enable INFO logging.")
    parser.add_argument(
        "--list-configs",
        nargs="?",
        const="configs",
        default=None,
        metavar="DIR",
        help="List available YAML configs in DIR (default: configs/) and exit.",
    )
    return parser.parse_args(argv)


def _describe(runtime: TextRuntime, config: AppConfig) -> None:
    layers = len(config.region.layers)
    print(f"Config:  {config.name} ({layers} layer{'s' if layers > 1 else ''})")
    print(f"Input:   {runtime.chunker.path}")
    if config.text_mode is TextMode.WORD_ROWS:
        p = config.word_row_encoder_params()
        print("Mode:    word_rows")
        print(f"Encoder: rows={p.rows} cols={p.cols} letter_bits={p.letter_bits} alphabet_size={len(p.alphabet)}")
        print(f"Text:    {runtime.input_size()} words\n")
    else:
        p = config.scalar_encoder_params()
        print("Mode:    character")
        print(f"Encoder: n={p.n} w={p.w} range=[{p.min_val},{p.max_val}]")
        print(f"Text:    {runtime.input_size()} characters\n")


def run(runtime: TextRuntime, total_steps: int, log_progress: bool = False, progress: bool = True) -> float:
    """Step *runtime* one symbol at a time and return the final accuracy."""
    log_interval = max(1, total_steps // 20)
    for i in tqdm(range(total_steps), desc="Feeding", unit="sym", disable=not progress):
        runtime.step(1)
        if log_progress and (i % log_interval == 0 or i == total_steps - 1):
            log.info(
                "Step %d/%d  epoch=%d  accuracy=%.1f%%  | %s",
                i + 1,
                total_steps,
                runtime.input_epoch(),
                runtime.prediction_accuracy() * 100.0,
                runtime.input_context(),
            )
    return runtime.prediction_accuracy()


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    verbose = args.verbose or args.log
    logging.basicConfig(level=logging.INFO if verbose else logging.WARNING)

    if args.list_configs is not None:
        files = list_config_files(args.list_configs)
        print(f"Available YAML configs in {args.list_configs}/:")
        for name in files or ["(none found)"]:
            print(f"  {name}")
        return 0

    if not args.input or not args.config:
        log.error("--input and --config are required")
        return 2
    if args.steps < 0 and args.epochs <= 0:
        log.error("--epochs must be positive")
        return 2

    try:
        config = AppConfig.from_yaml(args.config)
        runtime = build_runtime(config, args.input)
    except ChatSdrError as exc:
        log.error("Error creating runtime: %s", exc)
        return 1

    _describe(runtime, config)
    total_steps = args.steps if args.steps >= 0 else runtime.input_size() * args.epochs
    runtime.set_log_text(args.log)

    accuracy = run(runtime, total_steps, log_progress=args.log, progress=not args.no_progress)

    print(f"\nDone. {total_steps} steps processed.")
    print(f"Final prediction accuracy: {accuracy * 100.0:.2f}%")
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entrypoint
    raise SystemExit(main())
