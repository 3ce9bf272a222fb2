"""Train the classification engine on synthetic traffic and report detection metrics."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

from benchmarks.synthetic import synthetic_traffic
from thronion.control.decision import CircuitAction
from thronion.engine import ClassificationEngine
from thronion.utils.config import EngineConfig, load_config

logger = logging.getLogger("thronion.simulate")


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--train-size", type=int, default=200, help="Number of labelled training circuits")
    parser.add_argument("--eval-size", type=int, default=200, help="Number of evaluation circuits")
    parser.add_argument("--attack-ratio", type=float, default=0.3, help="Fraction of attack circuits")
    parser.add_argument("--seed", type=int, default=0, help="Random seed for traffic generation")
    parser.add_argument(
        "--maintenance-every",
        type=int,
        default=50,
        help="Run the maintenance hook after this many evaluated circuits (0 disables)",
    )
    parser.add_argument(
        "--backend",
        choices=("numpy", "torch"),
        default=None,
        help="Override the scoring backend from the configuration",
    )
    parser.add_argument("--config", type=Path, default=None, help="Optional YAML configuration file")
    parser.add_argument(
        "--save-regions",
        type=Path,
        default=None,
        help="Optional path to write the learned regions as JSON",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Optional path to write the JSON report (defaults to stdout)",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def _build_config(args: argparse.Namespace) -> EngineConfig:
    config = load_config(args.config) if args.config is not None else EngineConfig()
    if args.backend is not None and args.backend != config.scoring_backend:
        payload = config.to_dict()
        payload["scoring_backend"] = args.backend
        config = EngineConfig.from_mapping(payload)
    return config


def _detection_metrics(tp: int, fp: int, tn: int, fn: int) -> Dict[str, float]:
    total = tp + fp + tn + fn
    precision = tp / (tp + fp) if tp + fp else 0.0
    recall = tp / (tp + fn) if tp + fn else 0.0
    return {
        "true_positives": tp,
        "false_positives": fp,
        "true_negatives": tn,
        "false_negatives": fn,
        "accuracy": (tp + tn) / total if total else 0.0,
        "precision": precision,
        "recall": recall,
        "false_positive_rate": fp / (fp + tn) if fp + tn else 0.0,
    }


def main(argv: Optional[Sequence[str]] = None) -> Dict[str, Any]:
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = _build_config(args)
    engine = ClassificationEngine(config)

    training = synthetic_traffic(args.train_size, attack_ratio=args.attack_ratio, seed=args.seed)
    outcomes: Dict[str, int] = {}
    for circuit, label in training:
        result = engine.learn(circuit, label)
        outcomes[result.outcome.value] = outcomes.get(result.outcome.value, 0) + 1
    logger.info("learned %d circuits into %d regions", len(training), len(engine.store))

    evaluation = synthetic_traffic(
        args.eval_size,
        attack_ratio=args.attack_ratio,
        seed=args.seed + 1,
        start_id=len(training) + 1,
    )
    tp = fp = tn = fn = 0
    maintenance_runs = 0
    for index, (circuit, label) in enumerate(evaluation, start=1):
        verdict = engine.process(circuit)
        absorbed = verdict.action is CircuitAction.ABSORB
        if absorbed and label:
            tp += 1
        elif absorbed:
            fp += 1
        elif label:
            fn += 1
        else:
            tn += 1
        if args.maintenance_every > 0 and index % args.maintenance_every == 0:
            engine.maintenance()
            maintenance_runs += 1

    if args.save_regions is not None:
        engine.save_regions(args.save_regions)

    report: Dict[str, Any] = {
        "config": config.to_dict(),
        "training": {"circuits": len(training), "outcomes": outcomes},
        "evaluation": {
            "circuits": len(evaluation),
            "maintenance_runs": maintenance_runs,
            **_detection_metrics(tp, fp, tn, fn),
        },
        "stats": engine.stats().as_dict(),
    }

    text = json.dumps(report, indent=2)
    if args.output is not None:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(text, encoding="utf-8")
    else:
        print(text)
    return report


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    main()
