"""End-to-end demo: learn an INTRODUCE2 flood, then screen live circuits."""

from __future__ import annotations

from pathlib import Path
from pprint import pprint
from tempfile import TemporaryDirectory
from typing import Any, Dict, Optional

import sys

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from thronion import CircuitMonitor, ClassificationEngine, EngineConfig

from benchmarks.synthetic import attack_circuit, benign_circuit


def run_demo(storage_dir: Optional[Path] = None) -> Dict[str, Any]:
    """Train on a handful of circuits, screen a mixed batch and persist regions."""

    engine = ClassificationEngine(EngineConfig(max_regions=32, optimization_interval=25))
    monitor = CircuitMonitor(max_circuits=64)

    for circuit_id in range(1, 11):
        engine.learn(benign_circuit(circuit_id, seed=7), False)
        engine.learn(attack_circuit(100 + circuit_id, seed=7), True)

    verdicts = []
    for circuit_id in range(200, 210):
        circuit = attack_circuit(circuit_id, seed=11) if circuit_id % 2 else benign_circuit(circuit_id, seed=11)
        monitor.track(circuit)
        verdicts.append(engine.process(circuit).as_dict())

    profile = engine.profile(benign_circuit(300, seed=3))
    maintenance = engine.maintenance()

    def _persist(directory: Path) -> Dict[str, Any]:
        path = directory / "regions.json"
        saved = engine.save_regions(path)
        restored = ClassificationEngine(engine.config)
        loaded = restored.load_regions(path)
        return {"path": str(path), "saved": saved, "loaded": loaded}

    if storage_dir is None:
        with TemporaryDirectory() as tmp:
            persisted = _persist(Path(tmp))
    else:
        persisted = _persist(Path(storage_dir))

    return {
        "verdicts": verdicts,
        "tracked_circuits": len(monitor),
        "profile": {
            "signature_length": int(profile.signature.size),
            "dominant_frequency": profile.spectrum.dominant_frequency(),
            "timing_entropy": profile.timing_entropy,
            "classical": profile.classical.as_dict(),
        },
        "maintenance": maintenance.as_dict(),
        "persistence": persisted,
        "stats": engine.stats().as_dict(),
    }


def main() -> None:
    """CLI entry point that prints demo artefacts."""

    summary = run_demo()
    print("Verdicts:")
    for verdict in summary["verdicts"]:
        print(f"  circuit {verdict['circuit_id']}: {verdict['action']} (score={verdict['score']:.3f})")
    print("\nProfile:")
    pprint(summary["profile"])
    print("\nStats:")
    pprint(summary["stats"])


if __name__ == "__main__":
    main()
