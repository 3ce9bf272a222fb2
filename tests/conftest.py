from fixtures.circuits import (  # noqa: F401
    attack_sample,
    benign_sample,
    labelled_traffic,
    small_config,
)
