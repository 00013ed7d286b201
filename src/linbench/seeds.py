from __future__ import annotations

from typing import Optional, Tuple

import numpy as np


def make_rngs(seed: Optional[int] = None) -> Tuple[int, np.random.Generator, np.random.Generator]:
    """Spawn independent data and init generators from one SeedSequence.

    Returns ``(entropy, data_rng, init_rng)``. ``entropy`` equals ``seed`` when one
    is given; for unseeded runs it is the fresh OS entropy, so the run can still
    be replayed by passing it back as the seed.
    """
    ss = np.random.SeedSequence(seed)
    data_ss, init_ss = ss.spawn(2)
    return int(ss.entropy), np.random.default_rng(data_ss), np.random.default_rng(init_ss)


def as_generator(rng_seed: Optional[int] = None, rng: Optional[np.random.Generator] = None) -> np.random.Generator:
    if rng is not None:
        return rng
    return np.random.default_rng(rng_seed)


def init_generator(rng_seed: Optional[int] = None, rng: Optional[np.random.Generator] = None) -> np.random.Generator:
    """Generator for trainer initialisation and minibatches.

    A bare ``rng_seed`` maps to the init child of ``make_rngs``, never to
    ``default_rng(rng_seed)``: the data generator draws the ground truth from
    that stream, and sharing it would start the fit at the answer.
    """
    if rng is not None:
        return rng
    return make_rngs(rng_seed)[2]


__all__ = ["make_rngs", "as_generator", "init_generator"]
