import secrets
from typing import Optional
import numpy as np

# Seeds are drawn from [0, 2^32), numpy's legacy seed range
MAX_SEED = 2**32

def generate_seed() -> int:
    return secrets.randbelow(MAX_SEED)

def ensure_seed(seed: Optional[int] = None) -> int:
    """Returns the given seed, or a fresh one if it is None."""
    return seed if seed is not None else generate_seed()

def get_rng(seed: Optional[int] = None) -> np.random.Generator:
    """Seeded numpy Generator shared by the stochastic parts of the simulation."""
    return np.random.default_rng(ensure_seed(seed))
