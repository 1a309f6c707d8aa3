"""Functions for seeding and accessing the laser-vaccine random number generators.

Using the seed() function here and the pseudo-random number generators (PRNGs) returned from prng() and stream()
in simulation code will guarantee that the same random number streams are generated during simulation runs using
the same seed value (assuming no changes to code which add or remove PRNG calls or change the number of random
draws requested). This is important for reproducibility and debugging purposes.

Named streams let independent mechanisms, e.g., two vaccines rolled out side by side, draw random numbers without
perturbing each other's sequences: stream("vaccine_0") is the same sequence whether or not "vaccine_1" exists.
"""

import zlib
from datetime import datetime

import numpy as np

__all__ = ["get_seed", "prng", "seed", "stream"]

_seed: np.uint32 = None
_prng: np.random.Generator = None


def seed(seed) -> np.random.Generator:
    """
    Initialize the pseudo-random number generators with a given seed.

    This function sets the global pseudo-random number generator (_prng)
    to a new instance of numpy's default random generator initialized
    with the provided seed. The seed is also the default base seed for
    stream().

    Parameters:

        seed (int): The seed value to initialize the random number generators.

    Returns:

        numpy.random.Generator: The initialized pseudo-random number generator.
    """

    global _seed
    global _prng
    _seed = np.uint32(seed)
    _prng = np.random.default_rng(_seed)

    return _prng


def get_seed() -> np.uint32:
    """
    Return the seed used to initialize the pseudo-random number generators.

    Returns:

        uint32: The seed value, or None if seed() has not been called.
    """

    return _seed


def prng() -> np.random.Generator:
    """Return the global (to laser-vaccine) pseudo-random number generator, seeding from the clock if necessary."""
    return _prng if _prng is not None else seed(np.uint32(datetime.now(tz=None).microsecond))  # noqa: DTZ005


def stream(name: str, base_seed=None) -> np.random.Generator:
    """
    Return a new generator for the named stream.

    The generator depends only on the base seed and the name, so the same (seed, name) pair always produces
    the same sequence and different names produce independent sequences.

    Parameters:

        name (str): The name of the stream, e.g., "vaccine" or "vaccine_1".
        base_seed (int, optional): The seed to derive the stream from. Defaults to the global seed (see seed()).

    Returns:

        numpy.random.Generator: The stream's generator.
    """

    if base_seed is None:
        if _seed is None:
            prng()
        base_seed = _seed

    sequence = np.random.SeedSequence(entropy=int(base_seed), spawn_key=(zlib.crc32(name.encode("utf-8")),))

    return np.random.default_rng(sequence)
