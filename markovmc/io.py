"""
Reading and writing sampler output.

Density-of-states files hold one ``"center value"`` line per histogram
bin, in ascending bin order. Lines starting with ``#`` are comments.
"""

from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterable, Iterator, Optional, TextIO, Tuple, Union
import json
import logging
import sys

import numpy as np

logger = logging.getLogger(__name__)


@contextmanager
def open_output(path: Optional[Union[str, Path]] = None) -> Iterator[TextIO]:
    """
    Open a text stream for sampler output.

    Parameters
    ----------
    path : str or Path, optional
        Output file. None or ``"-"`` selects stdout, which is flushed but
        not closed.

    Yields
    ------
    TextIO
        Writable text stream, flushed and closed on every exit path.
    """
    if path is None or str(path) == '-':
        try:
            yield sys.stdout
        finally:
            sys.stdout.flush()
        return

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w') as f:
        yield f
    logger.info(f"Output written to {path}")


def write_density_of_states(
    stream: TextIO,
    pairs: Iterable[Tuple[float, float]]
):
    """
    Write ``(center, value)`` pairs, one line each.

    Parameters
    ----------
    stream : TextIO
        Destination stream.
    pairs : Iterable[Tuple[float, float]]
        Bin centers and log density of states in ascending order.
    """
    for center, value in pairs:
        stream.write(f"{center} {value}\n")


def read_density_of_states(path: Union[str, Path]) -> Tuple[np.ndarray, np.ndarray]:
    """
    Read a file written by :func:`write_density_of_states`.

    Returns
    -------
    Tuple[np.ndarray, np.ndarray]
        Bin centers and values.
    """
    data = np.loadtxt(path, comments='#', ndmin=2)
    if data.size == 0:
        return np.empty(0), np.empty(0)
    return data[:, 0], data[:, 1]


def write_json(path: Union[str, Path], payload: Any):
    """Write a JSON document, converting numpy scalars and arrays."""

    def convert(obj):
        if isinstance(obj, np.integer):
            return int(obj)
        if isinstance(obj, np.floating):
            return float(obj)
        if isinstance(obj, np.ndarray):
            return obj.tolist()
        raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")

    with open(path, 'w') as f:
        json.dump(payload, f, indent=2, default=convert)
    logger.info(f"Results saved to {path}")
