"""

** Paper **
Title: A NEW COEFFICIENT OF CORRELATION
Author: SOURAV CHATTERJEE
URL: https://arxiv.org/pdf/1909.10140.pdf

** Python Code **
Copyright: Apache 2.0

Chatterjee's xi only needs to compare elements, never to do arithmetic on them,
so every function below accepts sequences of any totally ordered type
(numbers, strings, dates, tuples...), not only floats.
"""

import logging
from typing import Any, Sequence, Tuple

import numpy as np
import numpy.typing as npt
import pandas as pd

logger = logging.getLogger(__name__)


def xicor(x: Sequence[Any], y: Sequence[Any]) -> float:
    """
    Computes Sourav Chatterjee's xi correlation coefficient, i.e. the degree to which y is a
    (possibly non-monotonic) function of x. Ties in either sequence are handled as in
    Chatterjee (2021), Section 1.

    For a finite sample of size n the maximum value is (n - 2) / (n + 1), even under
    perfect dependence; see `xicor_norm` for a version rescaled to 1.

    :param x: sample of predictor variable (1D sequence of orderable values)
    :param y: sample of response variable (1D sequence of orderable values, same length as x)
    :return: xi coefficient (float); nan when all y values are tied or len(x) < 2

    Example:
        >>> x = list(range(47))
        >>> xicor(x, [v * v for v in x])
        0.9375

    Reference:
        [1] Chatterjee S (2021). A new coefficient of correlation. JASA 116:536, 2009-2022, DOI: 10.1080/01621459.2020.1758115
    """

    x, y = _to_array(x), _to_array(y)
    _check_inputs(x, y)
    return _xi(x, y)


def xicor_norm(x: Sequence[Any], y: Sequence[Any]) -> float:
    """
    Computes xi rescaled by its finite-sample maximum (n - 2) / (n + 1), so that perfectly
    dependent data yields exactly 1. Meaningless for n <= 2, where the rescaling factor is
    zero or negative and the result is returned as is (nan, inf or sign-flipped).

    :param x: sample of predictor variable (1D sequence of orderable values)
    :param y: sample of response variable (1D sequence of orderable values, same length as x)
    :return: normalized xi coefficient (float)
    """
    x, y = _to_array(x), _to_array(y)
    _check_inputs(x, y)
    return _normalize(_xi(x, y), len(x))


def xicorf(x: npt.ArrayLike, y: npt.ArrayLike) -> float:
    """
    Float version of `xicor`: both samples are converted to float64 before ranking.
    Infinities are ordinary values; nan has no place in the ordering and is rejected.

    :param x: sample of predictor variable (1D array, float)
    :param y: sample of response variable (1D array, float, same length as x)
    :return: xi coefficient (float)
    """
    x, y = _to_array(x, dtype=float), _to_array(y, dtype=float)
    _check_inputs(x, y)
    return _xi(x, y)


def xicorf_norm(x: npt.ArrayLike, y: npt.ArrayLike) -> float:
    """
    Float version of `xicor_norm`.

    :param x: sample of predictor variable (1D array, float)
    :param y: sample of response variable (1D array, float, same length as x)
    :return: normalized xi coefficient (float)
    """
    x, y = _to_array(x, dtype=float), _to_array(y, dtype=float)
    _check_inputs(x, y)
    return _normalize(_xi(x, y), len(x))


def xicor_matrix(df: pd.DataFrame, norm: bool = False) -> pd.DataFrame:
    """
    Computes xi for every ordered pair of columns in a dataframe. Entry [a, b] measures how
    much column b depends on column a, so the result is generally not symmetric.

    :param df: pandas dataframe, one sample per column
    :param norm: use the normalized coefficient (`xicor_norm`) instead of `xicor`
    :return: square dataframe indexed and columned by the column names of df
    """
    if not isinstance(df, pd.DataFrame):
        raise TypeError('expected a pandas DataFrame, got ' + type(df).__name__)

    coefficient = xicor_norm if norm else xicor
    names = list(df.columns)
    columns = [df.iloc[:, j] for j in range(len(names))]
    logger.debug('computing %d x %d xi matrix over %d rows', len(names), len(names), len(df))
    values = [[coefficient(a, b) for b in columns] for a in columns]
    return pd.DataFrame(values, index=names, columns=names)


###############################################
# Auxiliary functions #########################
###############################################

def _to_array(z: Any, dtype: Any = None) -> np.ndarray:
    if isinstance(getattr(z, 'dtype', None), pd.CategoricalDtype):
        return _categorical_codes(z, dtype)
    if not hasattr(z, '__array__'):
        z = list(z)
        try:
            arr = np.asarray(z, dtype=dtype)
        except ValueError:
            if dtype is not None:
                raise
            arr = None
        if dtype is None and (arr is None or arr.ndim > 1 or _is_coerced_to_text(arr, z)):
            # elements must stay whole: tuples as tuples, and mixed types uncoerced
            arr = np.fromiter(z, dtype=object, count=len(z))
    else:
        arr = np.asarray(z, dtype=dtype)
    if arr.ndim != 1:
        raise ValueError('expected a one-dimensional sample, got ' + str(arr.ndim) + ' dimensions')
    return arr


def _is_coerced_to_text(arr: np.ndarray, z: list) -> bool:
    if arr.dtype.kind not in 'US':
        return False
    return not all(isinstance(v, (str, bytes)) for v in z)


def _categorical_codes(z: Any, dtype: Any = None) -> np.ndarray:
    categorical = pd.Categorical(z)
    if not categorical.ordered:
        raise ValueError('categorical samples must be ordered to be ranked')
    codes = np.asarray(categorical.codes)
    if np.any(codes < 0):
        raise ValueError('categorical sample contains missing values')
    return codes.astype(dtype) if dtype is not None else codes


def _check_inputs(x: np.ndarray, y: np.ndarray) -> None:
    if len(x) != len(y):
        raise ValueError('the two arrays have different lengths: ' +
                         str(len(x)) + ' vs ' + str(len(y)))
    for name, z in (('x', x), ('y', y)):
        if z.dtype == object and np.any(pd.isna(z)):
            raise ValueError('sample ' + name + ' contains missing values such as None')
        # an element unequal to itself (nan, NaT) cannot be placed in a total order
        if np.any(z != z):
            raise ValueError('sample ' + name + ' contains incomparable values such as nan')


def _xi(x: np.ndarray, y: np.ndarray) -> float:
    rank_y, anti_rank_y = _get_ranks(_permute(y, _argsort(x)))
    numerator = _get_numerator(rank_y)
    denominator = _get_denominator(anti_rank_y)
    with np.errstate(divide='ignore', invalid='ignore'):
        xi = float(1 - numerator / denominator)
    logger.debug('xi = %s for n = %d', xi, len(x))
    return xi


def _normalize(xi: float, n: int) -> float:
    with np.errstate(divide='ignore', invalid='ignore'):
        return float(np.float64(xi) / ((n - 2) / (n + 1)))


def _argsort(z: np.ndarray) -> npt.NDArray[int]:
    return np.argsort(z, kind='stable')


def _permute(z: np.ndarray, idx: npt.NDArray[int]) -> np.ndarray:
    return z[idx]


def _cumulative_lte(z: np.ndarray) -> npt.NDArray[int]:
    # z must be sorted; a tie group shares the rank of its rightmost member
    n = len(z)
    counts = np.arange(1, n + 1)
    if n == 0:
        return counts
    is_last = np.append(z[:-1] != z[1:], True)
    return np.minimum.accumulate(np.where(is_last, counts, n + 1)[::-1])[::-1]


def _cumulative_gte(z: np.ndarray) -> npt.NDArray[int]:
    # z must be sorted; a tie group shares the count of its leftmost member
    n = len(z)
    counts = np.arange(n, 0, -1)
    if n == 0:
        return counts
    is_first = np.insert(z[1:] != z[:-1], 0, True)
    return np.minimum.accumulate(np.where(is_first, counts, n + 1))


def _get_ranks(z: np.ndarray) -> Tuple[npt.NDArray[int], npt.NDArray[int]]:
    """
    For each element of z, counts the elements of z that are <= it (rank) and >= it (anti-rank),
    both returned in the original order of z
    """
    idx = _argsort(z)
    z_sorted = _permute(z, idx)
    rank = np.empty(len(z), dtype=int)
    anti_rank = np.empty(len(z), dtype=int)
    rank[idx] = _cumulative_lte(z_sorted)
    anti_rank[idx] = _cumulative_gte(z_sorted)
    return rank, anti_rank


def _get_numerator(rank_y: npt.NDArray[int]) -> float:
    return len(rank_y) * float(np.sum(np.abs(np.diff(rank_y))))


def _get_denominator(anti_rank_y: npt.NDArray[int]) -> np.float64:
    n = len(anti_rank_y)
    anti_rank_y = anti_rank_y.astype(float)
    return 2 * np.sum(anti_rank_y * (n - anti_rank_y))
