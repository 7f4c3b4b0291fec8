'''
.. Common functions and data

.. Copyright (c) 2015-2016 Richard Plevin
   See the https://opensource.org/licenses/MIT for license details.
'''
import math

import numpy as np

# Defaults for the numerical thresholds; see MiniCAM.TinyNumber and MiniCAM.SmallNumber
TINY_NUMBER  = 1e-10
SMALL_NUMBER = 1e-6

def isValidNumber(value):
    """
    Check that a value is a finite number, i.e., not NaN or +/- infinity.

    :param value: (float) the value to test
    :return: (bool) True if the value is finite
    """
    try:
        return math.isfinite(value)
    except TypeError:
        return False

def replaceSpaces(s):
    """
    Replace spaces with underscores so a name can be used as a graph node id.
    """
    return s.replace(' ', '_')

def fillForward(values, specified):
    """
    Copy the most recent specified value into each following period that
    was not specified. Periods before the first specified value are unchanged.

    :param values: (numpy.ndarray) per-period values, modified in place
    :param specified: (numpy.ndarray of bool) True for periods with given values
    :return: the `values` array
    """
    last = None
    for period in range(len(values)):
        if specified[period]:
            last = values[period]
        elif last is not None:
            values[period] = last

    return values

def periodArray(maxper, fill=0.0, dtype=float):
    """
    Allocate a fixed-size per-period array.
    """
    return np.full(maxper, fill, dtype=dtype)

def addToMap(target, source):
    """
    Add the values in dict `source` to the values with the same keys in `target`.
    """
    for key, value in source.items():
        target[key] = target.get(key, 0.0) + value

    return target
