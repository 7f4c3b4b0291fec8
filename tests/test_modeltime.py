import numpy as np
import pytest

from pyminicam.error import PyminicamException
from pyminicam.modeltime import Modeltime
from pyminicam.utils import fillForward, isValidNumber, periodArray, addToMap, replaceSpaces

@pytest.fixture(scope="module")
def modeltime():
    return Modeltime(1975, 2095, 15)

def test_periods(modeltime):
    assert modeltime.getmaxper() == 9
    assert modeltime.getper_to_yr(0) == 1975
    assert modeltime.getper_to_yr(8) == 2095
    assert modeltime.getyr_to_per(1990) == 1
    assert modeltime.getyr_to_per('2005') == 2

def test_bad_year(modeltime):
    with pytest.raises(PyminicamException):
        modeltime.getyr_to_per(1991)

    assert modeltime.getyr_to_per(1991, raiseError=False) is None

def test_bad_modeltime():
    with pytest.raises(PyminicamException):
        Modeltime(2000, 1990, 15)

    with pytest.raises(PyminicamException):
        Modeltime(1975, 2095, 0)

def test_fill_forward():
    values = np.array([0.0, 2.0, 0.0, 5.0, 0.0])
    specified = np.array([False, True, False, True, False])
    fillForward(values, specified)
    assert list(values) == [0.0, 2.0, 2.0, 5.0, 5.0]

def test_period_array():
    arr = periodArray(4, fill=1.5)
    assert arr.shape == (4,)
    assert all(arr == 1.5)

@pytest.mark.parametrize("value, expected",
                         [(1.0, True),
                          (0, True),
                          (float('nan'), False),
                          (float('inf'), False),
                          (-float('inf'), False),
                          ('abc', False)])
def test_valid_number(value, expected):
    assert isValidNumber(value) == expected

def test_misc():
    assert addToMap({'a': 1.0}, {'a': 2.0, 'b': 3.0}) == {'a': 3.0, 'b': 3.0}
    assert replaceSpaces('natural gas') == 'natural_gas'
