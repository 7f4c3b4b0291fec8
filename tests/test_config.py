import pytest
from .utils_for_testing import load_config_from_string
from pyminicam.config import setParam, setSection, getParam, getParamAsBoolean, getParamAsInt, getParamAsFloat
from pyminicam.context import ModelConfig
from pyminicam.error import ConfigFileError, PyminicamException
from pyminicam.modeltime import Modeltime

config_text_1 = """[test_section]
TestInteger = 123
TestFloat = 456.789
TestBoolean = yes
TestString = something that
    includes a newline
MiniCAM.MaxIterations = 50
MiniCAM.CalibrationActive = False
MiniCAM.EndYear = 2020
"""

def test_get_param():
    load_config_from_string(config_text_1)

    section = 'test_section'
    setSection(section)

    assert getParam("TestString") == "something that\nincludes a newline"

    assert getParamAsFloat('TestFloat') == 456.789
    assert getParamAsInt('TestInteger') == 123
    assert getParamAsBoolean('TestBoolean') == True

    with pytest.raises(TypeError):
        assert setParam('TestInteger', 123) # values must be strings


@pytest.mark.parametrize("value, expected",
                         [('yes', True),
                          ('1', True),
                          ('TRUE', True),
                          ('No', False),
                          ('0', False),
                          ('FaLsE', False)])
def test_get_boolean(value, expected):
    setParam('TestBoolean', value)
    assert getParamAsBoolean('TestBoolean') == expected


def test_bad_values():
    load_config_from_string(config_text_1)
    setSection('test_section')

    setParam('TestBoolean', 'maybe')
    with pytest.raises(ConfigFileError):
        getParamAsBoolean('TestBoolean')

    with pytest.raises(ConfigFileError):
        getParamAsInt('TestFloat')

    with pytest.raises(PyminicamException):
        getParam('NoSuchVariable')

    assert getParam('NoSuchVariable', raiseError=False) is None


def test_model_config():
    load_config_from_string(config_text_1)
    setSection('test_section')

    config = ModelConfig.fromConfig()
    assert config.maxIterations == 50
    assert config.calibrationActive == False
    assert config.debugChecking == False        # from system.cfg
    assert config.smallNumber == 1e-6

    modeltime = Modeltime.fromConfig()
    assert modeltime.getmaxper() == 4
