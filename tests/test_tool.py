import logging
from io import StringIO

import pandas as pd
import pytest

from pyminicam.config import getConfig, setSection, DEFAULT_SECTION
from pyminicam.log import configureLogs
from pyminicam.tool import MiniCamTool, main
from .utils_for_testing import dataFile

SCENARIO = dataFile('two_sector.xml')

def removeHandlers():
    logger = logging.getLogger('pyminicam')
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

@pytest.fixture
def tool():
    # console handlers from earlier calls to main() are bound to closed streams
    removeHandlers()
    setSection(DEFAULT_SECTION)
    getConfig(reload=True)
    yield MiniCamTool.getInstance(reload=True)
    removeHandlers()

def test_reconfigure_with_closed_stream(tool):
    logger = logging.getLogger('pyminicam')
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    logger.addHandler(handler)
    stream.close()

    configureLogs(force=True)
    assert handler not in logger.handlers
    assert logger.handlers

def test_plugins(tool):
    for name in ('config', 'graph', 'run'):
        assert MiniCamTool.getPlugin(name) is not None

def test_config_exact(tool, capsys):
    assert main(['config', '-x', 'MiniCAM.StartYear']) == 0
    assert capsys.readouterr().out == '1975\n'

def test_config_listing(tool, capsys):
    assert main(['config', 'timestep']) == 0
    out = capsys.readouterr().out
    assert out.startswith('[DEFAULT]')
    assert 'MiniCAM.TimeStep = 15' in out

def test_no_subcommand(tool, capsys):
    assert main([]) == 1
    assert 'No sub-command given' in capsys.readouterr().out

def test_bad_set_arg(tool, capsys):
    assert main(['+s', 'MiniCAM.TimeStep', 'config']) == 1
    assert 'variable=value' in capsys.readouterr().out

def test_set_arg(tool, capsys):
    assert main(['+s', 'MiniCAM.TimeStep=5', 'config', '-x', 'MiniCAM.TimeStep']) == 0
    assert capsys.readouterr().out == '5\n'

def test_run_to_csv(tool, tmp_path):
    outFile = str(tmp_path / 'results.csv')
    assert main(['run', SCENARIO, '-E', '2005', '-y', '1990', '-o', outFile]) == 0

    df = pd.read_csv(outFile)
    assert list(df.columns) == ['region', 'sector', 'year', 'price', 'output', 'input']
    assert list(df.year) == [1990, 1990]
    assert set(df.sector) == {'electricity', 'industry energy'}

def test_run_emissions(tool, capsys):
    assert main(['run', SCENARIO, '-e', '-E', '1975']) == 0
    out = capsys.readouterr().out
    assert 'CO2' in out
    assert 'industry energy' in out

def test_run_missing_file(tool, capsys):
    assert main(['run', dataFile('no_such_file.xml')]) == 1
    assert 'mct failed' in capsys.readouterr().out

def test_graph(tool, capsys, tmp_path):
    assert main(['graph', SCENARIO, '-y', '1990']) == 0
    assert capsys.readouterr().out.startswith('digraph USA {')

    outFile = tmp_path / 'graph.dot'
    assert main(['graph', SCENARIO, '-y', '1990', '-o', str(outFile)]) == 0
    assert 'electricity -> industry_energy' in outFile.read_text()
