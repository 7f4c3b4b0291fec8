import logging
import math
from io import StringIO

import pytest

from pyminicam.emissions import IndirectEmissCoef
from pyminicam.subsector import CO2
from pyminicam.summary import TOTAL
from .utils_for_testing import makeContext, makeSector, REGION

PERIOD = 1

def makeElectricity(context):
    mp = context.marketplace
    for good in ('coal', 'natural gas', 'oil', CO2):
        mp.createMarket(REGION, REGION, good)

    return makeSector(context, subsectors=[dict(name='coal', fuel='coal'),
                                           dict(name='gas', fuel='natural gas'),
                                           dict(name='oil', fuel='oil')])

def setInputs(sector, values, period=PERIOD):
    for sub, value in zip(sector.subsec, values):
        sub.input[period] = value
        sub.output[period] = value

def test_sum_output():
    context = makeContext()
    sector = makeElectricity(context)
    setInputs(sector, [20.0, 3.0, 0.5])

    sector.sumOutput(PERIOD)
    assert sector.getOutput(PERIOD) == pytest.approx(23.5)
    assert sector.getInput(PERIOD) == pytest.approx(23.5)

def test_invalid_output(pkg_caplog):
    context = makeContext()
    sector = makeElectricity(context)
    setInputs(sector, [20.0, float('nan'), 0.5])

    sector.sumOutput(PERIOD)
    assert math.isnan(sector.getOutput(PERIOD))
    assert 'is not valid' in pkg_caplog.text

def test_read_in_base_output_kept():
    context = makeContext()
    sector = makeElectricity(context)
    sector.output[0] = 42.0
    setInputs(sector, [1.0, 1.0, 1.0], period=0)
    assert sector.updateAndGetOutput(0) == 42.0

    setInputs(sector, [1.0, 1.0, 1.0])
    assert sector.updateAndGetOutput(PERIOD) == pytest.approx(3.0)

def test_fuel_consumption():
    context = makeContext()
    sector = makeElectricity(context)
    setInputs(sector, [20.0, 3.0, 0.5])

    sector.updateSummary(PERIOD)
    fuelcons = sector.getfuelcons(PERIOD)
    assert fuelcons[TOTAL] == pytest.approx(23.5)
    assert sector.getConsByFuel(PERIOD, 'coal') == pytest.approx(20.0)
    assert sector.getConsByFuel(PERIOD, 'uranium') == 0.0

    sector.clearfuelcons(PERIOD)
    assert sector.getfuelcons(PERIOD) == {}

def test_emissions():
    context = makeContext()
    sector = makeElectricity(context)
    context.marketplace.setPrice(CO2, REGION, 2.0, PERIOD)

    coal, gas, _ = sector.subsec
    coal.emissCoefs[CO2] = 25.0
    gas.emissCoefs[CO2] = 15.0
    setInputs(sector, [2.0, 1.0, 1.0])

    sector.emission(PERIOD)
    assert sector.getemission(PERIOD) == {CO2: pytest.approx(65.0)}
    assert sector.getemfuelmap(PERIOD) == {'coal': pytest.approx(50.0),
                                           'natural gas': pytest.approx(15.0),
                                           'oil': 0.0}
    assert sector.getTotalCarbonTaxPaid(PERIOD) == pytest.approx(130.0)

    sector.sumOutput(PERIOD)
    coef = sector.getIndirectEmissCoef(PERIOD)
    assert coef.getName() == 'electricity'
    assert coef.getemcoef(CO2) == pytest.approx(65.0 / 4.0)

def test_indirect_emissions():
    context = makeContext()
    context.marketplace.createMarket(REGION, REGION, 'electricity')
    industry = makeSector(context, name='industry', subsectors=[dict(name='electric', fuel='electricity')])
    industry.subsec[0].input[PERIOD] = 10.0

    coefs = [IndirectEmissCoef('electricity', {CO2: 100.0}, 50.0),
             IndirectEmissCoef('refining', {CO2: 30.0}, 10.0)]
    industry.indemission(PERIOD, coefs)
    assert industry.getemindmap(PERIOD) == {CO2: pytest.approx(20.0)}

def test_indirect_coef_zero_output():
    coef = IndirectEmissCoef('electricity', {CO2: 100.0}, 0.0)
    assert coef.getemcoef(CO2) == 0.0
    assert coef.getemcoef('CH4') == 0.0


class TestDependencyGraph(object):
    def graph(self, **kwargs):
        context = makeContext(**kwargs)
        sector = makeElectricity(context)
        context.marketplace.setPrice('coal', REGION, 7.0, PERIOD)
        setInputs(sector, [20.0, 3.0, 1e-7])
        sector.updateSummary(PERIOD)

        stream = StringIO()
        sector.addToDependencyGraph(stream, PERIOD)
        return stream.getvalue()

    def test_styles(self):
        text = self.graph()
        assert '\telectricity [shape=box];\n' in text
        assert '\tcoal -> electricity [style="bold"];\n' in text
        assert '\tnatural_gas -> electricity [style="dashed"];\n' in text
        assert 'oil' not in text

    def test_null_paths_and_values(self):
        text = self.graph(showNullPaths=True, printValuesOnGraphs=True)
        assert '\toil -> electricity [style="dotted",label="0.00"];\n' in text
        assert '\tcoal -> electricity [style="bold",label="20.00"];\n' in text

    def test_prices(self):
        text = self.graph(printPrices=True, printValuesOnGraphs=True)
        assert '\tcoal -> electricity [style="",label="7.00"];\n' in text
        assert 'natural_gas' not in text        # no price set

    def test_print_dependencies(self, pkg_caplog):
        context = makeContext()
        sector = makeElectricity(context)
        sector.dependsList = ['coal', 'natural gas']

        sector.printSectorDependencies(logging.getLogger('pyminicam.deps'))
        assert ',electricity,coal,natural gas,' in pkg_caplog.text
