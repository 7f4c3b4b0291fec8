import pytest

from .utils_for_testing import makeContext, makeSector, REGION

PERIOD = 1

def makeCalibratedSector(context, calA=60.0, calB=40.0, **kwargs):
    return makeSector(context, subsectors=[dict(name='A', calOutput=calA, **kwargs),
                                           dict(name='B', calOutput=calB, **kwargs)])

def test_calibrated_and_fixed_output_met():
    context = makeContext()
    sector = makeSector(context, subsectors=[dict(name='A', calOutput=80.0),
                                             dict(name='B', fixedOutput=20.0)])
    sector.output[PERIOD] = 100.0
    assert sector.isAllCalibrated(PERIOD, 0.01)

def test_calibration_not_met(pkg_caplog):
    context = makeContext()
    sector = makeSector(context, subsectors=[dict(name='A', calOutput=80.0),
                                             dict(name='B', fixedOutput=20.0)])
    sector.output[PERIOD] = 90.0
    assert not sector.isAllCalibrated(PERIOD, 0.01)
    assert 'cal+fixed vals' not in pkg_caplog.text

    assert not sector.isAllCalibrated(PERIOD, 0.01, printWarnings=True)
    assert 'cal+fixed vals' in pkg_caplog.text

def test_calibration_check_skipped():
    context = makeContext()
    sector = makeSector(context, subsectors=[dict(name='A', calOutput=80.0)])
    sector.output[:] = 10.0
    assert sector.isAllCalibrated(0, 0.01)                  # base period

    context = makeContext(calibrationActive=False)
    sector = makeSector(context, subsectors=[dict(name='A', calOutput=80.0)])
    sector.output[:] = 10.0
    assert sector.isAllCalibrated(PERIOD, 0.01)

    context = makeContext()
    sector = makeSector(context, subsectors=[dict(name='A')])
    sector.output[:] = 10.0
    assert sector.isAllCalibrated(PERIOD, 0.01)             # nothing calibrated

def test_calibrate_sector():
    context = makeContext()
    sector = makeCalibratedSector(context)
    sector.initCalc(PERIOD)
    context.marketplace.addToDemand('electricity', REGION, 100.0, PERIOD)

    sector.calcShare(PERIOD)
    assert [sub.getShare(PERIOD) for sub in sector.subsec] == [pytest.approx(0.5)] * 2

    sector.calibrateSector(PERIOD)
    assert [sub.getShareWeight(PERIOD) for sub in sector.subsec] == [pytest.approx(1.2), pytest.approx(0.8)]

    sector.calcShare(PERIOD)
    assert [sub.getShare(PERIOD) for sub in sector.subsec] == [pytest.approx(0.6), pytest.approx(0.4)]

def test_calibrate_sector_with_prices():
    context = makeContext()
    sector = makeSector(context, subsectors=[dict(name='A', calOutput=30.0, logitExponent=-3.0, cost=1.0),
                                             dict(name='B', calOutput=70.0, logitExponent=-3.0, cost=2.0)])
    sector.initCalc(PERIOD)
    context.marketplace.addToDemand('electricity', REGION, 100.0, PERIOD)

    sector.calcShare(PERIOD)
    sector.calibrateSector(PERIOD)
    sector.calcShare(PERIOD)
    assert [sub.getShare(PERIOD) for sub in sector.subsec] == [pytest.approx(0.3), pytest.approx(0.7)]

def test_normalize_share_weights():
    context = makeContext()
    sector = makeCalibratedSector(context)
    A, B = sector.subsec
    A.shareWeight[PERIOD] = 3.0
    B.shareWeight[PERIOD] = 1.0

    sector.initCalc(PERIOD + 1)
    assert A.getShareWeight(PERIOD) == pytest.approx(1.5)
    assert B.getShareWeight(PERIOD) == pytest.approx(0.5)

    # the normalized weights are carried into the next period
    assert A.getShareWeight(PERIOD + 1) == pytest.approx(1.5)
    assert B.getShareWeight(PERIOD + 1) == pytest.approx(0.5)

def test_normalize_zero_weights(pkg_caplog):
    context = makeContext()
    sector = makeCalibratedSector(context)
    for sub in sector.subsec:
        sub.shareWeight[PERIOD] = 0.0

    sector.normalizeShareWeights(PERIOD + 1)
    assert 'share weights sum to zero' in pkg_caplog.text

def test_normalize_skipped_without_calibration():
    context = makeContext()
    sector = makeSector(context, subsectors=[dict(name='A', shareWeight=3.0),
                                             dict(name='B', shareWeight=1.0)])
    sector.normalizeShareWeights(PERIOD + 1)
    assert [sub.getShareWeight(PERIOD) for sub in sector.subsec] == [3.0, 1.0]

def test_cal_and_fixed_values():
    context = makeContext()
    sector = makeSector(context, subsectors=[dict(name='A', calOutput=40.0, fuel='coal', efficiency=0.5),
                                             dict(name='B', fixedOutput=10.0, fuel='natural gas'),
                                             dict(name='C', fuel='coal')])
    sector.initCalc(PERIOD)

    assert sector.getCalOutput(PERIOD) == pytest.approx(40.0)
    assert sector.getFixedOutput(PERIOD) == pytest.approx(10.0)
    assert sector.getCalAndFixedInputs(PERIOD, 'coal') == pytest.approx(80.0)
    assert sector.getCalAndFixedInputs(PERIOD, 'allInputs') == pytest.approx(90.0)
    assert sector.getCalAndFixedOutputs(PERIOD, 'electricity') == pytest.approx(50.0)
    assert sector.getCalAndFixedOutputs(PERIOD, 'electricity', bothVals=False) == pytest.approx(40.0)

    assert sector.inputsAllFixed(PERIOD, 'natural gas')
    assert not sector.inputsAllFixed(PERIOD, 'coal')
    assert not sector.outputsAllFixed(PERIOD)

    assert sector.setImpliedFixedInput(PERIOD, 'coal', 20.0)
    assert sector.getSubsector('C').getTotalCalOutputs(PERIOD) == pytest.approx(20.0)
    assert sector.outputsAllFixed(PERIOD)

    sector.scaleCalibratedValues(PERIOD, 'coal', 0.5)
    assert sector.getCalAndFixedInputs(PERIOD, 'coal', bothVals=False) == pytest.approx(50.0)

def test_cal_and_fixed_warning(pkg_caplog):
    context = makeContext()
    sector = makeSector(context, subsectors=[dict(name='A', calOutput=40.0, fixedOutput=10.0)])
    sector.checkSectorCalData(PERIOD)
    assert 'both calibrated and fixed output' in pkg_caplog.text

def test_tabulate_fixed_demands():
    context = makeContext()
    context.marketplace.createMarket(REGION, REGION, 'coal')
    sector = makeSector(context, subsectors=[dict(name='A', calOutput=40.0, fuel='coal', efficiency=0.5),
                                             dict(name='B', fuel='coal')])
    sector.tabulateFixedDemands(PERIOD)
    assert context.marketplace.getMarketInfo('coal', REGION, PERIOD, 'calDemand') == pytest.approx(80.0)
