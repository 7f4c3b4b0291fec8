import pytest

from pyminicam.error import PyminicamException
from pyminicam.sector import Sector
from pyminicam.subsector import Subsector, CapLimitStatus
from .utils_for_testing import makeContext, makeSector, makeSubsector, REGION

PERIOD = 1

def setDemand(sector, value, period=PERIOD):
    sector.marketplace.addToDemand(sector.getName(), REGION, value, period)

def shares(sector, period=PERIOD):
    return [sub.getShare(period) for sub in sector.subsec]

def test_logit_shares_and_price():
    context = makeContext()
    sector = makeSector(context, subsectors=[dict(name='A', shareWeight=0.3, cost=2.0),
                                             dict(name='B', shareWeight=0.7, cost=4.0)])
    sector.initCalc(PERIOD)
    sector.calcShare(PERIOD)

    assert shares(sector) == [pytest.approx(0.3), pytest.approx(0.7)]
    assert sector.getPrice(PERIOD) == pytest.approx(3.4)
    assert sector.getPrice(PERIOD) == pytest.approx(3.4)     # repeatable

def test_logit_exponent():
    context = makeContext()
    sector = makeSector(context, subsectors=[dict(name='A', logitExponent=-2.0, cost=1.0),
                                             dict(name='B', logitExponent=-2.0, cost=2.0)])
    sector.initCalc(PERIOD)
    sector.calcShare(PERIOD)

    # unnormalized shares are 1 and 0.25
    assert shares(sector) == [pytest.approx(0.8), pytest.approx(0.2)]
    assert sum(shares(sector)) == pytest.approx(1.0)

def test_final_supply_price_sets_market_price():
    context = makeContext()
    sector = makeSector(context, subsectors=[dict(name='A', shareWeight=0.3, cost=2.0),
                                             dict(name='B', shareWeight=0.7, cost=4.0)])
    sector.initCalc(PERIOD)
    sector.calcFinalSupplyPrice(None, PERIOD)
    assert context.marketplace.getPrice('electricity', REGION, PERIOD) == pytest.approx(3.4)

def test_subsector_names():
    context = makeContext()
    sector = makeSector(context, subsectors=[dict(name='A'), dict(name='B')])

    assert sector.nosubsec == 2
    assert sector.getSubsector('B').getName() == 'B'

    with pytest.raises(PyminicamException):
        sector.addSubsector(makeSubsector(context, 'A'))

    with pytest.raises(PyminicamException):
        sector.getSubsector('C')

def test_default_market(pkg_caplog):
    context = makeContext()
    sector = makeSector(context, subsectors=[dict(name='A')])

    assert sector.getMarketName() == REGION
    assert context.marketplace.doesMarketExist('electricity', REGION, PERIOD)
    assert 'Defaulting to regional market' in pkg_caplog.text

def test_read_in_price_seeds_market():
    context = makeContext()
    sector = Sector(REGION, context, name='electricity')
    sector.market = 'North America'
    sector.sectorprice[0] = 2.5
    sector.completeInit()

    assert context.marketplace.getPrice('electricity', REGION, 0) == 2.5
    assert context.marketplace.getMarket('electricity', REGION).marketName == 'North America'

def test_share_sum_check(pkg_caplog):
    context = makeContext(debugChecking=True)
    sector = makeSector(context, subsectors=[dict(name='A'), dict(name='B')])
    sector.subsec[0].share[PERIOD] = 0.3
    sector.subsec[1].share[PERIOD] = 0.3

    sector.checkShareSum(PERIOD)
    assert 'Shares do not sum to 1' in pkg_caplog.text


class TestFixedOutput(object):
    def test_fixed_below_demand(self):
        context = makeContext()
        sector = makeSector(context, subsectors=[dict(name='A', fixedOutput=50.0),
                                                 dict(name='B')])
        sector.initCalc(PERIOD)
        assert sector.anyFixedCapacity

        A, B = sector.subsec
        B.share[PERIOD] = 1.0

        total = sector.adjustForFixedOutput(100.0, PERIOD)
        assert total == pytest.approx(50.0)
        assert A.getShare(PERIOD) == pytest.approx(0.5)
        assert B.getShare(PERIOD) == pytest.approx(0.5)
        assert A.getFixedShare(PERIOD) == pytest.approx(0.5)

    def test_shares_once_fixed_share_is_known(self):
        context = makeContext()
        sector = makeSector(context, subsectors=[dict(name='A', fixedOutput=50.0),
                                                 dict(name='B', shareWeight=2.0)])
        sector.initCalc(PERIOD)
        setDemand(sector, 100.0)

        sector.subsec[1].share[PERIOD] = 1.0
        sector.adjustForFixedOutput(100.0, PERIOD)

        sector.calcShare(PERIOD)
        assert shares(sector) == [pytest.approx(0.5), pytest.approx(0.5)]

    def test_fixed_exceeds_demand(self):
        context = makeContext()
        sector = makeSector(context, subsectors=[dict(name='A', fixedOutput=70.0),
                                                 dict(name='B', fixedOutput=50.0),
                                                 dict(name='C')])
        sector.initCalc(PERIOD)
        A, B, C = sector.subsec
        C.share[PERIOD] = 1.0

        total = sector.adjustForFixedOutput(100.0, PERIOD)
        assert total == pytest.approx(100.0)
        assert A.getFixedOutput(PERIOD) == pytest.approx(58.3333, rel=1e-4)
        assert B.getFixedOutput(PERIOD) == pytest.approx(41.6667, rel=1e-4)
        assert A.getFixedShare(PERIOD) == pytest.approx(0.583333, rel=1e-4)
        assert C.getShare(PERIOD) == 0.0
        assert sum(shares(sector)) == pytest.approx(1.0)

    def test_supply_does_not_compound_scaling(self):
        context = makeContext()
        sector = makeSector(context, subsectors=[dict(name='A', fixedOutput=70.0),
                                                 dict(name='B', fixedOutput=50.0),
                                                 dict(name='C')])
        sector.initCalc(PERIOD)
        setDemand(sector, 100.0)

        for _ in range(3):
            sector.calcShare(PERIOD)
            sector.supply(PERIOD)
            sector.setFinalSupply(PERIOD)

        A, B, C = sector.subsec
        assert A.getOutput(PERIOD) == pytest.approx(58.3333, rel=1e-4)
        assert B.getOutput(PERIOD) == pytest.approx(41.6667, rel=1e-4)
        assert C.getOutput(PERIOD) == pytest.approx(0.0, abs=1e-9)
        assert sector.getOutput(PERIOD) == pytest.approx(100.0)
        assert sector.fixedOutput[PERIOD] == pytest.approx(100.0)

    def test_all_fixed(self):
        context = makeContext()
        sector = makeSector(context, subsectors=[dict(name='A', fixedOutput=30.0),
                                                 dict(name='B', fixedOutput=20.0)])
        sector.initCalc(PERIOD)

        total = sector.adjustForFixedOutput(100.0, PERIOD)
        assert total == pytest.approx(50.0)
        assert shares(sector) == [pytest.approx(0.3), pytest.approx(0.2)]


class TestCapacityLimits(object):
    def test_limit_redistributes_share(self):
        context = makeContext()
        sector = makeSector(context, subsectors=[dict(name='A', shareWeight=0.6, capLimit=0.3),
                                                 dict(name='B', shareWeight=0.4)])
        sector.initCalc(PERIOD)
        assert sector.capLimitsPresent[PERIOD]

        sector.calcShare(PERIOD)

        A, B = sector.subsec
        limited = Subsector.capLimitTransform(0.3, 0.6, context.config.smallNumber)
        assert A.getShare(PERIOD) == pytest.approx(limited)
        assert A.getShare(PERIOD) < 0.3
        assert A.getCapLimitStatus(PERIOD) == CapLimitStatus.APPLIED
        assert B.getShare(PERIOD) == pytest.approx(1 - limited)
        assert sum(shares(sector)) == pytest.approx(1.0)

        # already resolved
        assert sector.adjSharesCapLimit(PERIOD)

    def test_under_limit_unchanged(self):
        context = makeContext()
        sector = makeSector(context, subsectors=[dict(name='A', shareWeight=0.1, capLimit=0.5),
                                                 dict(name='B', shareWeight=0.9)])
        sector.initCalc(PERIOD)
        sector.calcShare(PERIOD)

        assert shares(sector) == [pytest.approx(0.1), pytest.approx(0.9)]
        assert sector.subsec[0].getCapLimitStatus(PERIOD) == CapLimitStatus.UNLIMITED

    def test_share_near_limit_unchanged(self):
        context = makeContext()
        sector = makeSector(context, subsectors=[dict(name='A', shareWeight=0.4, capLimit=0.5),
                                                 dict(name='B', shareWeight=0.6)])
        sector.initCalc(PERIOD)
        sector.calcShare(PERIOD)

        # the smooth transform alone would cut A to about 0.392
        assert Subsector.capLimitTransform(0.5, 0.4) < 0.393
        assert shares(sector) == [pytest.approx(0.4), pytest.approx(0.6)]
        assert sector.subsec[0].getCapLimitStatus(PERIOD) == CapLimitStatus.UNLIMITED

    def test_insufficient_capacity(self, pkg_caplog):
        context = makeContext()
        sector = makeSector(context, subsectors=[dict(name='A', shareWeight=0.5, capLimit=0.3),
                                                 dict(name='B', shareWeight=0.5, capLimit=0.3)])
        sector.initCalc(PERIOD)
        sector.calcShare(PERIOD)

        assert 'Insufficient capacity to meet demand' in pkg_caplog.text
        assert 'Capacity limit not resolved' in pkg_caplog.text
        assert not sector.adjSharesCapLimit(PERIOD)

    def test_fixed_output_over_limit(self, pkg_caplog):
        context = makeContext()
        sector = makeSector(context, subsectors=[dict(name='A', fixedOutput=60.0, capLimit=0.3),
                                                 dict(name='B')])
        sector.initCalc(PERIOD)
        sector.calcShare(PERIOD)
        setDemand(sector, 100.0)
        sector.supply(PERIOD)

        # the fixed share is known once supplied, and is not capped
        sector.calcShare(PERIOD)
        A, B = sector.subsec
        assert A.getShare(PERIOD) == pytest.approx(0.6)
        assert B.getShare(PERIOD) == pytest.approx(0.4)
        assert sum(shares(sector)) == pytest.approx(1.0)
        assert A.getCapLimitStatus(PERIOD) == CapLimitStatus.UNLIMITED
        assert 'Capacity limit not resolved' not in pkg_caplog.text

    def test_no_limits_present(self):
        context = makeContext()
        sector = makeSector(context, subsectors=[dict(name='A'), dict(name='B')])
        assert not sector.isCapacityLimitsInSector(PERIOD)
        assert not sector.isCapacityLimitsInSector(-1)
