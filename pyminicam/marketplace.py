'''
.. The marketplace: per-period price, supply, and demand for each good.

.. Copyright (c) 2016 Richard Plevin
   See the https://opensource.org/licenses/MIT for license details.
'''
import numpy as np

from .log import getLogger
from .utils import periodArray

_logger = getLogger(__name__)

class Market(object):
    """
    Price, supply, demand and miscellaneous information for one good
    in one market, by period. A market may serve several regions.
    """
    def __init__(self, goodName, marketName, maxper):
        self.goodName = goodName
        self.marketName = marketName
        self.regions = []
        self.price  = periodArray(maxper)
        self.supply = periodArray(maxper)
        self.demand = periodArray(maxper)
        self.info   = [{} for _ in range(maxper)]

    def __str__(self):
        return "<Market %s in %s>" % (self.goodName, self.marketName)

    def addRegion(self, regionName):
        if regionName not in self.regions:
            self.regions.append(regionName)


class Marketplace(object):
    """
    Holds all markets for a model run. Markets are identified by good name
    and market name; each region's view of a good is mapped to the market
    the region belongs to.

    :param maxper: (int) the number of model periods
    """
    def __init__(self, maxper):
        self.maxper = maxper
        self.markets = {}       # Market instances keyed by (goodName, marketName)
        self.regionMap = {}     # market keys keyed by (goodName, regionName)

    def createMarket(self, regionName, marketName, goodName):
        """
        Create a market for `goodName` in `marketName` if none exists, and
        add `regionName` to it.

        :return: (bool) True if a new market was created
        """
        key = (goodName, marketName)
        created = key not in self.markets
        if created:
            self.markets[key] = Market(goodName, marketName, self.maxper)
            _logger.debug("Created market for %s in %s", goodName, marketName)

        self.markets[key].addRegion(regionName)
        self.regionMap[(goodName, regionName)] = key
        return created

    def getMarket(self, goodName, regionName):
        key = self.regionMap.get((goodName, regionName))
        return self.markets[key] if key else None

    def doesMarketExist(self, goodName, regionName, period):
        return self.getMarket(goodName, regionName) is not None and 0 <= period < self.maxper

    def setPrice(self, goodName, regionName, value, period):
        market = self.getMarket(goodName, regionName)
        if market:
            market.price[period] = value

    def getPrice(self, goodName, regionName, period):
        market = self.getMarket(goodName, regionName)
        if market is None:
            _logger.debug("No market for %s in %s; price is 0", goodName, regionName)
            return 0.0

        return market.price[period]

    def addToSupply(self, goodName, regionName, value, period):
        market = self.getMarket(goodName, regionName)
        if market:
            market.supply[period] += value

    def getSupply(self, goodName, regionName, period):
        market = self.getMarket(goodName, regionName)
        return market.supply[period] if market else 0.0

    def addToDemand(self, goodName, regionName, value, period):
        market = self.getMarket(goodName, regionName)
        if market:
            market.demand[period] += value
        else:
            _logger.debug("Demand of %s for %s in %s has no market", value, goodName, regionName)

    def getDemand(self, goodName, regionName, period):
        market = self.getMarket(goodName, regionName)
        return market.demand[period] if market else 0.0

    def nullSupplies(self, period):
        for market in self.markets.values():
            market.supply[period] = 0.0

    def nullDemands(self, period):
        for market in self.markets.values():
            market.demand[period] = 0.0

    def setMarketInfo(self, goodName, regionName, period, itemName, value):
        market = self.getMarket(goodName, regionName)
        if market:
            market.info[period][itemName] = value

    def addToMarketInfo(self, goodName, regionName, period, itemName, value):
        market = self.getMarket(goodName, regionName)
        if market:
            info = market.info[period]
            info[itemName] = info.get(itemName, 0.0) + value

    def getMarketInfo(self, goodName, regionName, period, itemName, default=0.0):
        market = self.getMarket(goodName, regionName)
        if market is None:
            return default

        return market.info[period].get(itemName, default)

    def getPrices(self, period):
        """
        Return the prices of all markets for `period`, in a stable order.
        """
        return np.array([self.markets[key].price[period] for key in sorted(self.markets)])

    def getDemands(self, period):
        """
        Return the demands of all markets for `period`, in a stable order.
        """
        return np.array([self.markets[key].demand[period] for key in sorted(self.markets)])

    def getExcessDemands(self, period):
        """
        Return demand minus supply of all markets for `period`, in a stable order.
        """
        return np.array([self.markets[key].demand[period] - self.markets[key].supply[period]
                         for key in sorted(self.markets)])
