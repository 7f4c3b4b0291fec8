'''
.. Resources with exogenously specified prices.

.. Copyright (c) 2016 Richard Plevin
   See the https://opensource.org/licenses/MIT for license details.
'''
from .log import getLogger
from .utils import periodArray, fillForward
from .XMLFile import childElements, getValueString, insertValueIntoVector

_logger = getLogger(__name__)

class FixedPriceResource(object):
    """
    A primary resource available in any quantity at a given price. Supply
    is set equal to whatever demand the sectors place on it.

    :param regionName: (str) the name of the containing region
    :param context: (ModelContext) configuration, model time and marketplace
    :param name: (str) the name of the resource, which is also the good traded
    :param prices: (sequence of float) optional per-period prices
    """
    def __init__(self, regionName, context, name='', prices=None):
        self.regionName = regionName
        self.context = context
        self.name = name
        self.market = ''

        maxper = context.getmaxper()
        self.price  = periodArray(maxper)
        self.output = periodArray(maxper)
        self._priceSet = periodArray(maxper, fill=False, dtype=bool)

        if prices is not None:
            for period, value in enumerate(prices):
                self.price[period] = value
                self._priceSet[period] = True

    def __str__(self):
        return "<FixedPriceResource %s in %s>" % (self.name, self.regionName)

    def getName(self):
        return self.name

    def XMLParse(self, node):
        self.name = node.get('name', self.name)

        for child in childElements(node):
            if child.tag == 'price':
                insertValueIntoVector(child, self.price, self.context.modeltime, self._priceSet)
            elif child.tag == 'market':
                self.market = getValueString(child)
            else:
                _logger.warning("Unrecognized element <%s> found while parsing resource %s", child.tag, self.name)

    def completeInit(self):
        fillForward(self.price, self._priceSet)
        self.market = self.market or self.regionName
        self.context.marketplace.createMarket(self.regionName, self.market, self.name)

    def initCalc(self, period):
        self.context.marketplace.setPrice(self.name, self.regionName, self.price[period], period)

    def calc(self, period):
        """
        Supply exactly the quantity demanded.
        """
        marketplace = self.context.marketplace
        demand = marketplace.getDemand(self.name, self.regionName, period)
        self.output[period] = demand
        marketplace.addToSupply(self.name, self.regionName, demand, period)

    def getPrice(self, period):
        return self.price[period]

    def getOutput(self, period):
        return self.output[period]
