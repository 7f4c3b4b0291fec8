'''
.. Final demands for energy services.

.. Copyright (c) 2016 Richard Plevin
   See the https://opensource.org/licenses/MIT for license details.
'''
from .log import getLogger
from .utils import periodArray
from .XMLFile import childElements, insertValueIntoVector, getValueFloat

_logger = getLogger(__name__)

class FinalDemand(object):
    """
    Final demand for the good produced by a sector. The service level is
    given in base periods; thereafter it grows with GDP and responds to the
    price of the good:

        D[t] = D[t-1] * (GDP[t]/GDP[t-1])**incomeElasticity * (P[t]/P[t-1])**priceElasticity

    :param regionName: (str) the name of the containing region
    :param context: (ModelContext) configuration, model time and marketplace
    :param name: (str) the name of the good demanded
    """
    def __init__(self, regionName, context, name='', incomeElasticity=0.0, priceElasticity=0.0):
        self.regionName = regionName
        self.context = context
        self.name = name
        self.incomeElasticity = incomeElasticity
        self.priceElasticity = priceElasticity

        maxper = context.getmaxper()
        self.service = periodArray(maxper)
        self.serviceSet = periodArray(maxper, fill=False, dtype=bool)

    def __str__(self):
        return "<FinalDemand %s in %s>" % (self.name, self.regionName)

    def getName(self):
        return self.name

    def setService(self, period, value):
        self.service[period] = value
        self.serviceSet[period] = True

    def XMLParse(self, node):
        self.name = node.get('name', self.name)

        for child in childElements(node):
            tag = child.tag
            if tag == 'service':
                insertValueIntoVector(child, self.service, self.context.modeltime, self.serviceSet)
            elif tag == 'income-elasticity':
                self.incomeElasticity = getValueFloat(child)
            elif tag == 'price-elasticity':
                self.priceElasticity = getValueFloat(child)
            else:
                _logger.warning("Unrecognized element <%s> found while parsing final demand %s", tag, self.name)

    def completeInit(self):
        if not self.serviceSet[0]:
            _logger.warning("No base period service level given for final demand %s in %s", self.name, self.regionName)

    def calcDemand(self, period, gdp=None):
        """
        Compute and return the service demand for `period`.
        """
        if self.serviceSet[period] or period == 0:
            return self.service[period]

        demand = self.service[period - 1]

        if gdp is not None and self.incomeElasticity:
            prevGDP = gdp.getGDP(period - 1)
            if prevGDP > 0:
                demand *= (gdp.getGDP(period) / prevGDP) ** self.incomeElasticity

        if self.priceElasticity:
            marketplace = self.context.marketplace
            prevPrice = marketplace.getPrice(self.name, self.regionName, period - 1)
            price = marketplace.getPrice(self.name, self.regionName, period)
            if prevPrice > 0 and price > 0:
                demand *= (price / prevPrice) ** self.priceElasticity

        self.service[period] = demand
        return demand

    def calc(self, period, gdp=None):
        """
        Add this period's demand to the market for the good.
        """
        demand = self.calcDemand(period, gdp)
        self.context.marketplace.addToDemand(self.name, self.regionName, demand, period)

    def getService(self, period):
        return self.service[period]
