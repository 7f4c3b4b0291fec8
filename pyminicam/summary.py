'''
.. Per-period summary maps used for reporting and dependency analysis.

.. Copyright (c) 2016 Richard Plevin
   See the https://opensource.org/licenses/MIT for license details.
'''
from .utils import addToMap

TOTAL = 'zTotal'

class Summary(object):
    """
    Fuel consumption and emissions for one period, keyed by fuel or gas name.
    Fuel consumption includes the total under the key "zTotal".
    """
    def __init__(self):
        self.fuelcons  = {}
        self.emission  = {}     # by gas
        self.emfuelmap = {}     # by fuel
        self.emindmap  = {}     # indirect, by gas
        self.emissfuel = {}     # CO2 from primary fuels, by fuel

    def clearfuelcons(self):
        self.fuelcons = {}

    def updatefuelcons(self, fuelcons):
        addToMap(self.fuelcons, fuelcons)

    def getfuelcons(self):
        return dict(self.fuelcons)

    def get_fmap_second(self, fuelName):
        return self.fuelcons.get(fuelName, 0.0)

    def clearemiss(self):
        self.emission = {}

    def updateemiss(self, emissions):
        addToMap(self.emission, emissions)

    def getemission(self):
        return dict(self.emission)

    def get_emissmap_second(self, gas):
        return self.emission.get(gas, 0.0)

    def clearemfuelmap(self):
        self.emfuelmap = {}

    def updateemfuelmap(self, emissions):
        addToMap(self.emfuelmap, emissions)

    def getemfuelmap(self):
        return dict(self.emfuelmap)

    def clearemindmap(self):
        self.emindmap = {}

    def updateemindmap(self, emissions):
        addToMap(self.emindmap, emissions)

    def getemindmap(self):
        return dict(self.emindmap)

    def get_emindmap_second(self, gas):
        return self.emindmap.get(gas, 0.0)

    def clearemissfuel(self):
        self.emissfuel = {}

    def updateemissfuel(self, emissions):
        addToMap(self.emissfuel, emissions)

    def getemissfuel(self):
        return dict(self.emissfuel)
