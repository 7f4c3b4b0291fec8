'''
.. Indirect emission coefficients.

.. Copyright (c) 2016 Richard Plevin
   See the https://opensource.org/licenses/MIT for license details.
'''

class IndirectEmissCoef(object):
    """
    Emissions per unit of output of a sector, by gas, used to attribute
    upstream emissions to the sectors that consume its output.

    :param name: (str) the name of the supplying sector
    :param emissions: (dict) total emissions of the sector by gas
    :param output: (float) total output of the sector
    """
    def __init__(self, name, emissions, output):
        self.name = name
        self.coefs = {gas: (value / output if output > 0 else 0.0) for gas, value in emissions.items()}

    def __str__(self):
        return "<IndirectEmissCoef %s %s>" % (self.name, self.coefs)

    def getName(self):
        return self.name

    def getemcoef(self, gas):
        return self.coefs.get(gas, 0.0)

    def getGases(self):
        return list(self.coefs.keys())
