'''
.. Conversion between model periods and calendar years.

.. Copyright (c) 2016 Richard Plevin
   See the https://opensource.org/licenses/MIT for license details.
'''
from .config import getParamAsInt
from .error import PyminicamException

class Modeltime(object):
    """
    Maps model periods 0..maxper-1 to years. Period 0 is `startYear`;
    each subsequent period is `timestep` years later, through `endYear`.

    :param startYear: (int) the year of period 0
    :param endYear: (int) the last year modeled
    :param timestep: (int) years per period
    """
    def __init__(self, startYear=1975, endYear=2095, timestep=15):
        if timestep <= 0 or endYear < startYear:
            raise PyminicamException('Invalid model time: start=%s, end=%s, timestep=%s' % (startYear, endYear, timestep))

        self.startYear = startYear
        self.timestep  = timestep
        self.years = list(range(startYear, endYear + 1, timestep))
        self.endYear = self.years[-1]

    @classmethod
    def fromConfig(cls, section=None):
        return cls(startYear=getParamAsInt('MiniCAM.StartYear', section=section),
                   endYear=getParamAsInt('MiniCAM.EndYear', section=section),
                   timestep=getParamAsInt('MiniCAM.TimeStep', section=section))

    def __str__(self):
        return "<Modeltime %d-%d by %d>" % (self.startYear, self.endYear, self.timestep)

    def getmaxper(self):
        return len(self.years)

    def getper_to_yr(self, period):
        return self.years[period]

    def getyr_to_per(self, year, raiseError=True):
        """
        Return the period for `year`, which must be a model year.

        :param year: (int or str) a model year
        :param raiseError: (bool) if False, return None for years that are not model years
        :return: (int) the period index
        """
        year = int(year)
        try:
            return self.years.index(year)
        except ValueError:
            if raiseError:
                raise PyminicamException('%d is not a model year; model years are %s' % (year, self.years))
            return None
