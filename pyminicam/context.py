'''
.. Configuration and shared state passed explicitly to model objects.

.. Copyright (c) 2016 Richard Plevin
   See the https://opensource.org/licenses/MIT for license details.
'''
from .config import getParamAsBoolean, getParamAsFloat, getParamAsInt
from .marketplace import Marketplace
from .modeltime import Modeltime
from .utils import TINY_NUMBER, SMALL_NUMBER

class ModelConfig(object):
    """
    Options that control the numerical core. Model objects receive one of
    these (through a :py:class:`ModelContext`) rather than reading the
    configuration file themselves.

    :param debugChecking: (bool) check share sums and supply/demand consistency
    :param calibrationActive: (bool) adjust share weights to reproduce calibrated outputs
    :param printPrices: (bool) label dependency graph edges with prices rather than quantities
    :param showNullPaths: (bool) include dependency graph edges with negligible values
    :param printValuesOnGraphs: (bool) print the edge values on dependency graphs
    :param tinyNumber: (float) substitute divisor used to avoid division by zero
    :param smallNumber: (float) tolerance for share sums and capacity limits
    :param calAccuracy: (float) tolerance used when checking calibration
    :param maxIterations: (int) the maximum number of solver iterations per period
    :param solverTolerance: (float) relative change in prices and demands that
        indicates convergence
    """
    __slots__ = ['debugChecking', 'calibrationActive', 'printPrices', 'showNullPaths',
                 'printValuesOnGraphs', 'tinyNumber', 'smallNumber', 'calAccuracy',
                 'maxIterations', 'solverTolerance']

    def __init__(self, debugChecking=False, calibrationActive=True, printPrices=False,
                 showNullPaths=False, printValuesOnGraphs=False, tinyNumber=TINY_NUMBER,
                 smallNumber=SMALL_NUMBER, calAccuracy=0.01, maxIterations=200,
                 solverTolerance=1e-6):
        self.debugChecking = debugChecking
        self.calibrationActive = calibrationActive
        self.printPrices = printPrices
        self.showNullPaths = showNullPaths
        self.printValuesOnGraphs = printValuesOnGraphs
        self.tinyNumber = tinyNumber
        self.smallNumber = smallNumber
        self.calAccuracy = calAccuracy
        self.maxIterations = maxIterations
        self.solverTolerance = solverTolerance

    @classmethod
    def fromConfig(cls, section=None):
        """
        Create a ModelConfig from the "MiniCAM.*" configuration variables.

        :param section: (str) the config file section to read, by default the current project
        :return: (ModelConfig) the new instance
        """
        return cls(debugChecking=getParamAsBoolean('MiniCAM.DebugChecking', section=section),
                   calibrationActive=getParamAsBoolean('MiniCAM.CalibrationActive', section=section),
                   printPrices=getParamAsBoolean('MiniCAM.PrintPrices', section=section),
                   showNullPaths=getParamAsBoolean('MiniCAM.ShowNullPaths', section=section),
                   printValuesOnGraphs=getParamAsBoolean('MiniCAM.PrintValuesOnGraphs', section=section),
                   tinyNumber=getParamAsFloat('MiniCAM.TinyNumber', section=section),
                   smallNumber=getParamAsFloat('MiniCAM.SmallNumber', section=section),
                   calAccuracy=getParamAsFloat('MiniCAM.CalAccuracy', section=section),
                   maxIterations=getParamAsInt('MiniCAM.MaxIterations', section=section),
                   solverTolerance=getParamAsFloat('MiniCAM.SolverTolerance', section=section))

    def __str__(self):
        items = ', '.join('%s=%s' % (name, getattr(self, name)) for name in self.__slots__)
        return "<ModelConfig %s>" % items


class ModelContext(object):
    """
    Bundles the objects shared by everything in one model run: the
    :py:class:`ModelConfig`, the :py:class:`~pyminicam.modeltime.Modeltime`,
    and the :py:class:`~pyminicam.marketplace.Marketplace`.
    """
    def __init__(self, config=None, modeltime=None, marketplace=None):
        self.config = config or ModelConfig()
        self.modeltime = modeltime or Modeltime()
        self.marketplace = marketplace or Marketplace(self.modeltime.getmaxper())

    def getmaxper(self):
        return self.modeltime.getmaxper()
