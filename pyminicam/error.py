'''
.. pyminicam's Exception classes

.. Copyright (c) 2016 Richard Plevin
   See the https://opensource.org/licenses/MIT for license details.
'''
class PyminicamException(Exception):
    """
    Base class for pyminicam Exceptions.
    """
    pass

class FileMissingError(PyminicamException):
    """
    Indicate that a required file was not found or not readable.
    """

    def __init__(self, filename, reason):
        self.filename = filename
        self.reason   = reason

    def __str__(self):
        return "Can't read %s: %s" % (self.filename, self.reason)

class FileFormatError(PyminicamException):
    """
    Indicate a syntax error in a user-managed file.
    """
    pass

class XmlFormatError(FileFormatError):
    pass

class ConfigFileError(FileFormatError):
    """
    Raised when an error is found in the configuration file ``~/.pyminicam.cfg``.
    """
    pass

class CommandlineError(Exception):
    """
    Command-line arguments were missing or incorrectly specified.
    """
    pass

class SolverError(PyminicamException):
    """
    Raised when the solver is asked to do something it cannot, e.g., solve
    a period outside the model time horizon.
    """
    pass
