'''
.. Copyright (c) 2016 Richard Plevin
   See the https://opensource.org/licenses/MIT for license details.
'''
from abc import ABCMeta, abstractmethod

# Fixes help strings to display properly with argparse
def clean_help(s):
    lines = s.splitlines()
    return ' '.join(map(lambda s: s.strip(), lines))

class SubcommandABC(metaclass=ABCMeta):
    """
    Abstract base class for sub-commands. Defines the protocol expected by ``mct``
    for defining sub-commands. Built-in sub-commands live in ``pyminicam.built_ins``
    in files named ``'*_plugin.py'``, each defining a subclass of ``SubcommandABC``
    identified by the global variable ``PluginClass``.

    :param name: (str) the name of the sub-command
    :param subparsers: an object returned by argparse's ``parser.add_subparsers()``
    :param kwargs: (dict) keywords to pass to the the call to argparse's
       ``subparsers.add_parser(name, **kwargs)``, e.g., to pass `help` or
       `documentation` strings.
    :param group: (str) the name of the group to list this sub-command under.
    """
    Instances = {}  # SubCommand instances keyed by name

    @classmethod
    def getInstance(cls, name):
        return SubcommandABC.Instances.get(name)

    def __init__(self, name, subparsers, kwargs, group=None):
        self.name = name
        self.parser = parser = subparsers.add_parser(self.name, **kwargs)
        self.Instances[self.name] = self
        self.group = group or 'main'

        self.addArgs(parser)

    def __str__(self):
        clsName = type(self).__name__
        return "<%s name=%s group=%s>" % (clsName, self.name, self.group)

    def getGroup(self):
        return self.group

    @abstractmethod
    def addArgs(self, parser):
        """
        Add command-line arguments to the given `parser`. (This is an
        abstract method that must be implemented in the subclass.)

        :param parser: the sub-parser associated with this sub-command.

        :return: the populated parser
        """
        pass

    @abstractmethod
    def run(self, args, tool):
        """
        Perform the function intended by the ``SubcommandABC`` subclass. This function
        is invoked by ``mct`` on the ``SubcommandABC`` instance whose name matches the
        given sub-command. (This is an  abstract method that must be implemented in
        the subclass.)

        :param args: the argument dictionary
        :param tool: the MiniCamTool instance for the main command
        :return: nothing
        """
        pass
