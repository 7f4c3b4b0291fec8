'''
.. Reading model input XML and extracting per-period values.

.. Copyright (c) 2016 Richard Plevin
   See the https://opensource.org/licenses/MIT for license details.
'''
import os

from lxml import etree as ET

from .error import XmlFormatError, FileMissingError
from .log import getLogger

_logger = getLogger(__name__)

class XMLFile(object):
    """
    Stores information about an XML file; provides wrapper to parse and access
    the file tree.

    :param filename: (str) The pathname to the XML file
    :param load: (bool) If True, the file is loaded, otherwise, the instance is
       set up, but the file is not read.
    :param removeComments: (bool) If True, comments are discarded upon reading the file.
    """
    def __init__(self, filename, load=True, removeComments=True):
        self.filename = filename
        self.tree = None
        self.removeComments = removeComments

        if filename and load:
            self.read()

    def getRoot(self):
        'Return the root node of the parse tree'
        return self.tree.getroot()

    def getTree(self):
        'Return XML parse tree.'
        return self.tree

    def getFilename(self):
        'Return the filename for this ``XMLFile``'
        return self.filename

    def read(self):
        """
        Read the XML file.
        """
        filename = self.filename

        if not os.path.lexists(filename):
            raise FileMissingError(filename, "can't read XML file")

        _logger.debug("Reading '%s'", filename)
        parser = ET.XMLParser(remove_blank_text=True, remove_comments=self.removeComments)

        try:
            self.tree = ET.parse(filename, parser)

        except ET.XMLSyntaxError as e:
            raise XmlFormatError("Can't read XML file '%s': %s" % (filename, e))

        return self.tree

def parseString(text):
    """
    Parse XML from a string and return the root element. Used mainly for testing.
    """
    parser = ET.XMLParser(remove_blank_text=True, remove_comments=True)
    try:
        return ET.fromstring(text.encode('utf-8') if isinstance(text, str) else text, parser)
    except ET.XMLSyntaxError as e:
        raise XmlFormatError("Can't parse XML text: %s" % e)

def childElements(node):
    """
    Iterate over the element children of `node`, skipping comments and
    processing instructions.
    """
    return (child for child in node if isinstance(child.tag, str))

def getValueString(node):
    return (node.text or '').strip()

def getValueFloat(node):
    """
    Return the text of `node` as a float.

    :raises XmlFormatError: if the text is not numeric
    """
    text = getValueString(node)
    try:
        return float(text)
    except ValueError:
        raise XmlFormatError("Element <%s> (line %s): '%s' is not a number" % (node.tag, node.sourceline, text))

def insertValueIntoVector(node, values, modeltime, specified=None):
    """
    Store the numeric value of `node` into `values` at the period given by
    its "year" attribute (or "period" attribute, or period 0 if neither is
    given). Years that are not model years are logged and ignored.

    :param node: (lxml.etree.Element) an element such as <price year="1990">2.1</price>
    :param values: (numpy.ndarray) per-period values
    :param modeltime: (Modeltime) converts years to periods
    :param specified: (numpy.ndarray of bool) if not None, set True at the period stored
    :return: (int) the period set, or None if the year was ignored
    """
    value = getValueFloat(node)
    year = node.get('year')

    if year is not None:
        period = modeltime.getyr_to_per(year, raiseError=False)
        if period is None:
            _logger.warning("Ignoring <%s> for year %s, which is not a model year", node.tag, year)
            return None
    else:
        period = int(node.get('period', 0))
        if not 0 <= period < len(values):
            _logger.warning("Ignoring <%s> for period %d, which is out of range", node.tag, period)
            return None

    values[period] = value
    if specified is not None:
        specified[period] = True

    return period
