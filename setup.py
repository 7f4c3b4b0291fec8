from pyminicam.version import VERSION

from setuptools import setup

requirements = [
    'lxml',
    'numpy',
    'pandas',
]

extras_requirements = {
    'test': ['pytest'],
}

long_description = '''
pyminicam
=========

The ``pyminicam`` package implements the market-clearing core of the MiniCAM
integrated assessment model: sectors whose output is shared among competing
subsectors according to relative cost, subject to fixed outputs, capacity
limits and calibration targets, solved iteratively period by period.

Core functionality
------------------

* Logit share calculation with fixed-output reconciliation and capacity-limit
  redistribution.

* Calibration of subsector share weights to observed outputs.

* Aggregation of prices, outputs, fuel consumption and emissions by sector
  and region.

* Ordering of sector calculations by input dependencies, with Graphviz output
  of the dependency graph.

* Scenarios read from model input XML, with results returned as pandas
  DataFrames.

* The ``mct`` ("MiniCAM tool") script, with sub-commands to run scenarios,
  graph sector dependencies, and display configuration settings.

* Customization through a configuration system based on ``~/.pyminicam.cfg``.
'''

setup(
    name='pyminicam',
    version=VERSION,
    description='Python 3 implementation of the MiniCAM sector share and price solution',
    long_description=long_description,
    platforms=['Windows', 'MacOS', 'Linux'],

    packages=['pyminicam', 'pyminicam.built_ins'],
    package_data={'pyminicam': ['etc/*.cfg']},
    entry_points={'console_scripts': ['mct = pyminicam.tool:main']},
    install_requires=requirements,
    extras_require=extras_requirements,
    include_package_data = True,

    license='MIT License',
    author='Richard Plevin',
    author_email='rich@plevin.com',

    classifiers=[
          'Development Status :: 4 - Beta',
          'License :: OSI Approved :: MIT License',
          'Intended Audience :: Science/Research',
          ],

    zip_safe=False,
)
