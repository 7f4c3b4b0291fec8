from .config_plugin import ConfigCommand
from .graph_plugin import GraphCommand
from .run_plugin import RunCommand

BuiltinSubcommands = [ConfigCommand, GraphCommand, RunCommand]
