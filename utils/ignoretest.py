## Usage:
# PYTHONPATH=utils:$PYTHONPATH pylint --load-plugins ignoretest blindcred
#
# blindcred keeps its tests at the bottom of each module; this plugin hides
# the test functions and fixtures from the linter.

from astroid import MANAGER
from astroid import nodes

def register(linter):
    pass

def transform(module):
    for name in list(module.locals):
        node = module.locals[name][0]
        if name.startswith("test_") and isinstance(node, nodes.FunctionDef) \
                and node in module.body:
            module.body.remove(node)

MANAGER.register_transform(nodes.Module, transform)
