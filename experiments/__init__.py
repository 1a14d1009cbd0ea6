"""Auto-discover experiment modules.

Each subdirectory is an experiment. Importing this package triggers the
@ExperimentRegistry.register decorators in each experiment's runner.
"""

import importlib
import pkgutil

for _, name, is_pkg in pkgutil.iter_modules(__path__):
    if is_pkg:
        importlib.import_module(f'.{name}', __package__)
