import importlib
import pkgutil

# do from .module import * for all modules in this package
for module_info in pkgutil.iter_modules(__path__):
    module_name = module_info.name
    if module_name.startswith("_"):
        continue

    full_module_name = f"{__name__}.{module_name}"
    module = importlib.import_module(full_module_name)

    if not hasattr(module, "__all__"):
        continue

    names = module.__all__

    globals().update({name: getattr(module, name) for name in names})
