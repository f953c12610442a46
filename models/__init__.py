import importlib
import glob
import os

# List all model files next to this one
models = glob.glob(os.path.join(os.path.dirname(__file__), "*.py"))
modules = []

for file in sorted(models):
    # Extract the module name from the file path
    module_name = f"models.{os.path.basename(file)[:-3]}"
    if module_name != "models.__init__":
        # Import the module dynamically
        module = importlib.import_module(module_name)
        modules.append(module)

# Emulate from module import * behaviour
for module in modules:
    names = [name for name in module.__dict__ if not name.startswith('_')]
    globals().update({name: getattr(module, name) for name in names})
