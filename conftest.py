import os
import sys

# Make the `nepeta` package importable when the tests run from a source checkout without installing it.
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__))))
