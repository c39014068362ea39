"""layoutgen -- declarative project layouts.

Generates directory trees and language-specific module wiring from a
``layout.yml`` specification, and keeps that specification in sync with the
files that actually exist.
"""

__version__ = "0.1.0"
