"""compile extension metadata into block editor JSON definitions and toolbox XML"""

__version__ = "0.1.0"
