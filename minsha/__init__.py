# Copyright (c) 2024 iiPython

__version__ = "0.1.0"
