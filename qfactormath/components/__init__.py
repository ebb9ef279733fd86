"""
System components for qfactormath.
"""

from qfactormath.components.config import Config, ConfigManager
