"""
ziprename - Batch rename and pre-flight analysis for ZIP archives
"""

__version__ = "1.0.0"
