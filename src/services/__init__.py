"""
Services layer for Preordained Swapper.
Handles pak archive tools, symbol tables and simtype patching.
"""
