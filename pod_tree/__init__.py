"""
pod-tree: visualize which CocoaPods depend on a pod.
"""

__version__ = "0.1.0"
