"""
holds submodules for resolving structural variants from breakpoint graphs and copy number posteriors
"""
__version__ = '0.1.0'
