"""Module dependency graph: loading, package grouping, algorithms."""

from .loader import load, load_graph_file
from .models import Edge, Graph, Module, Package, PackageSet
from .packages import group_into_packages, prefix_grouping

__all__ = [
    "Edge",
    "Graph",
    "Module",
    "Package",
    "PackageSet",
    "group_into_packages",
    "load",
    "load_graph_file",
    "prefix_grouping",
]
