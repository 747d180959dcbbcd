"""Pytest fixtures for core tests."""

import pytest


@pytest.fixture
def sample_tree():
    """Tree with two roots over one set of edges.

    Structure (edges drawn undirected):
        n1 ── n2
        └── n3 ── n4 ── n5
            │     └── n6
            └── n7 ── n8
                  └── n9
    Roots: n1, n9
    """
    from tests.core.graph_test_helpers import build_tree

    return build_tree(
        [
            ("n1", "n2"),
            ("n1", "n3"),
            ("n3", "n4"),
            ("n3", "n7"),
            ("n4", "n5"),
            ("n4", "n6"),
            ("n7", "n8"),
            ("n7", "n9"),
        ],
        roots=("n1", "n9"),
    )


@pytest.fixture
def taxa():
    """Taxon set with two taxa."""
    from nexmap.graph import Otu, Otus

    otus = Otus("taxa1", label="Primates")
    otus << Otu("t1", label="Homo sapiens") << Otu("t2", label="Pan paniscus")
    return otus
