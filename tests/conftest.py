"""Shared pytest fixtures."""

import pytest

from opensearchqb.clauses import QueryClauses
from opensearchqb.sources import Sources


@pytest.fixture
def query() -> QueryClauses:
    """An empty query context."""
    return QueryClauses()


@pytest.fixture
def failing_query() -> QueryClauses:
    """A query holding a single term clause."""
    return QueryClauses().term('test_case.result', 'fail')


@pytest.fixture
def product_sources() -> Sources:
    """Product/brand sources, the first one ordered."""
    return Sources().terms('product', field='product.name', order='asc').terms('brand', field='brand.name')
