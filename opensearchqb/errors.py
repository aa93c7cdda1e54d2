from opensearchpy.exceptions import TransportError

__all__ = ['QueryBuilderError', 'AggregationsError', 'TransportError']


class QueryBuilderError(Exception):
    """A query or aggregation was configured in a way that cannot be represented."""


class AggregationsError(QueryBuilderError):
    ...
