from opensearchqb.aggs import Aggregations
from opensearchqb.builder import QueryBuilder
from opensearchqb.clauses import QueryClauses
from opensearchqb.errors import AggregationsError, QueryBuilderError
from opensearchqb.negator import Negator, negate
from opensearchqb.script import Script
from opensearchqb.sources import Sources

__all__ = [
    'Aggregations',
    'AggregationsError',
    'Negator',
    'QueryBuilder',
    'QueryBuilderError',
    'QueryClauses',
    'Script',
    'Sources',
    'negate',
]
