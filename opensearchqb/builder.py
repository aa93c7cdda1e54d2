import copy
from typing import Any, Dict, List, Optional, Union

from opensearchqb.aggs import Aggregations
from opensearchqb.clauses import QueryClauses

SourceFilter = Union[bool, str, List[str], Dict[str, Any]]


def check_argument(value, name: str, *allowed_types):
    if isinstance(value, allowed_types):
        return
    allowed = ', '.join(t.__name__ for t in allowed_types)
    raise TypeError(f'expected `{name}` to be one of: {allowed} but {type(value).__name__} was given')


def check_positive_argument(value, name: str):
    if isinstance(value, bool):
        raise TypeError(f'expected `{name}` to be int but bool was given')
    check_argument(value, name, int)
    if value < 0:
        raise ValueError(f'`{name}` should be a positive integer')


class QueryBuilder:
    """A complete search request body.

    ::

        builder = QueryBuilder().size(10).sort(timestamp='desc')
        builder.query.bool().filter().term('test_case.result', 'fail')
        builder.aggregations.avg('avg_duration', field='duration')
        body = builder.compile()
    """

    def __init__(self):
        self.query = QueryClauses()
        self.aggregations = Aggregations()
        self.__from: Optional[int] = None
        self.__size: Optional[int] = None
        self.__source: Optional[SourceFilter] = None
        self.__sort: Dict[str, Dict[str, Any]] = {}
        self.__collapse: Optional[str] = None

    def from_(self, offset: int):
        check_positive_argument(offset, 'from')
        self.__from = offset
        return self

    def size(self, size: int):
        check_positive_argument(size, 'size')
        self.__size = size
        return self

    def sort(
        self,
        fields: Optional[Dict[str, Union[str, Dict[str, Any]]]] = None,
        **kwargs: Union[str, Dict[str, Any]],
    ):
        """
        :arg fields: field name to either a direction (``asc``/``desc``) or a
            dict of sort options, e.g. ``{'test_case.started_at': 'desc'}``

        :arg kwargs: same as ``fields`` for names that are valid identifiers,
            e.g. ``price={'order': 'desc', 'missing': '_last'}``
        """
        if fields is not None:
            check_argument(fields, 'fields', dict)
        for field, ordering in {**(fields or {}), **kwargs}.items():
            self.__sort[field] = dict(ordering) if isinstance(ordering, dict) else {'order': ordering}
        return self

    def collapse(self, field: str):
        check_argument(field, 'field', str)
        self.__collapse = field
        return self

    def source(self, filter_expr: SourceFilter):
        if filter_expr is True:
            raise TypeError('`source` accepts False, a field pattern, a list of patterns or a dict')
        check_argument(filter_expr, 'source', bool, str, list, dict)
        self.__source = filter_expr
        return self

    def compile(self) -> dict:
        body: Dict[str, Any] = {}
        if self.__from is not None:
            body['from'] = self.__from
        if self.__size is not None:
            body['size'] = self.__size
        if self.__source is not None:
            body['_source'] = self.__source
        body['query'] = self.query.compile()
        if self.__sort:
            body['sort'] = [{field: ordering} for field, ordering in self.__sort.items()]
        if self.__collapse is not None:
            body['collapse'] = {'field': self.__collapse}
        body.update(self.aggregations.compile())
        return body

    def clone(self) -> 'QueryBuilder':
        cloned = QueryBuilder()
        cloned.__from = self.__from
        cloned.__size = self.__size
        cloned.__source = copy.deepcopy(self.__source)
        cloned.__sort = {field: dict(ordering) for field, ordering in self.__sort.items()}
        cloned.__collapse = self.__collapse
        cloned.query = self.query.clone()
        cloned.aggregations = self.aggregations.clone()
        return cloned

    def merge(self, other: 'QueryBuilder') -> 'QueryBuilder':
        """Combines two builders into a new one.

        Scalar settings and sort options of ``other`` take precedence, query
        clauses are combined in a ``bool`` clause and aggregations are
        concatenated.
        """
        if not isinstance(other, QueryBuilder):
            raise TypeError(f'cannot merge {self.__class__.__name__} and {other.__class__.__name__}')

        merged = QueryBuilder()
        merged.__from = _first(other.__from, self.__from)
        merged.__size = _first(other.__size, self.__size)
        merged.__source = copy.deepcopy(_first(other.__source, self.__source))
        merged.__collapse = _first(other.__collapse, self.__collapse)
        merged.__sort = {field: dict(ordering) for field, ordering in self.__sort.items()}
        merged.__sort.update((field, dict(ordering)) for field, ordering in other.__sort.items())
        merged.query = self.query.merge(other.query)
        merged.aggregations = self.aggregations.merge(other.aggregations)
        return merged


def _first(value, fallback):
    return value if value is not None else fallback
