import abc
import copy
from typing import Any, Callable, Dict, List, Optional, Union

from opensearchqb.errors import QueryBuilderError
from opensearchqb.utils import compact, to_json_value


class Expr(abc.ABC):
    """A single node of a query tree."""

    @abc.abstractmethod
    def compile(self) -> dict:
        ...

    def clone(self):
        return copy.deepcopy(self)

    def __eq__(self, other):
        return type(self) is type(other) and vars(self) == vars(other)

    def __repr__(self):
        attrs = ', '.join(f'{k}={v!r}' for k, v in vars(self).items())
        return f'{self.__class__.__name__}({attrs})'


class MatchAll(Expr):
    def compile(self):
        return {'match_all': {}}


class MatchNone(Expr):
    def compile(self):
        return {'match_none': {}}


class Term(Expr):
    def __init__(self, field: str, value: Any):
        self.field = field
        self.value = value

    def compile(self):
        return {
            'term': {
                self.field: {
                    'value': to_json_value(self.value),
                }
            }
        }


class Terms(Expr):
    def __init__(self, field: str, terms: List[Any]):
        if not isinstance(terms, (list, tuple)):
            raise QueryBuilderError(f'terms clause on `{field}` expects a list of values, got {type(terms).__name__}')
        self.field = field
        self.terms = list(terms)

    def compile(self):
        if not self.terms:
            raise QueryBuilderError(f'terms clause on `{self.field}` has no values')

        return {
            'terms': {
                self.field: [to_json_value(t) for t in self.terms],
            }
        }


class Exists(Expr):
    def __init__(self, field: str):
        self.field = field

    def compile(self):
        return {
            'exists': {
                'field': self.field,
            }
        }


class MatchPhrase(Expr):
    def __init__(self, field: str, phrase: str):
        self.field = field
        self.phrase = phrase

    def compile(self):
        return {
            'match_phrase': {
                self.field: self.phrase,
            }
        }


class Range(Expr):
    BOUNDS = ('gt', 'gte', 'lt', 'lte')

    def __init__(self, field: str, *, gt=None, gte=None, lt=None, lte=None):
        self.field = field
        self.params = compact({'gt': gt, 'gte': gte, 'lt': lt, 'lte': lte})
        if not self.params:
            raise QueryBuilderError(f'at least one of {", ".join(self.BOUNDS)} should be given')

    def compile(self):
        if not self.params:
            raise QueryBuilderError(f'range clause on `{self.field}` has no bounds')

        return {
            'range': {
                self.field: {op: to_json_value(v) for op, v in self.params.items()},
            }
        }


class Wildcard(Expr):
    def __init__(self, field: str, value: str):
        self.field = field
        self.value = value

    def compile(self):
        return {
            'wildcard': {
                self.field: {
                    'value': self.value,
                }
            }
        }


class Regexp(Expr):
    def __init__(self, field: str, value: str):
        self.field = field
        self.value = value

    def compile(self):
        return {
            'regexp': {
                self.field: {
                    'value': self.value,
                }
            }
        }


class QueryString(Expr):
    def __init__(self, query: str, fields: Union[str, List[str], None] = None):
        self.query = query
        if isinstance(fields, str):
            fields = [fields]
        self.fields = list(fields) if fields is not None else None

    def compile(self):
        return {
            'query_string': compact({
                'query': self.query,
                'fields': self.fields,
            })
        }


class MatchClauses(abc.ABC):
    """Factory methods shared by everything that can hold query clauses.

    Every method builds the clause, hands it to :meth:`add` and returns the
    receiver so calls can be chained.
    """

    @abc.abstractmethod
    def add(self, clause: Expr):
        ...

    def term(self, field: str, value: Any):
        return self.add(Term(field, value))

    def terms(self, field: str, terms: List[Any]):
        return self.add(Terms(field, terms))

    def exists(self, field: str):
        return self.add(Exists(field))

    def match_phrase(self, field: str, phrase: str):
        return self.add(MatchPhrase(field, phrase))

    def range(self, field: str, **bounds):
        return self.add(Range(field, **bounds))

    def wildcard(self, field: str, value: str):
        return self.add(Wildcard(field, value))

    def regexp(self, field: str, value: str):
        return self.add(Regexp(field, value))

    def query_string(self, query: str, fields: Union[str, List[str], None] = None):
        return self.add(QueryString(query, fields))

    def match_all(self):
        return self.add(MatchAll())

    def match_none(self):
        return self.add(MatchNone())


class Bool(MatchClauses, Expr):
    """Compound ``bool`` clause.

    Select a group with :meth:`must`, :meth:`filter`, :meth:`should` or
    :meth:`must_not`; clauses added afterwards go to that group::

        Bool().must().term('status', 'open').must_not().exists('deleted_at')
    """

    GROUPS = ('must', 'filter', 'should', 'must_not')

    def __init__(self):
        self._groups: Dict[str, List[Expr]] = {}
        self._current: Optional[str] = None

    def must(self, configure: Optional[Callable[['Bool'], Any]] = None):
        return self._select('must', configure)

    def filter(self, configure: Optional[Callable[['Bool'], Any]] = None):
        return self._select('filter', configure)

    def should(self, configure: Optional[Callable[['Bool'], Any]] = None):
        return self._select('should', configure)

    def must_not(self, configure: Optional[Callable[['Bool'], Any]] = None):
        return self._select('must_not', configure)

    def _select(self, group: str, configure):
        self._groups.setdefault(group, [])
        self._current = group
        if configure is not None:
            configure(self)
        return self

    def add(self, clause: Expr):
        if self._current is None:
            raise QueryBuilderError(
                'call must, filter, should or must_not before adding clauses to a bool clause'
            )
        self._groups[self._current].append(clause)
        return self

    def group(self, name: str) -> List[Expr]:
        if name not in self.GROUPS:
            raise QueryBuilderError(f'unknown bool group: {name}')
        return list(self._groups.get(name, []))

    def compile(self):
        return {
            'bool': {
                group: [clause.compile() for clause in clauses]
                for group, clauses in self._groups.items()
                if clauses
            }
        }

    def clone(self):
        cloned = Bool()
        cloned._groups = {group: [c.clone() for c in clauses] for group, clauses in self._groups.items()}
        cloned._current = self._current
        return cloned

    def update(self, other: Expr):
        if isinstance(other, Bool):
            for group, clauses in other._groups.items():
                self._groups.setdefault(group, []).extend(c.clone() for c in clauses)
        elif isinstance(other, Expr):
            self._groups.setdefault('must', []).append(other.clone())
        else:
            raise TypeError(f'cannot merge {self.__class__.__name__} with {other.__class__.__name__}')
        return self

    def merge(self, other: Expr):
        if not isinstance(other, Expr):
            raise TypeError(f'cannot merge {self.__class__.__name__} with {other.__class__.__name__}')
        return self.clone().update(other)

    def __eq__(self, other):
        return isinstance(other, Bool) and self._non_empty() == other._non_empty()

    def _non_empty(self):
        return {group: clauses for group, clauses in self._groups.items() if clauses}
