from typing import Any, Callable, Optional

from opensearchqb.errors import QueryBuilderError
from opensearchqb.negator import Negator
from opensearchqb.query import Bool, Expr, MatchAll, MatchClauses, MatchNone


class QueryClauses(MatchClauses):
    """The top-level clause of a query context.

    A query holds a single top-level clause. Nothing added means ``match_all``.
    To combine several clauses go through :meth:`bool`::

        query = QueryClauses()
        query.bool().must().term('test_case.result', 'fail').exists('build')
    """

    def __init__(self):
        self.__clause: Optional[Expr] = None

    @property
    def empty(self) -> bool:
        return self.__clause is None

    @property
    def is_boolean(self) -> bool:
        return isinstance(self.__clause, Bool)

    @property
    def current(self) -> Expr:
        return self.__clause if self.__clause is not None else MatchAll()

    def add(self, clause: Expr):
        if self.__clause is not None:
            raise QueryBuilderError(
                'a query can only have one top-level clause, use bool to combine several clauses'
            )
        self.__clause = clause
        return self

    def bool(self, configure: Optional[Callable[[Bool], Any]] = None):
        """Turns the query into a boolean query.

        Returns the top-level ``bool`` clause, or the container itself when
        ``configure`` is given (the clause is passed to it instead). An
        implicit or explicit ``match_all`` is replaced by an empty ``bool``;
        any other clause is moved into the ``must`` group.
        """
        clause = self.__clause
        if not isinstance(clause, Bool):
            wrapped = Bool()
            if clause is not None and not isinstance(clause, MatchAll):
                wrapped.must().add(clause)
            self.__clause = clause = wrapped

        if configure is not None:
            configure(clause)
            return self
        return clause

    def match_all(self):
        self.__clause = MatchAll()
        return self

    def match_none(self):
        self.__clause = MatchNone()
        return self

    def negate_inplace(self):
        self.__clause = Negator(self.current).negate()
        return self

    def negate(self) -> 'QueryClauses':
        return self.clone().negate_inplace()

    def compile(self) -> dict:
        return self.current.compile()

    def clone(self) -> 'QueryClauses':
        cloned = QueryClauses()
        if self.__clause is not None:
            cloned.add(self.__clause.clone())
        return cloned

    def merge(self, other: 'QueryClauses') -> 'QueryClauses':
        if not isinstance(other, QueryClauses):
            raise TypeError(f'cannot merge {self.__class__.__name__} with {other.__class__.__name__}')

        if other.empty:
            return self.clone()
        if self.empty:
            return other.clone()

        merged = QueryClauses()
        merged.bool().update(self.current).update(other.current)
        return merged

    def __eq__(self, other):
        return isinstance(other, QueryClauses) and self.current == other.current

    def __repr__(self):
        return f'QueryClauses({self.current!r})'
