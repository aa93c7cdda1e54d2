import logging
from typing import Dict, Optional, Type

from opensearchqb.query import Bool, Expr, MatchAll, MatchNone

INVERSE_CLAUSES: Dict[Type[Expr], Type[Expr]] = {
    MatchAll: MatchNone,
    MatchNone: MatchAll,
}


class Negator:
    """Computes the negation of a single query clause.

    ``match_all`` and ``match_none`` are swapped for each other, every other
    clause is wrapped in the ``must_not`` group of a new ``bool`` clause. Only
    one step is taken: negating a ``must_not`` wrapper wraps it again.
    """

    def __init__(self, clause: Expr):
        self.clause = clause
        self.__negated: Optional[Expr] = None

    def negate(self) -> Expr:
        if self.__negated is None:
            inverse = INVERSE_CLAUSES.get(type(self.clause))
            if inverse is not None:
                self.__negated = inverse()
            else:
                self.__negated = Bool().must_not().add(self.clause)
            logging.debug('negate %r -> %r', self.clause, self.__negated)

        return self.__negated


def negate(clause: Expr) -> Expr:
    return Negator(clause).negate()
