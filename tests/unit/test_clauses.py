"""Unit tests for the top-level query clauses container."""

import pytest

from opensearchqb.clauses import QueryClauses
from opensearchqb.errors import QueryBuilderError
from opensearchqb.query import Bool, MatchAll, Term

FAIL_TERM = {'term': {'test_case.result': {'value': 'fail'}}}


class TestDefaults:
    def test_empty_query_matches_all(self, query):
        assert query.empty
        assert query.compile() == {'match_all': {}}
        assert query.current == MatchAll()

    def test_single_clause(self, failing_query):
        assert not failing_query.empty
        assert failing_query.compile() == FAIL_TERM


class TestAdd:
    def test_second_top_level_clause_is_an_error(self, failing_query):
        with pytest.raises(QueryBuilderError):
            failing_query.exists('build.id')

    def test_add_returns_the_container(self, query):
        assert query.add(Term('a', 1)) is query

    def test_match_all_replaces_current_clause(self, failing_query):
        assert failing_query.match_all().compile() == {'match_all': {}}

    def test_match_none_replaces_current_clause(self, failing_query):
        assert failing_query.match_none().compile() == {'match_none': {}}


class TestBool:
    def test_empty_query_becomes_bool(self, query):
        clause = query.bool()
        assert isinstance(clause, Bool)
        assert query.is_boolean
        assert query.compile() == {'bool': {}}

    def test_bool_is_reused(self, query):
        assert query.bool() is query.bool()

    def test_match_all_is_replaced(self, query):
        query.match_all().bool().filter().exists('x')
        assert query.compile() == {'bool': {'filter': [{'exists': {'field': 'x'}}]}}

    def test_existing_clause_moves_to_must(self, failing_query):
        failing_query.bool().must_not().exists('skipped')
        assert failing_query.compile() == {
            'bool': {'must': [FAIL_TERM], 'must_not': [{'exists': {'field': 'skipped'}}]}
        }

    def test_configure_returns_container(self, query):
        result = query.bool(lambda b: b.should().term('a', 1).term('a', 2))
        assert result is query
        assert query.compile() == {
            'bool': {'should': [{'term': {'a': {'value': 1}}}, {'term': {'a': {'value': 2}}}]}
        }


class TestNegation:
    def test_negate_inplace_cycles_base_cases(self, query):
        assert query.negate_inplace().compile() == {'match_none': {}}
        assert query.negate_inplace().compile() == {'match_all': {}}

    def test_negate_inplace_wraps(self, failing_query):
        failing_query.negate_inplace()
        assert failing_query.compile() == {'bool': {'must_not': [FAIL_TERM]}}

    def test_negate_inplace_twice_double_wraps(self, failing_query):
        failing_query.negate_inplace().negate_inplace()
        assert failing_query.compile() == {'bool': {'must_not': [{'bool': {'must_not': [FAIL_TERM]}}]}}

    def test_negate_does_not_modify_receiver(self, failing_query):
        before = failing_query.compile()
        negated = failing_query.negate()
        assert negated.compile() == {'bool': {'must_not': [FAIL_TERM]}}
        assert failing_query.compile() == before == FAIL_TERM

    def test_negate_of_bool_does_not_modify_receiver(self, query):
        query.bool().must().term('a', 1)
        before = query.compile()
        negated = query.negate()
        negated.current.group('must_not')[0].must().term('b', 2)
        assert query.compile() == before

    def test_negate_empty_query(self, query):
        assert query.negate().compile() == {'match_none': {}}
        assert query.empty


class TestCloneAndMerge:
    def test_clone_is_deep(self, query):
        query.bool().must().term('a', 1)
        copy = query.clone()
        copy.bool().term('b', 2)
        assert query.compile() == {'bool': {'must': [{'term': {'a': {'value': 1}}}]}}
        assert copy == copy.clone()

    def test_clone_of_empty_query_is_empty(self, query):
        assert query.clone().empty

    def test_merge_with_empty(self, failing_query, query):
        assert failing_query.merge(query).compile() == FAIL_TERM
        assert query.merge(failing_query).compile() == FAIL_TERM

    def test_merge_two_clauses(self, failing_query):
        other = QueryClauses().exists('build.id')
        assert failing_query.merge(other).compile() == {
            'bool': {'must': [FAIL_TERM, {'exists': {'field': 'build.id'}}]}
        }

    def test_merge_rejects_other_types(self, query):
        with pytest.raises(TypeError):
            query.merge(Term('a', 1))
