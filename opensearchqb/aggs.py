import abc
import copy
from typing import Any, Callable, Dict, List, Optional, Union

from opensearchqb.clauses import QueryClauses
from opensearchqb.errors import AggregationsError
from opensearchqb.script import Script
from opensearchqb.sources import Sources
from opensearchqb.utils import compact


class Aggregation(abc.ABC):
    type_name: str

    def __init__(self, name: str) -> None:
        self.name = name
        self._aggregations: Optional['Aggregations'] = None

    def aggs(self, configure: Optional[Callable[['Aggregations'], Any]] = None):
        """Nested aggregations of this one.

        Without ``configure`` the (lazily created) collection is returned,
        otherwise it is passed to ``configure`` and the aggregation itself is
        returned.
        """
        if self._aggregations is None:
            self._aggregations = Aggregations()
        if configure is None:
            return self._aggregations

        configure(self._aggregations)
        return self

    @abc.abstractmethod
    def body(self) -> dict:
        ...

    @abc.abstractmethod
    def clone(self) -> 'Aggregation':
        ...

    def compile(self) -> dict:
        document = {self.type_name: self.body()}
        if self._aggregations is not None:
            document.update(self._aggregations.compile())
        return {self.name: document}

    def _with_nested(self, cloned: 'Aggregation') -> 'Aggregation':
        if self._aggregations is not None:
            cloned._aggregations = self._aggregations.clone()
        return cloned


class MetricAggregation(Aggregation):
    def aggs(self, configure=None):
        raise AggregationsError(f'the {self.type_name} aggregation cannot have nested aggregations')


class BucketAggregation(Aggregation):
    ...


class FieldMetric(MetricAggregation):
    def __init__(self, name: str, field: str, missing: Any = None) -> None:
        super().__init__(name)
        self.field = field
        self.missing = missing

    def body(self):
        return compact({
            'field': self.field,
            'missing': self.missing,
        })

    def clone(self):
        return self.__class__(self.name, self.field, self.missing)


class Avg(FieldMetric):
    type_name = 'avg'


class Sum(FieldMetric):
    type_name = 'sum'


class Min(FieldMetric):
    type_name = 'min'


class Max(FieldMetric):
    type_name = 'max'


class Cardinality(MetricAggregation):
    type_name = 'cardinality'

    def __init__(self, name: str, field: str) -> None:
        super().__init__(name)
        self.field = field

    def body(self):
        return {
            'field': self.field,
        }

    def clone(self):
        return Cardinality(self.name, self.field)


class ValueCount(MetricAggregation):
    type_name = 'value_count'

    def __init__(self, name: str, field: str) -> None:
        super().__init__(name)
        self.field = field

    def body(self):
        return {
            'field': self.field,
        }

    def clone(self):
        return ValueCount(self.name, self.field)


class TopHits(MetricAggregation):
    type_name = 'top_hits'

    def __init__(self, name: str, size: int) -> None:
        super().__init__(name)
        self.size = size

    def body(self):
        return {
            'size': self.size,
        }

    def clone(self):
        return TopHits(self.name, self.size)


class ScriptedMetric(MetricAggregation):
    type_name = 'scripted_metric'

    def __init__(
        self,
        name: str,
        map_script: str,
        combine_script: str,
        reduce_script: str,
        init_script: Optional[str] = None,
    ) -> None:
        super().__init__(name)
        self.init_script = init_script
        self.map_script = map_script
        self.combine_script = combine_script
        self.reduce_script = reduce_script

    def body(self):
        return compact({
            'init_script': self.init_script,
            'map_script': self.map_script,
            'combine_script': self.combine_script,
            'reduce_script': self.reduce_script,
        })

    def clone(self):
        return ScriptedMetric(
            self.name,
            self.map_script,
            self.combine_script,
            self.reduce_script,
            init_script=self.init_script,
        )


class BucketSelector(MetricAggregation):
    """Pipeline aggregation keeping the buckets of its parent for which ``script`` holds."""

    type_name = 'bucket_selector'

    def __init__(
        self,
        name: str,
        buckets_path: Union[str, Dict[str, str]],
        script: Script,
        gap_policy: Optional[str] = None,
    ) -> None:
        super().__init__(name)
        self.buckets_path = buckets_path
        self.script = script
        self.gap_policy = gap_policy

    def body(self):
        return compact({
            'buckets_path': self.buckets_path,
            'script': self.script.compile(),
            'gap_policy': self.gap_policy,
        })

    def clone(self):
        return BucketSelector(self.name, copy.deepcopy(self.buckets_path), self.script, self.gap_policy)


class Terms(BucketAggregation):
    type_name = 'terms'

    def __init__(
        self,
        name: str,
        field: Optional[str] = None,
        script: Optional[Script] = None,
        size: Optional[int] = None,
        order: Union[Dict[str, str], List[Dict[str, str]], None] = None,
    ) -> None:
        if (field is None) == (script is None):
            raise AggregationsError('either field or script must be given to a terms aggregation')

        super().__init__(name)
        self.field = field
        self.script = script
        self.size = size
        self.order = order

    def body(self):
        return compact({
            'field': self.field,
            'size': self.size,
            'script': self.script.compile() if self.script else None,
            'order': self.order,
        })

    def clone(self):
        return self._with_nested(
            Terms(self.name, self.field, self.script, self.size, copy.deepcopy(self.order))
        )


class DateHistogram(BucketAggregation):
    type_name = 'date_histogram'

    def __init__(self, name: str, field: str, calendar_interval: str, format: Optional[str] = None) -> None:
        super().__init__(name)
        self.field = field
        self.calendar_interval = calendar_interval
        self.format = format

    def body(self):
        return compact({
            'field': self.field,
            'calendar_interval': self.calendar_interval,
            'format': self.format,
        })

    def clone(self):
        return self._with_nested(DateHistogram(self.name, self.field, self.calendar_interval, self.format))


class Filter(BucketAggregation):
    type_name = 'filter'

    def __init__(self, name: str, configure: Optional[Callable[[QueryClauses], Any]] = None) -> None:
        super().__init__(name)
        self.query = QueryClauses()
        if configure is not None:
            configure(self.query)

    def body(self):
        return self.query.compile()

    def clone(self):
        cloned = Filter(self.name)
        cloned.query = self.query.clone()
        return self._with_nested(cloned)


class Composite(BucketAggregation):
    """Buckets keyed by the combination of several value sources.

    ``size`` is the page size, the backend's default applies when omitted.
    """

    type_name = 'composite'

    def __init__(
        self,
        name: str,
        size: Optional[int] = None,
        configure: Optional[Callable[[Sources], Any]] = None,
    ) -> None:
        super().__init__(name)
        self.size = size
        self.sources = Sources()
        if configure is not None:
            configure(self.sources)

    def body(self):
        return compact({
            'sources': self.sources.compile(),
            'size': self.size,
        })

    def clone(self):
        cloned = Composite(self.name, self.size)
        cloned.sources = self.sources.clone()
        return self._with_nested(cloned)


class Aggregations:
    """The aggregations of a query, or the nested aggregations of a bucket aggregation.

    Each factory method adds the aggregation and returns it, so nested
    aggregations can be attached to it afterwards.
    """

    def __init__(self) -> None:
        self.__aggregations: List[Aggregation] = []

    def add(self, aggregation: Aggregation) -> Aggregation:
        self.__aggregations.append(aggregation)
        return aggregation

    def avg(self, name: str, field: str, missing: Any = None):
        return self.add(Avg(name, field, missing))

    def sum(self, name: str, field: str, missing: Any = None):
        return self.add(Sum(name, field, missing))

    def min(self, name: str, field: str, missing: Any = None):
        return self.add(Min(name, field, missing))

    def max(self, name: str, field: str, missing: Any = None):
        return self.add(Max(name, field, missing))

    def cardinality(self, name: str, field: str):
        return self.add(Cardinality(name, field))

    def value_count(self, name: str, field: str):
        return self.add(ValueCount(name, field))

    def top_hits(self, name: str, size: int):
        return self.add(TopHits(name, size))

    def scripted_metric(self, name: str, map_script: str, combine_script: str, reduce_script: str,
                        init_script: Optional[str] = None):
        return self.add(ScriptedMetric(name, map_script, combine_script, reduce_script, init_script))

    def bucket_selector(self, name: str, buckets_path, script: Script, gap_policy: Optional[str] = None):
        return self.add(BucketSelector(name, buckets_path, script, gap_policy))

    def terms(self, name: str, field: Optional[str] = None, script: Optional[Script] = None,
              size: Optional[int] = None, order=None):
        return self.add(Terms(name, field, script, size, order))

    def date_histogram(self, name: str, field: str, calendar_interval: str, format: Optional[str] = None):
        return self.add(DateHistogram(name, field, calendar_interval, format))

    def filter(self, name: str, configure: Optional[Callable[[QueryClauses], Any]] = None):
        return self.add(Filter(name, configure))

    def composite(self, name: str, size: Optional[int] = None,
                  configure: Optional[Callable[[Sources], Any]] = None):
        return self.add(Composite(name, size, configure))

    def compile(self) -> dict:
        if not self.__aggregations:
            return {}

        aggs = {}
        for aggregation in self.__aggregations:
            aggs.update(aggregation.compile())
        return {'aggs': aggs}

    def clone(self) -> 'Aggregations':
        cloned = Aggregations()
        cloned.__aggregations.extend(a.clone() for a in self.__aggregations)
        return cloned

    def merge(self, other: 'Aggregations') -> 'Aggregations':
        if not isinstance(other, Aggregations):
            raise TypeError(f'cannot merge {self.__class__.__name__} with {other.__class__.__name__}')

        merged = self.clone()
        merged.__aggregations.extend(a.clone() for a in other.__aggregations)
        return merged

    def __iter__(self):
        return iter(self.__aggregations)

    def __len__(self):
        return len(self.__aggregations)
