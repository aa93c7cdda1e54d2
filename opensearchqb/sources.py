from typing import Iterator, List, Optional

from pydantic import BaseModel


class TermsSource(BaseModel):
    """A ``terms`` value source of a composite aggregation.

    ``order`` (``asc``/``desc``) and ``missing_order`` (``first``/``last``) are
    passed through as given, the backend rejects invalid values.
    """

    name: str
    field: str
    order: Optional[str] = None
    missing_bucket: Optional[bool] = None
    missing_order: Optional[str] = None

    def compile(self) -> dict:
        return {
            self.name: {
                'terms': self.model_dump(exclude={'name'}, exclude_none=True),
            }
        }

    def clone(self) -> 'TermsSource':
        return self.model_copy(deep=True)


class Sources:
    """Ordered value sources, their order is the order of the composite key."""

    def __init__(self):
        self.__sources: List[TermsSource] = []

    def terms(
        self,
        name: str,
        field: str,
        order: Optional[str] = None,
        missing_bucket: Optional[bool] = None,
        missing_order: Optional[str] = None,
    ):
        self.__sources.append(
            TermsSource(
                name=name,
                field=field,
                order=order,
                missing_bucket=missing_bucket,
                missing_order=missing_order,
            )
        )
        return self

    def compile(self) -> List[dict]:
        return [source.compile() for source in self.__sources]

    def clone(self) -> 'Sources':
        cloned = Sources()
        cloned.__sources.extend(source.clone() for source in self.__sources)
        return cloned

    def __iter__(self) -> Iterator[TermsSource]:
        return iter(self.__sources)

    def __len__(self):
        return len(self.__sources)

    def __getitem__(self, index: int) -> TermsSource:
        return self.__sources[index]

    def __eq__(self, other):
        return isinstance(other, Sources) and self.__sources == other.__sources
