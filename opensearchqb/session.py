import json
import logging
from typing import List, Optional, Union

from opensearchpy import OpenSearch

from opensearchqb.builder import QueryBuilder

Host = Union[str, dict]
Document = Union[dict, QueryBuilder]


class SearchSession:
    def __init__(self, hosts: Union[Host, List[Host]], user: str, password: str, **kwargs) -> None:
        """
        :arg hosts: list of nodes, or a single node, we should connect to.
            Node should be a dictionary ({"host": "localhost", "port": 9200}),
            the entire dictionary will be passed to the :class:`~opensearchpy.Connection`
            class as kwargs, or a string in the format of ``host[:port]`` which will be
            translated to a dictionary automatically.

        :arg user: http auth username

        :arg password: http auth password

        :arg kwargs: any additional arguments will be passed on to the opensearch-py call
        """
        self.client = OpenSearch(
            hosts=hosts,
            http_auth=(user, password),
            http_compress=True,
            **kwargs,
        )

    def __enter__(self):
        return self

    def __exit__(self, type, value, traceback):
        self.client.close()

    def send(self, document: Document, index: Optional[str] = None, **kwargs):
        """
        Sends a search request and returns the raw response. Failures raise
        :class:`~opensearchpy.exceptions.TransportError` and are not retried.

        :arg document: a compiled request body or a :class:`QueryBuilder`

        :arg index: index or comma separated indices to search, all when omitted

        :arg kwargs: any additional arguments will be passed on to the opensearch-py call
        """
        body = _compile(document)
        logging.debug('query:\n%s', json.dumps(body, default=str))
        return self.client.search(body=body, index=index, **kwargs)

    def count(self, document: Document, index: Optional[str] = None, **kwargs) -> int:
        """
        :arg kwargs: any additional arguments will be passed on to the opensearch-py call
        """
        compiled = _compile(document)
        body = {'query': compiled['query']} if 'query' in compiled else {}
        logging.debug('query:\n%s', json.dumps(body, default=str))
        resp = self.client.count(body=body, index=index, **kwargs)
        return resp['count']


def _compile(document: Document) -> dict:
    if isinstance(document, QueryBuilder):
        return document.compile()
    return document
