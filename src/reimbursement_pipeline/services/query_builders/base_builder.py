# query_builders/base_builder.py

from abc import ABC, abstractmethod
from typing import Tuple, Dict


class BaseQueryBuilder(ABC):
    """
    Abstract base class for subgraph query builders.

    Builders only produce GraphQL text and variables; executing the query and
    interpreting the result belongs to the readers.
    """

    @abstractmethod
    def build_query(self, *args, **kwargs) -> Tuple[str, Dict]:
        """
        Build a GraphQL query.

        Returns:
            Tuple of (GraphQL query string, variables dict)
        """
        pass
