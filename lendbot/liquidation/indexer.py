"""
Indexed user list, read from the protocol's subgraph.
"""

from typing import List, Optional

from web3 import Web3

from .decorators import post_graphql_request, retry_request
from .exceptions import DataSourceError
from .logging_config import setup_logger

logger = setup_logger()

USERS_QUERY = """
query Users($first: Int!, $lastId: String!) {
  users(first: $first, orderBy: id, orderDirection: asc, where: { id_gt: $lastId }) {
    id
  }
}
"""


class IndexerClient:
    """
    Fetches user addresses page by page. The first successful result is
    cached and returned on later calls.
    """

    def __init__(self, url: str, page_size: int = 1000, timeout: int = 30, max_retries: int = 1, retry_delay: int = 10):
        self.url = url
        self.page_size = page_size
        self.timeout = timeout
        self._post = retry_request(logger, max_retries, retry_delay)(post_graphql_request)
        self._users: Optional[List[str]] = None

    @classmethod
    def from_config(cls, config) -> "IndexerClient":
        return cls(
            config.INDEXER_URL,
            page_size=config.INDEXER_PAGE_SIZE,
            timeout=config.INDEXER_TIMEOUT,
            max_retries=config.INDEXER_MAX_RETRIES,
            retry_delay=config.INDEXER_RETRY_DELAY,
        )

    def fetch_users(self) -> List[str]:
        if self._users is not None:
            return self._users

        users: List[str] = []
        last_id = ""
        while True:
            data = self._post(self.url, USERS_QUERY, {"first": self.page_size, "lastId": last_id}, self.timeout)
            page = data.get("users")
            if not isinstance(page, list):
                raise DataSourceError("Indexer response has no users list")

            for entry in page:
                try:
                    users.append(Web3.to_checksum_address(entry["id"]))
                except (KeyError, TypeError, ValueError) as exc:
                    raise DataSourceError(f"Malformed user entry from indexer: {entry}") from exc

            if len(page) < self.page_size:
                break
            last_id = page[-1]["id"]

        logger.info("Indexer: fetched %s users", len(users))
        self._users = users
        return users
