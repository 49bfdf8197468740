"""
openFDA drug label client.
Builds label search queries, fetches records and reduces them to the requested fields.
"""
import json
from typing import Any, Optional
from urllib.parse import quote
import httpx

from config import Config
from models.chat_models import SearchConstraint, StructuredSearch
from utils.errors import FDAApiError
from utils.http_client import HTTPClientManager
from utils.logger import app_logger

# Characters encodeURIComponent leaves alone
_URI_COMPONENT_SAFE = "-_.!~*'()"


def encode_component(value: Any) -> str:
    """Percent-encode a value the way encodeURIComponent does."""
    return quote(str(value), safe=_URI_COMPONENT_SAFE)


def extract_fields_from_results(results: list[dict], fields_to_return: list[str]) -> list[dict]:
    """
    Reduce each record to the requested fields.

    Args:
        results: Records from the openFDA response
        fields_to_return: Field names to keep

    Returns:
        One dict per record with exactly the requested keys (None when absent)
    """
    return [
        {field: result.get(field) for field in fields_to_return}
        for result in results
    ]


class FDAApi:
    """Client for the openFDA drug label endpoint."""

    def __init__(self, base_url: Optional[str] = None):
        self.base_url = base_url or Config.FDA_LABEL_URL

    @staticmethod
    def build_query(
        search_params: Optional[list[SearchConstraint]] = None,
        sort: Optional[str] = None,
        count: Optional[str] = None,
        limit: Optional[int] = None,
        skip: Optional[int] = None
    ) -> str:
        """
        Build the query string for a label search.

        Each field:term pair is encoded as a whole and pairs are joined with
        +AND+. Optional parameters follow in the order sort, count, limit, skip.

        Returns:
            Query string starting with "?"
        """
        query: dict[str, Any] = {}

        if search_params:
            query["search"] = "+AND+".join(
                encode_component(f"{constraint.field}:{constraint.term}")
                for constraint in search_params
            )

        if sort:
            query["sort"] = sort
        if count:
            query["count"] = count
        if limit:
            query["limit"] = limit
        if skip:
            query["skip"] = skip

        return "?" + "&".join(f"{key}={value}" for key, value in query.items())

    async def _make_request(self, query_string: str) -> dict:
        """
        GET the label endpoint with a prepared query string.

        Raises:
            FDAApiError: On a non-success status or transport failure
        """
        client = HTTPClientManager.get_fda_client()
        url = f"{self.base_url}{query_string}"

        try:
            response = await client.get(url)
        except httpx.TimeoutException as e:
            app_logger.error(f"FDA request timed out: {str(e)}")
            raise FDAApiError(f"FDA request timed out: {e}") from e
        except httpx.RequestError as e:
            app_logger.error(f"FDA request failed: {str(e)}")
            raise FDAApiError(f"FDA request failed: {e}") from e

        if not response.is_success:
            app_logger.error(f"FDA API error (status {response.status_code}) for {query_string}")
            raise FDAApiError(f"HTTP Error: {response.status_code}", status_code=response.status_code)

        return response.json()

    async def search_drug(
        self,
        search_params: list[SearchConstraint],
        sort: Optional[str] = None,
        count: Optional[str] = None,
        limit: Optional[int] = None,
        skip: Optional[int] = None
    ) -> dict:
        """Search drug labels and return the decoded response body."""
        query = self.build_query(search_params, sort, count, limit, skip)
        app_logger.debug(f"FDA query string: {query}")
        return await self._make_request(query)

    async def fetch(self, search: StructuredSearch) -> str:
        """
        Run a structured search and return the reduced records as JSON text.

        Args:
            search: Validated structured search

        Returns:
            JSON array of records holding only the requested fields
        """
        response = await self.search_drug(search.constraints, limit=search.limit)
        results = response.get("results", [])
        returned_results = extract_fields_from_results(results, search.field_names)

        fda_result = json.dumps(returned_results)
        app_logger.info(f"FDA result: {len(returned_results)} records, {len(fda_result)} characters")
        return fda_result
