"""
skills.sh search client.

A single GET against the public search endpoint (the one ``npx skills
find`` uses). No retries or pagination; errors surface as
RemoteSearchError.
"""

import logging

import httpx
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

from agdex.exceptions import RemoteSearchError

logger = logging.getLogger(__name__)

SKILLS_SH_API_BASE = "https://skills.sh"
DEFAULT_TIMEOUT = 30.0


class SkillsShSearchResult(BaseModel):
    """One skill returned by the skills.sh search API."""

    model_config = ConfigDict(extra="ignore")

    id: str
    skill_id: str = Field(..., validation_alias=AliasChoices("skillId", "skill_id"))
    name: str
    installs: int = Field(default=0, validation_alias=AliasChoices("installs", "installCount"))
    source: str = Field(
        ...,
        validation_alias=AliasChoices("source", "originLabel"),
        description="Origin repository as owner/repo",
    )


async def search_skills_sh(
    query: str,
    limit: int = 20,
    *,
    base_url: str = SKILLS_SH_API_BASE,
    client: httpx.AsyncClient | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> list[SkillsShSearchResult]:
    """Search skills.sh for skills matching a query.

    Args:
        query: Search text.
        limit: Maximum number of results.
        base_url: API base URL.
        client: Optional client to reuse (tests pass one with a mock transport).
        timeout: Request timeout in seconds when creating a client.

    Returns:
        Search results in API order.

    Raises:
        RemoteSearchError: On transport errors, non-2xx responses or a malformed body.
    """
    url = f"{base_url.rstrip('/')}/api/search"
    params = {"q": query, "limit": limit}
    logger.debug("GET %s %s", url, params)

    owns_client = client is None
    if client is None:
        client = httpx.AsyncClient(timeout=timeout)

    try:
        response = await client.get(url, params=params)
    except httpx.HTTPError as e:
        raise RemoteSearchError(f"skills.sh request failed: {e}") from e
    finally:
        if owns_client:
            await client.aclose()

    if not response.is_success:
        raise RemoteSearchError(
            f"skills.sh API returned {response.status_code}",
            status_code=response.status_code,
        )

    try:
        data = response.json()
        return [SkillsShSearchResult.model_validate(item) for item in data.get("skills", [])]
    except (ValueError, AttributeError, ValidationError) as e:
        raise RemoteSearchError(f"Unexpected skills.sh response: {e}") from e
