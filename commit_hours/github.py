import logging
from datetime import datetime, timezone
from typing import Any, Iterator

import requests
from dateutil import parser as date_parser

from commit_hours.data import Commit, Commits, Committer, RepoRef

API_URL = "https://api.github.com"
API_VERSION = "2022-11-28"
PER_PAGE = 100
# committers without a date land in hour 00
ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)

type Record = dict[str, Any]


class GitHubError(Exception):
    """Fetching from the GitHub API failed for the given target"""

    def __init__(self, target: str, message: str):
        super().__init__(f"{target}: {message}")
        self.target = target
        self.message = message


def describe_failure(exc: requests.RequestException) -> str:
    response = exc.response
    if (
        response is not None
        and response.status_code in (403, 429)
        and response.headers.get("X-RateLimit-Remaining") == "0"
    ):
        return f"{exc} (API rate limit exceeded)"
    return str(exc)


def parse_committer(data: Record | None) -> Committer | None:
    if not data:
        return None
    date = data.get("date")
    return Committer(
        name=data.get("name") or "",
        email=data.get("email") or "",
        date=date_parser.isoparse(date) if date else ZERO_TIME,
    )


def parse_commit(repo: RepoRef, record: Record) -> Commit:
    details: Record = record.get("commit") or {}
    return Commit(
        repo_name=str(repo),
        hash=record.get("sha", ""),
        committer=parse_committer(details.get("committer")),
    )


class GitHubClient:
    def __init__(
        self,
        token: str,
        api_url: str = API_URL,
        session: requests.Session | None = None,
    ):
        self.api_url = api_url.rstrip("/")
        self.session = session if session is not None else requests.Session()
        self.session.headers.update(
            {
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": API_VERSION,
            }
        )

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "GitHubClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def paginate(self, path: str, params: Record | None = None) -> Iterator[Record]:
        """
        Yield every record of a paginated list endpoint

        Pages are requested lazily, the next one only after the previous is
        consumed. Iteration stops when the response has no rel="next" link.

        :param path: endpoint path, e.g. /repos/{owner}/{repo}/commits
        :param params: extra query parameters for the first request
        :raises requests.RequestException: on transport or HTTP errors
        :raises ValueError: when a page is not a JSON list
        """
        url: str | None = f"{self.api_url}{path}"
        query: Record | None = {**(params or {}), "per_page": PER_PAGE}
        while url:
            logging.debug(f"GET {url} {query or ''}")
            response = self.session.get(url, params=query)
            response.raise_for_status()
            page = response.json()
            if not isinstance(page, list):
                raise ValueError(
                    f"Expected a JSON list from {url}, got {type(page).__name__}"
                )
            yield from page
            url = response.links.get("next", {}).get("url")
            # the next link already carries the query string
            query = None

    def fetch_commits(self, repo: RepoRef) -> Commits:
        path = f"/repos/{repo.owner}/{repo.name}/commits"
        try:
            return [parse_commit(repo, record) for record in self.paginate(path)]
        except requests.RequestException as e:
            raise GitHubError(str(repo), describe_failure(e)) from e
        except (ValueError, KeyError, AttributeError) as e:
            raise GitHubError(str(repo), f"unexpected API response: {e}") from e

    def list_repos(self, account: str) -> list[RepoRef]:
        """
        List public, non-fork repositories of a user or organization

        Order is the one the API returns.
        """
        path = f"/users/{account}/repos"
        try:
            return [
                RepoRef(account, record["name"])
                for record in self.paginate(path, {"type": "public"})
                if not record.get("fork", False)
            ]
        except requests.RequestException as e:
            raise GitHubError(account, describe_failure(e)) from e
        except (ValueError, KeyError, AttributeError) as e:
            raise GitHubError(account, f"unexpected API response: {e}") from e
