import argparse
import logging
import os
from pathlib import Path

from commit_hours.aggregate import aggregate_by_hour, merge_histograms, total
from commit_hours.data import HOUR_LABELS, Histogram, RepoRef, empty_histogram
from commit_hours.exporters import export_data, exporters
from commit_hours.github import API_URL, GitHubClient, GitHubError
from commit_hours.plotters import FORMATS, plot_hours, resolve_format

EXIT_SUCCESS = 0
EXIT_FAILURE = 1

TOKEN_ENV = "GITHUB_TOKEN"
API_URL_ENV = "GITHUB_API_URL"

TITLE = "GitHub Commits by Hour"
TITLE_MAX_SOURCES = 3

EPILOG = """\
targets:
  Provide repositories in the format 'owner/repo'.
  If only 'owner' is provided, fetches all public non-fork repos for that
  user or organization.
  With no target at all, --user <login> selects that account's repos.

environment:
  GITHUB_TOKEN    API access token (required)
  GITHUB_API_URL  API base url (default: https://api.github.com)
"""


def make_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Graph the hours of day at which GitHub commits were made",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("targets", nargs="*", metavar="owner[/repo]")
    parser.add_argument(
        "--user", help="Filter commits by a specific username or email"
    )
    parser.add_argument(
        "--repo",
        action="append",
        default=[],
        metavar="owner/repo",
        help="Repository to include, may be repeated",
    )
    parser.add_argument(
        "-o",
        "--output",
        help="Output file for the graph (default: graph.png, or graph.<format>)",
    )
    parser.add_argument("--format", choices=FORMATS, help="Image format")
    parser.add_argument(
        "--hourly", action="store_true", help="Print commits per hour"
    )
    parser.add_argument("--export", choices=sorted(exporters))
    parser.add_argument("--export-output", default="commit_hours")
    parser.add_argument(
        "--api-url", default=os.environ.get(API_URL_ENV, API_URL), help="API base url"
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def resolve_targets(
    targets: list[str], repos: list[str], identity: str | None = None
) -> tuple[list[RepoRef], list[str]]:
    """
    Split command line tokens into explicit repositories and accounts

    :param targets: positional tokens, 'owner/repo' or bare 'owner'
    :param repos: --repo values, always 'owner/repo'
    :param identity: --user value, used as account when nothing else is given
    :return: (repositories, accounts), duplicates removed, order kept
    :raises ValueError: on malformed tokens or when nothing is selected
    """
    repo_refs: list[RepoRef] = [RepoRef.parse(token) for token in repos]
    accounts: list[str] = []
    for token in targets:
        token = token.strip()
        if not token:
            raise ValueError("Empty repository or account name")
        if "/" in token:
            repo_refs.append(RepoRef.parse(token))
        else:
            accounts.append(token)

    if not repo_refs and not accounts and identity and "@" not in identity:
        accounts.append(identity)
    if not repo_refs and not accounts:
        raise ValueError("No repositories provided")

    return list(dict.fromkeys(repo_refs)), list(dict.fromkeys(accounts))


def make_title(
    repos: list[RepoRef], accounts: list[str], identity: str | None = None
) -> str:
    sources = [str(repo) for repo in repos] + accounts
    title = TITLE
    if sources:
        shown = ", ".join(sources[:TITLE_MAX_SOURCES])
        if len(sources) > TITLE_MAX_SOURCES:
            shown += f" +{len(sources) - TITLE_MAX_SOURCES} more"
        title += f" - {shown}"
    if identity:
        title += f" by <{identity}>"
    return title


def repo_histogram(
    client: GitHubClient, repo: RepoRef, identity: str | None
) -> Histogram:
    print(f"Fetching commits from {repo}...")
    commits = client.fetch_commits(repo)
    counts = aggregate_by_hour(commits, identity)
    print(f"{repo} -> {total(counts)} of {len(commits)} commits")
    return counts


def collect_histogram(
    client: GitHubClient,
    repos: list[RepoRef],
    accounts: list[str],
    identity: str | None = None,
) -> Histogram:
    """
    Fetch and aggregate every target into one running total

    A repository reached both explicitly and through its account is only
    counted once. The first GitHubError aborts the whole collection.
    """
    hourly: Histogram = empty_histogram()
    seen: set[RepoRef] = set()
    for repo in repos:
        seen.add(repo)
        hourly = merge_histograms(hourly, repo_histogram(client, repo, identity))

    for account in accounts:
        print(f"Fetching public non-fork repos for user {account}...")
        account_repos = client.list_repos(account)
        logging.info(f"{account}: {len(account_repos)} repositories")
        for repo in account_repos:
            if repo in seen:
                logging.info(f"{repo}: already processed")
                continue
            seen.add(repo)
            hourly = merge_histograms(hourly, repo_histogram(client, repo, identity))

    return hourly


def main(argv: list[str] | None = None) -> int:
    parser = make_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )

    try:
        repos, accounts = resolve_targets(args.targets, args.repo, args.user)
        output_file = Path(args.output or f"graph.{args.format or FORMATS[0]}")
        fmt = resolve_format(output_file, args.format)
    except ValueError as e:
        parser.error(str(e))

    token = os.environ.get(TOKEN_ENV)
    if not token:
        logging.error(f"{TOKEN_ENV} environment variable is not set")
        return EXIT_FAILURE

    try:
        with GitHubClient(token, api_url=args.api_url) as client:
            hourly = collect_histogram(client, repos, accounts, args.user)
    except GitHubError as e:
        logging.error(f"Error fetching from {e.target}: {e.message}")
        return EXIT_FAILURE

    print("\n=== Summary ===")
    if args.user:
        print(f"Committer: {args.user}")
    print(f"Total commits: {total(hourly)}")

    if args.hourly:
        print("\nCommits by hour:")
        for hour, count in zip(HOUR_LABELS, hourly):
            print(f"{hour}: {count}")

    try:
        if args.export:
            exported = export_data(hourly, args.export, Path(args.export_output))
            print(f"Exported hourly commits to {exported}")
        plot_hours(
            hourly, output_file, make_title(repos, accounts, args.user), fmt=fmt
        )
    except (OSError, ValueError) as e:
        logging.error(f"Error writing output: {e}")
        return EXIT_FAILURE

    print(f"Graph saved to {output_file}")
    return EXIT_SUCCESS

