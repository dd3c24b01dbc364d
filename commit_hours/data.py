from dataclasses import dataclass
from datetime import datetime

HOURS = 24
HOUR_LABELS: list[str] = [f"{hour:02d}" for hour in range(HOURS)]


@dataclass(frozen=True)
class Committer:
    name: str
    email: str
    date: datetime


@dataclass(frozen=True)
class Commit:
    repo_name: str
    hash: str
    committer: Committer | None


@dataclass(frozen=True)
class RepoRef:
    owner: str
    name: str

    def __str__(self) -> str:
        return f"{self.owner}/{self.name}"

    @classmethod
    def parse(cls, token: str) -> "RepoRef":
        parts = token.split("/")
        if len(parts) != 2 or not all(parts):
            raise ValueError(
                f"Invalid repository format: {token} (expected 'owner/repo')"
            )
        return cls(parts[0], parts[1])


type Commits = list[Commit]
type Histogram = list[int]


def empty_histogram() -> Histogram:
    return [0] * HOURS
