from commit_hours.data import HOURS, Commits, Histogram, empty_histogram


def aggregate_by_hour(commits: Commits, identity: str | None = None) -> Histogram:
    """
    Count commits per hour of day (00-23) of their committer timestamp

    The hour is read in the offset the timestamp carries, it is not
    converted to UTC or to the local zone.

    :param commits: commits of a single repository (or any mix of them)
    :param identity: committer name or email to count, None or "" counts all
    :return: list of 24 counters, index is the hour
    """
    counts: Histogram = empty_histogram()
    for commit in commits:
        committer = commit.committer
        if committer is None:
            continue
        if identity and identity not in (committer.name, committer.email):
            continue
        counts[committer.date.hour] += 1
    return counts


def merge_histograms(*histograms: Histogram) -> Histogram:
    merged: Histogram = empty_histogram()
    for histogram in histograms:
        if len(histogram) != HOURS:
            raise ValueError(f"Expected {HOURS} buckets, got {len(histogram)}")
        merged = [a + b for a, b in zip(merged, histogram)]
    return merged


def total(histogram: Histogram) -> int:
    return sum(histogram)
