"""Manual verification: look up a release board and its inbox on GitHub.

Usage:
    PICKINFO_GITHUB_TOKEN=ghp_... python scripts/check_release_project.py 0.76.0-rc3

Prints the project ID, every inbox issue and the references found in it,
without resolving any commits.
"""

from __future__ import annotations

import sys

from pickinfo.config import Config, is_valid_release
from pickinfo.github.client import GitHubClient
from pickinfo.github.queries import GitHubQueries
from pickinfo.picks.links import parse_references


def main() -> None:
    config = Config.load()

    if len(sys.argv) < 2 or not is_valid_release(sys.argv[1]):
        print("ERROR: Provide a target release like 0.76.0-rc3")
        sys.exit(1)
    target_release = sys.argv[1]

    if not config.github_token:
        print("ERROR: Set PICKINFO_GITHUB_TOKEN or run 'gh auth login'")
        sys.exit(1)

    print(f"Looking up '{config.project_title_for(target_release)}'...")
    client = GitHubClient(token=config.github_token, repo=config.repo)

    try:
        queries = GitHubQueries(client, config)
        project_id = queries.resolve_project_id(target_release)
        print(f"  Project ID: {project_id}")

        print("\n--- Inbox issues ---")
        issues = queries.list_inbox_issues(project_id, target_release)
        for issue in issues:
            print(f"  #{issue.number}: {issue.title}")
            print(f"    Created: {issue.created_at}")
            references = parse_references(issue.body)
            if references:
                for reference in references:
                    print(f"    {reference.kind}: {reference.target}")
            else:
                print("    (no references)")
            print()

        print(f"Total: {len(issues)} inbox issue(s)")
    finally:
        client.close()


if __name__ == "__main__":
    main()
