"""Configuration loading for pickinfo.

Config sources (in priority order):
1. Environment variables (PICKINFO_GITHUB_TOKEN, PICKINFO_REPO, etc.)
2. .env file in current directory
3. The GitHub CLI's stored credentials (`gh auth token`), for the token only
"""

from __future__ import annotations

import os
import re
import subprocess
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

DEFAULT_REPO = "facebook/react-native"
DEFAULT_PROJECT_OWNER = "reactwg"
DEFAULT_PROJECT_TITLE = "React Native {version} Releases"
DEFAULT_STATUS_FIELD = "Status"
DEFAULT_INBOX_STATUS = "Inbox"
DEFAULT_TARGET_RELEASE_FIELD = "Target Release"

RELEASE_PATTERN = re.compile(r"^0\.\d+\.\d+-rc\d+$")
REPO_PATTERN = re.compile(r"^[\w.-]+/[\w.-]+$")


def is_valid_release(release: str) -> bool:
    """Check a target release string like '0.76.0-rc3'."""
    return bool(RELEASE_PATTERN.fullmatch(release))


def release_version(release: str) -> str:
    """Release line of a target release: '0.76.0-rc3' -> '0.76'."""
    return ".".join(release.split(".")[:2])


def _gh_cli_token() -> str:
    """Token stored by `gh auth login`, or empty if gh is missing or logged out."""
    try:
        result = subprocess.run(
            ["gh", "auth", "token"],
            capture_output=True,
            text=True,
            timeout=10,
        )
    except (subprocess.TimeoutExpired, FileNotFoundError):
        return ""
    if result.returncode != 0:
        return ""
    return result.stdout.strip()


@dataclass
class Config:
    github_token: str = ""
    repo: str = DEFAULT_REPO  # "owner/repo" the picks land in
    project_owner: str = DEFAULT_PROJECT_OWNER  # org that owns the release boards
    project_title: str = DEFAULT_PROJECT_TITLE
    status_field: str = DEFAULT_STATUS_FIELD
    inbox_status: str = DEFAULT_INBOX_STATUS
    target_release_field: str = DEFAULT_TARGET_RELEASE_FIELD

    @classmethod
    def load(cls) -> Config:
        token = os.getenv("PICKINFO_GITHUB_TOKEN") or os.getenv("GITHUB_TOKEN") or ""
        if not token:
            token = _gh_cli_token()
        return cls(
            github_token=token,
            repo=os.getenv("PICKINFO_REPO", DEFAULT_REPO),
            project_owner=os.getenv("PICKINFO_PROJECT_OWNER", DEFAULT_PROJECT_OWNER),
            project_title=os.getenv("PICKINFO_PROJECT_TITLE", DEFAULT_PROJECT_TITLE),
            status_field=os.getenv("PICKINFO_STATUS_FIELD", DEFAULT_STATUS_FIELD),
            inbox_status=os.getenv("PICKINFO_INBOX_STATUS", DEFAULT_INBOX_STATUS),
            target_release_field=os.getenv(
                "PICKINFO_TARGET_RELEASE_FIELD", DEFAULT_TARGET_RELEASE_FIELD
            ),
        )

    def project_title_for(self, release: str) -> str:
        return self.project_title.format(version=release_version(release))

    def validate(self) -> list[str]:
        """Return a list of config problems."""
        issues = []
        if not self.github_token:
            issues.append(
                "GitHub token not set (PICKINFO_GITHUB_TOKEN, GITHUB_TOKEN or 'gh auth login')"
            )
        if not REPO_PATTERN.fullmatch(self.repo):
            issues.append(f"Repository must look like owner/repo, got '{self.repo}' (PICKINFO_REPO)")
        if not self.project_owner:
            issues.append("Project owner not set (PICKINFO_PROJECT_OWNER)")
        return issues
