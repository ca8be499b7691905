"""Template fetcher.

Downloads a template repository archive (or clones it) into a scratch
directory. Template references use the `host:owner/name#ref` shorthand:

- `owner/name` or `github:owner/name` (GitHub)
- `gitlab:owner/name`
- `bitbucket:owner/name`
- `direct:https://example.com/template.zip`

GitHub default branches are resolved with PyGithub when no `#ref` is given.
"""

from __future__ import annotations

import logging
import re
import shutil
import tempfile
import zipfile
from dataclasses import dataclass
from pathlib import Path

import requests
from github import Auth, Github
from github.GithubException import GithubException

from repo_scaffold.scaffold.errors import CommandError, FetchError
from repo_scaffold.scaffold.files import remove_path
from repo_scaffold.scaffold.process import CommandRunner

logger = logging.getLogger(__name__)

FALLBACK_REF = "master"

_HOSTS: dict[str, str] = {
    "github": "github.com",
    "gitlab": "gitlab.com",
    "bitbucket": "bitbucket.org",
}

_SHORTHAND = re.compile(
    r"^(?:(?P<host>github|gitlab|bitbucket):)?(?P<owner>[\w.-]+)/(?P<name>[\w.-]+?)(?:#(?P<ref>.+))?$"
)


@dataclass(frozen=True, slots=True)
class TemplateRef:
    """A parsed template reference."""

    host: str
    owner: str = ""
    name: str = ""
    ref: str = ""
    url: str = ""

    @property
    def is_direct(self) -> bool:
        return self.host == "direct"

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    def clone_url(self) -> str:
        if self.is_direct:
            return self.url
        return f"https://{_HOSTS[self.host]}/{self.full_name}.git"

    def archive_url(self, ref: str) -> str:
        if self.is_direct:
            return self.url
        if self.host == "github":
            return f"https://github.com/{self.full_name}/archive/{ref}.zip"
        if self.host == "gitlab":
            return f"https://gitlab.com/{self.full_name}/-/archive/{ref}/{self.name}-{ref}.zip"
        return f"https://bitbucket.org/{self.full_name}/get/{ref}.zip"


def parse_template_ref(value: str) -> TemplateRef:
    """Parse a template reference string.

    Raises:
        ValueError: if the reference is empty or not recognised.
    """

    raw = value.strip()
    if not raw:
        raise ValueError("template reference must not be empty")

    if raw.startswith("direct:"):
        url = raw[len("direct:") :]
        ref = ""
        if "#" in url:
            url, ref = url.split("#", 1)
        if not url.startswith(("http://", "https://")):
            raise ValueError(f"direct template must be an http(s) URL: {value}")
        return TemplateRef(host="direct", url=url, ref=ref)

    match = _SHORTHAND.match(raw)
    if match is None:
        raise ValueError(f"Unrecognised template reference: {value}")

    return TemplateRef(
        host=match.group("host") or "github",
        owner=match.group("owner"),
        name=match.group("name"),
        ref=match.group("ref") or "",
    )


def _flatten_single_root(extracted: Path, dest: Path) -> None:
    items = list(extracted.iterdir())
    source = items[0] if len(items) == 1 and items[0].is_dir() else extracted
    dest.mkdir(parents=True, exist_ok=True)
    for item in source.iterdir():
        shutil.move(str(item), str(dest / item.name))


class TemplateFetcher:
    """Fetch a template into a local directory."""

    def __init__(
        self,
        *,
        clone: bool = False,
        runner: CommandRunner | None = None,
        session: requests.Session | None = None,
        github_api: Github | None = None,
        github_token: str = "",
        github_base_url: str = "https://api.github.com",
        timeout: float = 60.0,
    ) -> None:
        self._clone = clone
        self._runner = runner or CommandRunner()
        self._session = session or requests.Session()
        self._session.headers.update({"User-Agent": "repo-scaffold"})
        self._github = github_api
        self._github_token = github_token
        self._github_base_url = github_base_url
        self._timeout = timeout

    def _github_client(self) -> Github:
        if self._github is None:
            auth = Auth.Token(self._github_token) if self._github_token else None
            self._github = Github(auth=auth, base_url=self._github_base_url)
        return self._github

    def resolve_ref(self, template: TemplateRef) -> str:
        """Return the ref to download, looking up GitHub default branches."""

        if template.ref:
            return template.ref
        if template.host != "github":
            return FALLBACK_REF
        try:
            branch = self._github_client().get_repo(template.full_name).default_branch
        except (GithubException, requests.RequestException) as e:
            logger.warning(
                "Default branch lookup failed; falling back",
                extra={"repo": template.full_name, "fallback": FALLBACK_REF, "error": str(e)},
            )
            return FALLBACK_REF
        return branch or FALLBACK_REF

    def fetch(self, repo: str, dest: Path) -> Path:
        """Fetch `repo` into `dest`. `dest` must not exist yet.

        Raises:
            FetchError: on an invalid reference, network, remote or extraction failure.
        """

        try:
            template = parse_template_ref(repo)
        except ValueError as e:
            raise FetchError(str(e)) from e

        if self._clone:
            self._clone_into(template, dest)
        else:
            self._download_into(template, dest)

        logger.info("Template fetched", extra={"repo": repo, "dest": str(dest)})
        return dest

    def _clone_into(self, template: TemplateRef, dest: Path) -> None:
        command = ["git", "clone", "--depth", "1"]
        if template.ref:
            command += ["--branch", template.ref]
        command += [template.clone_url(), str(dest)]
        try:
            self._runner.run(command)
        except CommandError as e:
            raise FetchError(f"Failed to clone template: {e}") from e

    def _download_into(self, template: TemplateRef, dest: Path) -> None:
        ref = template.ref if template.is_direct else self.resolve_ref(template)
        url = template.archive_url(ref)
        dest.parent.mkdir(parents=True, exist_ok=True)

        with tempfile.TemporaryDirectory(prefix="repo-scaffold-") as scratch:
            scratch_path = Path(scratch)
            zip_path = scratch_path / "template.zip"
            try:
                with self._session.get(url, stream=True, timeout=self._timeout) as resp:
                    resp.raise_for_status()
                    with zip_path.open("wb") as f:
                        for chunk in resp.iter_content(chunk_size=64 * 1024):
                            if chunk:
                                f.write(chunk)
            except requests.RequestException as e:
                raise FetchError(f"Failed to download template from {url}: {e}") from e

            extracted = scratch_path / "extracted"
            try:
                with zipfile.ZipFile(zip_path) as archive:
                    archive.extractall(extracted)
            except zipfile.BadZipFile as e:
                raise FetchError(f"Downloaded template is not a zip archive: {url}") from e
            except OSError as e:
                raise FetchError(f"Failed to extract template archive from {url}: {e}") from e

            try:
                _flatten_single_root(extracted, dest)
            except OSError as e:
                remove_path(dest)
                raise FetchError(f"Failed to unpack template into {dest}: {e}") from e
