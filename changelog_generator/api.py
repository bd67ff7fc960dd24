"""
HTTP API for the changelog generator.

Run with: uvicorn changelog_generator.api:app
"""

import hashlib
import json
import logging
import threading
from collections import OrderedDict
from typing import Any, Callable, Dict, Optional

from fastapi import APIRouter, FastAPI, Header, Request
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel

from .config import Settings
from .errors import InvalidUrlError
from .generator import ChangelogGenerator
from .models import ChangelogOptions
from .renderer import parse_changelog

logger = logging.getLogger("changelog-generator.api")

DEFAULT_EXCLUDE_TYPES = ["build", "docs", "other", "style"]

# Defaults of the Markdown download endpoint, overridable per request
DOWNLOAD_DEFAULTS: Dict[str, Any] = {
    "includeRefIssues": True,
    "useGitmojis": True,
    "includeInvalidCommits": False,
    "reverseOrder": False,
}

router = APIRouter()


class ChangelogRequest(BaseModel):
    githubUrl: Optional[str] = None
    options: Dict[str, Any] = {}


def _bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    return authorization.replace("Bearer ", "", 1).strip() or None


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


class GeneratorRegistry:
    """
    Least-recently-used set of ChangelogGenerators, one per token.

    Requests with the same credential share a generator and its cache. Tokens
    are only kept as SHA-256 digests, and at most ``max_size`` generators live
    at once.
    """

    def __init__(
        self,
        factory: Callable[[Optional[str]], ChangelogGenerator] = ChangelogGenerator,
        max_size: int = 32,
    ) -> None:
        self._factory = factory
        self.max_size = max(1, max_size)
        self._generators: "OrderedDict[str, ChangelogGenerator]" = OrderedDict()
        self._lock = threading.Lock()

    @staticmethod
    def _key(token: Optional[str]) -> str:
        return hashlib.sha256(token.encode("utf-8")).hexdigest() if token else ""

    def get(self, token: Optional[str]) -> ChangelogGenerator:
        key = self._key(token)
        with self._lock:
            generator = self._generators.get(key)
            if generator is not None:
                self._generators.move_to_end(key)
                return generator
            generator = self._generators[key] = self._factory(token)
            while len(self._generators) > self.max_size:
                self._generators.popitem(last=False)
            return generator

    def __len__(self) -> int:
        with self._lock:
            return len(self._generators)


@router.get("/api/changelog")
def get_changelog(
    request: Request,
    url: Optional[str] = None,
    excludeTypes: Optional[str] = None,
    includeRefIssues: Optional[str] = None,
    useGitmojis: Optional[str] = None,
    includeInvalidCommits: Optional[str] = None,
    reverseOrder: Optional[str] = None,
    fromTag: Optional[str] = None,
    toTag: Optional[str] = None,
    authorization: Optional[str] = Header(None),
) -> Response:
    """
    Generate a changelog and return it both as Markdown and in structured form.
    """
    if not url:
        return _error(400, "GitHub URL is required")

    try:
        exclude_types = json.loads(excludeTypes) if excludeTypes else DEFAULT_EXCLUDE_TYPES
    except ValueError:
        return _error(400, "excludeTypes must be a JSON array")
    if not isinstance(exclude_types, list):
        return _error(400, "excludeTypes must be a JSON array")

    options = ChangelogOptions(
        github_url=url,
        from_tag=fromTag or None,
        to_tag=toTag or None,
        exclude_types=exclude_types,
        include_ref_issues=includeRefIssues == "true",
        use_gitmojis=useGitmojis != "false",
        include_invalid_commits=includeInvalidCommits != "false",
        reverse_order=reverseOrder == "true",
    )

    registry: GeneratorRegistry = request.app.state.generators
    try:
        result = registry.get(_bearer_token(authorization)).generate(options)
    except InvalidUrlError as e:
        return _error(400, str(e))
    except Exception as e:
        logger.exception("Failed to generate changelog for %s", url)
        return _error(500, str(e) or "An error occurred generating the changelog")

    body = parse_changelog(result.changelog).to_dict()
    body["fromTag"] = result.from_tag
    body["toTag"] = result.to_tag
    body["markdown"] = result.changelog
    return JSONResponse(content=body)


@router.post("/changelog")
def download_changelog(
    payload: ChangelogRequest,
    request: Request,
    authorization: Optional[str] = Header(None),
) -> Response:
    """Generate a changelog and return it as a CHANGELOG.md attachment."""
    if not payload.githubUrl:
        return _error(400, "Missing required parameter: githubUrl")

    registry: GeneratorRegistry = request.app.state.generators
    try:
        options = ChangelogOptions.from_dict({**DOWNLOAD_DEFAULTS, **payload.options, "githubUrl": payload.githubUrl})
        result = registry.get(_bearer_token(authorization)).generate(options)
    except InvalidUrlError as e:
        return _error(400, str(e))
    except Exception as e:
        logger.exception("Failed to generate changelog for %s", payload.githubUrl)
        return _error(500, str(e) or "An error occurred generating the changelog")

    return Response(
        content=result.changelog,
        media_type="text/markdown",
        headers={"Content-Disposition": "attachment; filename=CHANGELOG.md"},
    )


def create_app(
    generator_factory: Callable[[Optional[str]], ChangelogGenerator] = ChangelogGenerator,
    max_generators: Optional[int] = None,
) -> FastAPI:
    if max_generators is None:
        max_generators = Settings.from_env().max_generators
    app = FastAPI(title="Changelog Generator")
    app.state.generators = GeneratorRegistry(generator_factory, max_size=max_generators)
    app.include_router(router)
    return app


app = create_app()
