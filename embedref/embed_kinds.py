from __future__ import annotations

import re
from dataclasses import asdict, dataclass, field
from typing import Literal, TypedDict

EMBED_KINDS = (
    "video",
    "social-post",
    "discussion",
    "media-entity",
    "snippet",
    "document",
    "code-pen",
    "code-sandbox",
    "design-file",
)

MEDIA_ENTITY_KINDS = ("track", "album", "playlist", "artist", "episode", "show")

_KIND_RANK = {kind: idx for idx, kind in enumerate(EMBED_KINDS)}
_URL_PATTERN = re.compile(r"https?://[^\s\"'<>]+", flags=re.IGNORECASE)
_TRAILING_PUNCTUATION = ").,!?]}"
_MAX_SCAN_CHARS = 50_000
_MAX_URLS = 50

_VIDEO_PATTERNS = tuple(
    re.compile(p, flags=re.ASCII)
    for p in (
        r"(?:https?://)?(?:www\.)?youtube\.com/watch\?v=[\w-]+",
        r"(?:https?://)?(?:www\.)?youtube\.com/v/[\w-]+",
        r"(?:https?://)?(?:www\.)?youtube\.com/embed/[\w-]+",
        r"(?:https?://)?youtu\.be/[\w-]+",
        r"(?:https?://)?(?:www\.)?youtube\.com/shorts/[\w-]+",
    )
)
_VIDEO_ID = re.compile(
    r"(?:youtube\.com/watch\?v=|youtu\.be/|youtube\.com/embed/|youtube\.com/v/|youtube\.com/shorts/)([\w-]+)",
    flags=re.ASCII,
)
_VIDEO_LIST = re.compile(r"[?&]list=([\w-]+)", flags=re.ASCII)
_VIDEO_START = re.compile(r"[?&](?:t|start)=(\d+)", flags=re.ASCII)

_SOCIAL_POST_PATTERNS = tuple(
    re.compile(p, flags=re.ASCII)
    for p in (
        r"(?:https?://)?(?:www\.)?(?:twitter|x)\.com/\w+/status/\w+",
        r"(?:https?://)?(?:www\.)?(?:twitter|x)\.com/\w+/statuses/\w+",
    )
)
_SOCIAL_POST = re.compile(r"(?:twitter|x)\.com/(\w+)/status(?:es)?/(\w+)", flags=re.ASCII)

_DISCUSSION_DETECT = re.compile(
    r"(?:https?://)?(?:www\.)?reddit\.com/r/[\w-]+/comments/\w+", flags=re.ASCII
)
# the optional slug is tried before the comment id, so a lone trailing
# segment is always read as the slug
_DISCUSSION = re.compile(
    r"reddit\.com/r/([\w-]+)/comments/(\w+)(?:/[\w-]+)?(?:/(\w+))?", flags=re.ASCII
)

_MEDIA_ENTITY_DETECT = re.compile(
    r"(?:https?://)?(?:open\.)?spotify\.com/(?:track|album|playlist|artist|episode|show)/\w+",
    flags=re.ASCII,
)
_MEDIA_ENTITY = re.compile(
    r"spotify\.com/(track|album|playlist|artist|episode|show)/(\w+)", flags=re.ASCII
)

_SNIPPET_DETECT = re.compile(r"(?:https?://)?gist\.github\.com/[\w-]+/[\w-]+", flags=re.ASCII)
_SNIPPET = re.compile(
    r"gist\.github\.com/([\w-]+)/([\w-]+)(?:/([\w-]+))?(?:/(\w+))?", flags=re.ASCII
)

_DOCUMENT = re.compile(r"\.pdf(\?[^\n\r\u2028\u2029]*)?\Z", flags=re.IGNORECASE)
_CODE_PEN = re.compile(r"(?:https?://)?codepen\.io/[\w-]+/pen/[\w-]+", flags=re.ASCII)
_CODE_SANDBOX = re.compile(r"(?:https?://)?codesandbox\.io/s/[\w-]+", flags=re.ASCII)
_DESIGN_FILE = re.compile(r"(?:https?://)?(?:www\.)?figma\.com/file/[\w-]+", flags=re.ASCII)

_CAMEL_KEYS = {
    "video_id": "videoId",
    "list_id": "listId",
    "start_time": "startTime",
    "post_id": "postId",
    "comment_id": "commentId",
    "entity_kind": "entityKind",
    "snippet_id": "snippetId",
}


class _Reference:
    def to_payload(self) -> dict[str, object]:
        """camelCase dict for JSON responses, without unmatched optional fields."""
        return {
            _CAMEL_KEYS.get(key, key): value
            for key, value in asdict(self).items()
            if value is not None
        }


@dataclass(frozen=True)
class VideoReference(_Reference):
    video_id: str
    list_id: str | None = None
    start_time: int | None = None
    type: Literal["video"] = field(default="video", init=False)


@dataclass(frozen=True)
class SocialPostReference(_Reference):
    username: str
    post_id: str
    type: Literal["social-post"] = field(default="social-post", init=False)


@dataclass(frozen=True)
class DiscussionReference(_Reference):
    community: str
    post_id: str
    comment_id: str | None = None
    type: Literal["discussion"] = field(default="discussion", init=False)


@dataclass(frozen=True)
class MediaEntityReference(_Reference):
    entity_kind: Literal["track", "album", "playlist", "artist", "episode", "show"]
    id: str
    type: Literal["media-entity"] = field(default="media-entity", init=False)


@dataclass(frozen=True)
class SnippetReference(_Reference):
    username: str
    snippet_id: str
    filename: str | None = None
    revision: str | None = None
    type: Literal["snippet"] = field(default="snippet", init=False)


EmbedReference = (
    VideoReference
    | SocialPostReference
    | DiscussionReference
    | MediaEntityReference
    | SnippetReference
)


class ScannedEmbed(TypedDict):
    url: str
    kind: str


class TextScanResult(TypedDict):
    embeds: list[ScannedEmbed]
    kinds: list[str]


def _as_text(value: object) -> str:
    return value if isinstance(value, str) else ""


def is_video(text: str) -> bool:
    text = _as_text(text)
    return any(pattern.search(text) for pattern in _VIDEO_PATTERNS)


def _start_time(text: str) -> int | None:
    match = _VIDEO_START.search(text)
    if not match:
        return None
    try:
        return int(match.group(1), 10)
    except ValueError:
        # digit runs past the int conversion limit
        return None


def extract_video(text: str) -> VideoReference | None:
    if not is_video(text):
        return None

    match = _VIDEO_ID.search(text)
    if not match:
        return None

    list_match = _VIDEO_LIST.search(text)
    return VideoReference(
        video_id=match.group(1),
        list_id=list_match.group(1) if list_match else None,
        start_time=_start_time(text),
    )


def is_social_post(text: str) -> bool:
    text = _as_text(text)
    return any(pattern.search(text) for pattern in _SOCIAL_POST_PATTERNS)


def extract_social_post(text: str) -> SocialPostReference | None:
    if not is_social_post(text):
        return None
    match = _SOCIAL_POST.search(text)
    if not match:
        return None
    return SocialPostReference(username=match.group(1), post_id=match.group(2))


def is_discussion(text: str) -> bool:
    return _DISCUSSION_DETECT.search(_as_text(text)) is not None


def extract_discussion(text: str) -> DiscussionReference | None:
    if not is_discussion(text):
        return None
    match = _DISCUSSION.search(text)
    if not match:
        return None
    return DiscussionReference(
        community=match.group(1),
        post_id=match.group(2),
        comment_id=match.group(3),
    )


def is_media_entity(text: str) -> bool:
    return _MEDIA_ENTITY_DETECT.search(_as_text(text)) is not None


def extract_media_entity(text: str) -> MediaEntityReference | None:
    if not is_media_entity(text):
        return None
    match = _MEDIA_ENTITY.search(text)
    if not match:
        return None
    return MediaEntityReference(entity_kind=match.group(1), id=match.group(2))


def is_snippet(text: str) -> bool:
    return _SNIPPET_DETECT.search(_as_text(text)) is not None


def extract_snippet(text: str) -> SnippetReference | None:
    """Owner and gist id, then up to two trailing segments.

    The trailing segments are positional: the third is always the filename
    and the fourth the revision, so a URL carrying only a revision reports it
    as the filename.
    """
    if not is_snippet(text):
        return None
    match = _SNIPPET.search(text)
    if not match:
        return None
    return SnippetReference(
        username=match.group(1),
        snippet_id=match.group(2),
        filename=match.group(3),
        revision=match.group(4),
    )


def is_document(text: str) -> bool:
    return _DOCUMENT.search(_as_text(text)) is not None


def _is_code_pen(text: str) -> bool:
    return _CODE_PEN.search(text) is not None


def _is_code_sandbox(text: str) -> bool:
    return _CODE_SANDBOX.search(text) is not None


def _is_design_file(text: str) -> bool:
    return _DESIGN_FILE.search(text) is not None


_DETECTORS = (
    ("video", is_video),
    ("social-post", is_social_post),
    ("discussion", is_discussion),
    ("media-entity", is_media_entity),
    ("snippet", is_snippet),
    ("document", is_document),
    ("code-pen", _is_code_pen),
    ("code-sandbox", _is_code_sandbox),
    ("design-file", _is_design_file),
)

_EXTRACTORS = {
    "video": extract_video,
    "social-post": extract_social_post,
    "discussion": extract_discussion,
    "media-entity": extract_media_entity,
    "snippet": extract_snippet,
}


def categorize(text: str) -> str | None:
    text = _as_text(text)
    for kind, detector in _DETECTORS:
        if detector(text):
            return kind
    return None


def extract_embed(text: str) -> EmbedReference | None:
    kind = categorize(text)
    if kind is None or kind not in _EXTRACTORS:
        return None
    return _EXTRACTORS[kind](text)


def _ordered_unique(kinds: set[str]) -> list[str]:
    return sorted(kinds, key=lambda kind: _KIND_RANK.get(kind, len(EMBED_KINDS)))


def extract_urls(
    text: str, max_scan_chars: int = _MAX_SCAN_CHARS, max_urls: int = _MAX_URLS
) -> list[str]:
    scanned = _as_text(text)[:max_scan_chars]
    urls: list[str] = []
    for match in _URL_PATTERN.finditer(scanned):
        if len(urls) >= max_urls:
            break
        candidate = match.group(0).rstrip(_TRAILING_PUNCTUATION)
        if not candidate:
            continue
        urls.append(candidate)
    return urls


def scan_text(
    text: str, max_scan_chars: int = _MAX_SCAN_CHARS, max_urls: int = _MAX_URLS
) -> TextScanResult:
    embeds: list[ScannedEmbed] = []
    for url in extract_urls(text, max_scan_chars=max_scan_chars, max_urls=max_urls):
        kind = categorize(url)
        if kind is None:
            continue
        embeds.append({"url": url, "kind": kind})

    kinds = _ordered_unique({embed["kind"] for embed in embeds})
    return {"embeds": embeds, "kinds": kinds}
