import re
from enum import Enum
from typing import Optional
from urllib.parse import parse_qs, urlparse


class VideoPlatform(str, Enum):
    YOUTUBE = "youtube"
    BILIBILI = "bilibili"
    INSTAGRAM = "instagram"
    XIAOHONGSHU = "xiaohongshu"
    UNKNOWN = "unknown"


PLATFORM_HOSTS = (
    (VideoPlatform.YOUTUBE, ("youtube.com", "youtu.be")),
    (VideoPlatform.BILIBILI, ("bilibili.com",)),
    (VideoPlatform.INSTAGRAM, ("instagram.com",)),
    (VideoPlatform.XIAOHONGSHU, ("xiaohongshu.com", "xhslink.com")),
)


def _hostname(url: str) -> str:
    try:
        return (urlparse(url.strip()).hostname or "").lower()
    except ValueError:
        return ""


def detect_platform(url: Optional[str]) -> VideoPlatform:
    host = _hostname(url or "")
    for platform, domains in PLATFORM_HOSTS:
        if any(domain in host for domain in domains):
            return platform
    return VideoPlatform.UNKNOWN


def extract_video_id(url: Optional[str], platform: Optional[VideoPlatform] = None) -> str:
    if not url:
        return ""
    platform = platform or detect_platform(url)
    try:
        parsed = urlparse(url.strip())
    except ValueError:
        return ""

    if platform is VideoPlatform.YOUTUBE:
        if (parsed.hostname or "").endswith("youtu.be"):
            return parsed.path.lstrip("/")
        return parse_qs(parsed.query).get("v", [""])[0]
    if platform is VideoPlatform.BILIBILI:
        m = re.search(r"/video/(BV\w+)", parsed.path)
        return m.group(1) if m else ""
    if platform is VideoPlatform.INSTAGRAM:
        m = re.search(r"/p/([^/]+)", parsed.path)
        return m.group(1) if m else ""
    if platform is VideoPlatform.XIAOHONGSHU:
        m = re.search(r"/([^/]+)$", parsed.path)
        return m.group(1) if m else ""
    return ""


def default_thumbnail(url: Optional[str]) -> Optional[str]:
    """Thumbnail derivable from the URL alone; only YouTube exposes one."""
    if detect_platform(url) is not VideoPlatform.YOUTUBE:
        return None
    video_id = extract_video_id(url, VideoPlatform.YOUTUBE)
    if not video_id:
        return None
    return f"https://img.youtube.com/vi/{video_id}/maxresdefault.jpg"
