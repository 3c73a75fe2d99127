import pytest

from video_platforms import (
    VideoPlatform,
    default_thumbnail,
    detect_platform,
    extract_video_id,
)


@pytest.mark.parametrize("url, platform", [
    ("https://www.youtube.com/watch?v=abc123", VideoPlatform.YOUTUBE),
    ("https://youtu.be/abc123", VideoPlatform.YOUTUBE),
    ("https://www.bilibili.com/video/BV1xx411c7mD", VideoPlatform.BILIBILI),
    ("https://www.instagram.com/p/Cxyz/", VideoPlatform.INSTAGRAM),
    ("https://www.xiaohongshu.com/explore/64f0a1", VideoPlatform.XIAOHONGSHU),
    ("http://xhslink.com/a/Zx9", VideoPlatform.XIAOHONGSHU),
    ("https://example.com/recipe", VideoPlatform.UNKNOWN),
    ("not a url", VideoPlatform.UNKNOWN),
    (None, VideoPlatform.UNKNOWN),
])
def test_detect_platform(url, platform):
    assert detect_platform(url) == platform


@pytest.mark.parametrize("url, video_id", [
    ("https://www.youtube.com/watch?v=abc123&t=10", "abc123"),
    ("https://youtu.be/abc123", "abc123"),
    ("https://www.youtube.com/feed", ""),
    ("https://www.bilibili.com/video/BV1xx411c7mD/?p=2", "BV1xx411c7mD"),
    ("https://www.instagram.com/p/Cxyz/", "Cxyz"),
    ("https://www.xiaohongshu.com/explore/64f0a1", "64f0a1"),
    ("https://example.com/recipe", ""),
])
def test_extract_video_id(url, video_id):
    assert extract_video_id(url) == video_id


def test_default_thumbnail_only_for_youtube():
    assert default_thumbnail("https://youtu.be/abc123") == "https://img.youtube.com/vi/abc123/maxresdefault.jpg"
    assert default_thumbnail("https://www.youtube.com/feed") is None
    assert default_thumbnail("https://www.bilibili.com/video/BV1xx411c7mD") is None
    assert default_thumbnail(None) is None
