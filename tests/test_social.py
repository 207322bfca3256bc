# File: tests/test_social.py
import pytest

from sitesweep.crawler.models import SocialPlatform
from sitesweep.parser.html_parser import DomSnapshot
from sitesweep.parser.social import classify_social, extract_socials


@pytest.mark.parametrize(
    "url,platform",
    [
        ("https://www.facebook.com/baeckerei.mueller", SocialPlatform.FACEBOOK),
        ("https://instagram.com/mueller", SocialPlatform.INSTAGRAM),
        ("https://de.linkedin.com/company/mueller", SocialPlatform.LINKEDIN),
        ("https://x.com/mueller", SocialPlatform.TWITTER),
        ("https://www.youtube.com/@mueller", SocialPlatform.YOUTUBE),
        ("https://www.tiktok.com/@mueller", SocialPlatform.TIKTOK),
        ("https://www.xing.com/pages/mueller", SocialPlatform.XING),
        ("https://www.instagram.com/sharedspaces_berlin", SocialPlatform.INSTAGRAM),
        ("https://www.facebook.com/sharer.studio", SocialPlatform.FACEBOOK),
        ("https://www.youtube.com/@shareholders-club", SocialPlatform.YOUTUBE),
    ],
)
def test_classify_profiles(url, platform):
    assert classify_social(url) is platform


@pytest.mark.parametrize(
    "url",
    [
        "https://www.facebook.com/sharer/sharer.php?u=https://example.com",
        "https://twitter.com/intent/tweet?text=hi",
        "https://www.linkedin.com/shareArticle?mini=true",
        "https://pinterest.com/pin/create/button/?url=x",
        "https://www.facebook.com/share/p/1AbCdEf/",
        "https://www.xing.com/spi/shares/new?url=https://example.com",
        "https://notfacebook.com/page",
        "https://example.com/facebook.com",
    ],
)
def test_classify_rejects(url):
    assert classify_social(url) is None


def test_extract_socials_dedupes_in_document_order():
    html = (
        '<a href="https://www.instagram.com/mueller">ig</a>'
        '<a href="https://www.facebook.com/mueller">fb</a>'
        '<a href="https://www.instagram.com/mueller">ig again</a>'
        '<a href="https://www.facebook.com/sharer.php?u=x">share</a>'
        '<a href="/kontakt">intern</a>'
    )
    socials = extract_socials(DomSnapshot(url="https://example.com/", html=html))
    assert [(s.platform, s.url) for s in socials] == [
        (SocialPlatform.INSTAGRAM, "https://www.instagram.com/mueller"),
        (SocialPlatform.FACEBOOK, "https://www.facebook.com/mueller"),
    ]
