"""
Tests for extension matching.
"""

import pytest

from site_antidote.utils.constants import IMAGE_EXTENSIONS
from site_antidote.utils.errors import PatternError
from site_antidote.utils.extensions import ExtensionMatcher, has_extension


def test_match_returns_extension():
    assert has_extension('/static/site.css', '.css') == '.css'


def test_no_match_returns_empty_string():
    assert has_extension('/static/site.js', '.css') == ''


def test_matching_is_case_sensitive():
    assert has_extension('style.CSS?v=1', '.css') == ''


def test_matching_is_not_anchored():
    assert has_extension('/cssfiles/data.json', '.css') == '.css'
    assert has_extension('/loader?file=app.js&v=2', '.js') == '.js'


def test_first_candidate_wins():
    assert has_extension('a.png?fallback=b.jpg', '.jpg', '.png') == '.jpg'


def test_invalid_pattern():
    with pytest.raises(PatternError):
        has_extension('a.css', '[')


class TestExtensionMatcher:

    def test_extensions_are_frozen(self):
        extensions = ['.css']
        matcher = ExtensionMatcher(extensions)
        extensions.append('.js')

        assert matcher.extensions == ('.css',)
        assert matcher.match('app.js') == ''

    @pytest.mark.parametrize('src, expected', [
        ('photo.png', 'png'),
        ('photo.PNG', 'png'),
        ('/a/b.jpeg', 'jpeg'),
        ('pic.gif', 'gif'),
        ('scan.TIFF', 'tiff'),
        ('icon.bmp', 'bmp'),
    ])
    def test_image_extensions(self, src, expected):
        matcher = ExtensionMatcher(IMAGE_EXTENSIONS)
        assert matcher.match(src).lstrip('.').lower() == expected

    def test_image_extensions_reject_other_formats(self):
        matcher = ExtensionMatcher(IMAGE_EXTENSIONS)
        assert matcher.match('vector.svg') == ''
        assert matcher.match('photo.webp') == ''
