"""
Asset transformers for inlining fetched content.

Each transformer mutates exactly one element of the document: stylesheets
and scripts are replaced by an inline sibling, images get a data URL.
"""

import base64

from bs4 import BeautifulSoup, Tag
from bs4.element import Script, Stylesheet

from ..utils.constants import DATA_URL_TEMPLATE


def _replace_with_inline(
    soup: BeautifulSoup,
    element: Tag,
    tag_name: str,
    content: str,
    string_class
) -> Tag:
    inline = soup.new_tag(tag_name)
    inline.string = string_class(content)

    element.insert_after(inline)
    element.decompose()

    return inline


def inline_style(soup: BeautifulSoup, link: Tag, css: str) -> Tag:
    """
    Replace a stylesheet <link> with a <style> holding its CSS.

    The new element takes the link's place among its siblings.

    Args:
        soup: Document the link belongs to
        link: The <link> element to replace
        css: Fetched stylesheet text

    Returns:
        The inserted <style> element
    """
    return _replace_with_inline(soup, link, 'style', css, Stylesheet)


def inline_script(soup: BeautifulSoup, script: Tag, js: str) -> Tag:
    """
    Replace an external <script src> with an inline <script>.

    Args:
        soup: Document the script belongs to
        script: The <script> element to replace
        js: Fetched script text

    Returns:
        The inserted <script> element
    """
    return _replace_with_inline(soup, script, 'script', js, Script)


def image_data_url(content: bytes, extension: str) -> str:
    """Build a base64 data URL; '.PNG' becomes the subtype 'png'."""
    return DATA_URL_TEMPLATE.format(
        subtype=extension.lstrip('.').lower(),
        payload=base64.b64encode(content).decode('ascii')
    )


def inline_image(img: Tag, content: bytes, extension: str) -> Tag:
    """
    Rewrite an <img> src to a data URL of the fetched bytes.

    The element itself is kept; only its src attribute changes.

    Args:
        img: The <img> element
        content: Fetched image bytes
        extension: Matched extension, e.g. '.png'

    Returns:
        The same <img> element
    """
    img['src'] = image_data_url(content, extension)
    return img
