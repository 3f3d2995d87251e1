"""
Page Capability Module
The page/element interface consumed by the extractor and the auto-filler,
plus a static implementation over a BeautifulSoup parse tree.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple

import soupsieve
from bs4 import BeautifulSoup, Tag

from .errors import ElementNotFound

logger = logging.getLogger(__name__)

Box = Dict[str, float]
Point = Tuple[float, float]


def box_center(box: Box) -> Point:
    """Centre point of a bounding box."""
    return (box['x'] + box['width'] / 2, box['y'] + box['height'] / 2)


class PageElement(ABC):
    """A queryable, interactive element on a page."""

    @abstractmethod
    async def query(self, selector: str) -> Optional['PageElement']:
        """First descendant matching selector, or None."""

    @abstractmethod
    async def query_all(self, selector: str) -> List['PageElement']:
        """All descendants matching selector, in document order."""

    @abstractmethod
    async def text(self) -> str:
        """Trimmed text content; empty string when there is none."""

    @abstractmethod
    async def classes(self) -> List[str]:
        """Class list of the element."""

    @abstractmethod
    async def attribute(self, name: str) -> Optional[str]:
        """Attribute value, or None."""

    @abstractmethod
    async def closest(self, selector: str) -> Optional['PageElement']:
        """Nearest ancestor-or-self matching selector, or None."""

    @abstractmethod
    async def click(self) -> None:
        """Activate the element."""

    @abstractmethod
    async def bounding_box(self) -> Optional[Box]:
        """Screen box ``{x, y, width, height}``, or None when not rendered."""

    @abstractmethod
    async def select_option(self, label: str) -> None:
        """Choose the option with the given label on a select control."""


class PageHandle(ABC):
    """A document that can be queried, waited on and dragged across."""

    @abstractmethod
    async def query(self, selector: str) -> Optional[PageElement]:
        """First element matching selector, or None."""

    @abstractmethod
    async def query_all(self, selector: str) -> List[PageElement]:
        """All elements matching selector, in document order."""

    @abstractmethod
    async def wait_for(self, selector: str, timeout: Optional[int] = None) -> PageElement:
        """Wait until an element matching selector exists and return it."""

    @abstractmethod
    async def drag(self, start: Point, end: Point) -> None:
        """Press at start, move to end, release."""


class HtmlElement(PageElement):
    """PageElement over a BeautifulSoup tag."""

    # Synthetic row height used to lay static elements out in document order
    ROW_HEIGHT = 20
    ROW_WIDTH = 200

    def __init__(self, page: 'HtmlPage', tag: Tag):
        self.page = page
        self.tag = tag

    def __eq__(self, other):
        return isinstance(other, HtmlElement) and other.tag is self.tag

    def __hash__(self):
        return id(self.tag)

    def __repr__(self):
        return f"HtmlElement(<{self.tag.name} class={self.tag.get('class')}>)"

    async def query(self, selector: str) -> Optional['HtmlElement']:
        tag = self.tag.select_one(selector)
        return self.page.wrap(tag) if tag is not None else None

    async def query_all(self, selector: str) -> List['HtmlElement']:
        return [self.page.wrap(t) for t in self.tag.select(selector)]

    async def text(self) -> str:
        return self.tag.get_text().strip()

    async def classes(self) -> List[str]:
        return list(self.tag.get('class') or [])

    async def attribute(self, name: str) -> Optional[str]:
        value = self.tag.get(name)
        if isinstance(value, list):
            return ' '.join(value)
        return value

    async def closest(self, selector: str) -> Optional['HtmlElement']:
        tag = soupsieve.closest(selector, self.tag)
        return self.page.wrap(tag) if tag is not None else None

    async def click(self) -> None:
        if self.tag.name == 'input' and self.tag.get('type') in ('radio', 'checkbox'):
            self.tag['checked'] = 'checked'
        self.page.actions.append(('click', self))

    async def bounding_box(self) -> Optional[Box]:
        order = self.page.document_order(self.tag)
        if order is None:
            return None
        return {'x': 0.0, 'y': float(order * self.ROW_HEIGHT),
                'width': float(self.ROW_WIDTH), 'height': float(self.ROW_HEIGHT)}

    async def select_option(self, label: str) -> None:
        if self.tag.name != 'select':
            raise ElementNotFound('select', f"Element is not a select control: {self!r}")
        chosen = None
        for option in self.tag.find_all('option'):
            if option.get_text().strip() == label:
                chosen = option
            elif option.has_attr('selected'):
                del option['selected']
        if chosen is None:
            raise ElementNotFound(f"option:{label}", f"No option labelled '{label}'")
        chosen['selected'] = 'selected'
        self.page.actions.append(('select', self, label))


class HtmlPage(PageHandle):
    """
    PageHandle over a static HTML document.

    Interactions are applied to the parse tree where they have an obvious
    effect (checking a radio, selecting an option) and recorded in
    ``actions`` in the order they happened.
    """

    def __init__(self, html: str):
        self.soup = BeautifulSoup(html, 'lxml')
        self.actions: List[Tuple[Any, ...]] = []
        self._order: Optional[Dict[int, int]] = None

    def wrap(self, tag: Tag) -> HtmlElement:
        return HtmlElement(self, tag)

    def document_order(self, tag: Tag) -> Optional[int]:
        if self._order is None:
            self._order = {id(t): i for i, t in enumerate(self.soup.find_all(True))}
        return self._order.get(id(tag))

    async def query(self, selector: str) -> Optional[HtmlElement]:
        tag = self.soup.select_one(selector)
        return self.wrap(tag) if tag is not None else None

    async def query_all(self, selector: str) -> List[HtmlElement]:
        return [self.wrap(t) for t in self.soup.select(selector)]

    async def wait_for(self, selector: str, timeout: Optional[int] = None) -> HtmlElement:
        # A static document never changes, so the element is either there or not
        element = await self.query(selector)
        if element is None:
            raise ElementNotFound(selector)
        return element

    async def drag(self, start: Point, end: Point) -> None:
        logger.debug(f"Drag from {start} to {end}")
        self.actions.append(('drag', start, end))

    def to_html(self) -> str:
        return str(self.soup)
