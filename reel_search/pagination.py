"""
Pagination controls for a search result page.
No controls at all for a single page; otherwise Previous, a window of up to
five page numbers centred on the current page, and Next.
"""

from dataclasses import dataclass
from typing import List

WINDOW_RADIUS = 2  # pages shown either side of the current one


@dataclass(frozen=True)
class PageButton:
	label: str  # "Previous", "Next" or the page number
	page: int  # page requested when clicked
	current: bool = False  # marks the page being shown


def page_window(current_page: int, total_pages: int) -> List[int]:
	"""Pages from max(1, current-2) to min(total, current+2), inclusive."""
	start = max(1, current_page - WINDOW_RADIUS)
	end = min(total_pages, current_page + WINDOW_RADIUS)
	return list(range(start, end + 1))


def pagination_controls(current_page: int, total_pages: int) -> List[PageButton]:
	if total_pages <= 1:
		return []
	buttons = []
	if current_page > 1:
		buttons.append(PageButton(label="Previous", page=current_page - 1))
	for n in page_window(current_page, total_pages):
		buttons.append(PageButton(label=str(n), page=n, current=(n == current_page)))
	if current_page < total_pages:
		buttons.append(PageButton(label="Next", page=current_page + 1))
	return buttons
