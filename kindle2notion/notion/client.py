import logging
import time

import requests

from ..parser.models import BookClips
from .models import Block, NotionPage, PageParent, PageProperties, RichText, split_quote_content

# Initialize logger for this module
logger = logging.getLogger(__name__)


class NotionAPIClient:
    """Client for creating book pages through the Notion API."""

    API_BASE_URL = "https://api.notion.com/v1"
    PAGES_ENDPOINT = f"{API_BASE_URL}/pages"
    USERS_ME_ENDPOINT = f"{API_BASE_URL}/users/me"
    BLOCK_CHILDREN_ENDPOINT = API_BASE_URL + "/blocks/{block_id}/children"
    NOTION_VERSION = "2022-06-28"

    # HTTP status codes
    HTTP_OK = 200

    # Notion accepts at most 100 children per request and ~3 requests per second
    MAX_CHILDREN_PER_REQUEST = 100
    REQUEST_DELAY = 0.35

    BOOK_EMOJI = "📕"
    AUTHOR_EMOJI = "✍️"
    TITLE_SEPARATOR = ":"

    def __init__(self, api_token: str):
        """Initialize the Notion API client.

        Args:
            api_token: Notion integration token
        """
        logger.debug("Initializing NotionAPIClient.")
        self.api_token = api_token
        self.headers = {
            "Authorization": f"Bearer {api_token}",
            "Notion-Version": self.NOTION_VERSION,
            "Content-Type": "application/json",
        }
        log_headers = {
            **{"Authorization": "Bearer [REDACTED]"},
            **{k: v for k, v in self.headers.items() if k != "Authorization"},
        }
        logger.debug("API Headers (token redacted): %s", log_headers)

    def validate_token(self) -> bool:
        """Validate the API token by fetching the integration's bot user.

        Returns:
            True if the token is valid, False otherwise
        """
        logger.info("Validating Notion API token...")
        try:
            response = requests.get(self.USERS_ME_ENDPOINT, headers=self.headers)
        except requests.RequestException:
            logger.error("Error validating Notion API token.", exc_info=True)
            return False

        is_valid = response.status_code == self.HTTP_OK
        if is_valid:
            logger.info("Notion API token is valid (HTTP %d).", response.status_code)
        else:
            logger.warning(
                "Notion API token validation failed. Status: %d, Response: %s",
                response.status_code,
                response.text[:200],
            )
        return is_valid

    def upload_books(self, books: list[BookClips], parent_page_id: str) -> dict[str, int]:
        """Create one Notion page per book under the parent page.

        Args:
            books: Grouped clips to publish, in presentation order
            parent_page_id: ID of the page the book pages are created under

        Returns:
            Dictionary with counts of sent and failed pages
        """
        results = {"sent": 0, "failed": 0}
        if not books:
            logger.info("No books provided to upload.")
            return results

        logger.info("Uploading %d books to Notion.", len(books))
        for i, book in enumerate(books):
            logger.info("Uploading clips from '%s' (%d clips)...", book.book_name, len(book.clips))
            if self._upload_book(book, parent_page_id):
                results["sent"] += 1
            else:
                results["failed"] += 1

            if i + 1 < len(books):
                time.sleep(self.REQUEST_DELAY)

        logger.info("Finished uploading books. Total Sent: %d, Total Failed: %d", results["sent"], results["failed"])
        return results

    def _upload_book(self, book: BookClips, parent_page_id: str) -> bool:
        """Create the page of one book, appending blocks that do not fit in the first request."""
        page = self.build_page(book, parent_page_id)
        body = page.to_dict(max_children=self.MAX_CHILDREN_PER_REQUEST)
        logger.debug("Sending page data: %s", str(body)[:500] + "...")

        try:
            response = requests.post(self.PAGES_ENDPOINT, headers=self.headers, json=body)
        except requests.RequestException:
            logger.error("Network error creating page for '%s'.", book.book_name, exc_info=True)
            return False

        if response.status_code != self.HTTP_OK:
            logger.error(
                "Error creating page for '%s'. Status: %d, Response: %s",
                book.book_name,
                response.status_code,
                response.text[:500],
            )
            return False

        remaining = page.children[self.MAX_CHILDREN_PER_REQUEST :]
        if not remaining:
            return True

        page_id = response.json().get("id")
        return self._append_children(page_id, remaining)

    def _append_children(self, block_id: str, children: list[Block]) -> bool:
        """Append blocks to an existing page in batches."""
        url = self.BLOCK_CHILDREN_ENDPOINT.format(block_id=block_id)
        for i in range(0, len(children), self.MAX_CHILDREN_PER_REQUEST):
            batch = children[i : i + self.MAX_CHILDREN_PER_REQUEST]
            time.sleep(self.REQUEST_DELAY)
            logger.debug("Appending %d blocks to page %s.", len(batch), block_id)
            body = {"children": [block.model_dump(mode="json", exclude_none=True) for block in batch]}
            try:
                response = requests.patch(url, headers=self.headers, json=body)
            except requests.RequestException:
                logger.error("Network error appending blocks to page %s.", block_id, exc_info=True)
                return False

            if response.status_code != self.HTTP_OK:
                logger.error(
                    "Error appending blocks to page %s. Status: %d, Response: %s",
                    block_id,
                    response.status_code,
                    response.text[:500],
                )
                return False
        return True

    def build_page(self, book: BookClips, parent_page_id: str) -> NotionPage:
        """Convert a book and its clips to a Notion page.

        Long titles of the form 'Title: Subtitle' are shortened to 'Title' and
        the full name is kept in a callout at the top of the page.

        Args:
            book: Book to convert
            parent_page_id: ID of the parent page

        Returns:
            NotionPage ready to be sent
        """
        children = []
        page_name = book.book_name
        if self.TITLE_SEPARATOR in book.book_name:
            children.append(Block.new_callout(book.book_name, self.BOOK_EMOJI))
            page_name = book.book_name.split(self.TITLE_SEPARATOR, 1)[0]

        children.append(Block.new_callout(book.author, self.AUTHOR_EMOJI))
        children.append(Block.new_divider())

        for clip in book.clips:
            chunks = split_quote_content(clip.content)
            # Only the last chunk of a clip carries its date
            for chunk in chunks[:-1]:
                children.append(Block.new_quote(chunk))
            children.append(Block.new_quote(chunks[-1], clip.date))

        return NotionPage(
            parent=PageParent(page_id=parent_page_id),
            properties=PageProperties(title=[RichText.plain(page_name)]),
            children=children,
        )
