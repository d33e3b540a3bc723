"""
=============================================================================
DEMO APPLICATION
=============================================================================

The application the command line serves by default. It exists to show
the handler contract end to end:

    GET  /Test.mp3   → the configured audio file (if any), streamed as-is
                       (404 if it is configured but missing)
    GET  <anything>  → "test server" page with the time, the URL and a form
    POST <anything>  → "test server" page echoing the posted body

The form posts to /form, so submitting it exercises the POST path:

    foo=foovalue&bar=barvalue

=============================================================================
"""

import html
import logging
from datetime import datetime
from pathlib import Path
from typing import BinaryIO, Optional

from ..http.context import RequestContext
from ..http.mime_types import get_mime_type
from .base import RequestHandler


logger = logging.getLogger(__name__)

DEFAULT_AUDIO_TARGET = "/Test.mp3"


class DemoHandler(RequestHandler):
    """
    Form page, POST echo and single audio file.

    Args:
        audio_file: File served at `audio_target`. Without it, that target
                    gets the regular page like any other URL; if it is
                    set but missing, that target gets the failure response.
        audio_target: Request target the audio file is served at.
    """

    def __init__(
        self,
        audio_file: Optional[str] = None,
        audio_target: str = DEFAULT_AUDIO_TARGET,
    ):
        self.audio_file = Path(audio_file) if audio_file else None
        self.audio_target = audio_target

    def handle_get(self, context: RequestContext) -> None:
        if context.target == self.audio_target and self.audio_file is not None:
            self._serve_audio(context)
            return

        logger.info(f"request: {context.target}")
        context.write_success()
        self._write_page_header(context)
        context.write_line(f"Current Time: {datetime.now():%Y-%m-%d %H:%M:%S}")
        context.write_line(f"url : {html.escape(context.target)}")
        context.write_line("<form method=post action=/form>")
        context.write_line("<input type=text name=foo value=foovalue>")
        context.write_line("<input type=submit name=bar value=barvalue>")
        context.write_line("</form>")

    def handle_post(self, context: RequestContext, body: BinaryIO) -> None:
        logger.info(f"POST request: {context.target}")
        data = body.read().decode("utf-8", errors="replace")

        context.write_success()
        self._write_page_header(context)
        context.write_line("<a href=/test>return</a><p>")
        context.write_line(f"postbody: <pre>{html.escape(data)}</pre>")

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _write_page_header(self, context: RequestContext) -> None:
        context.write_line("<html><body><h1>test server</h1>")

    def _serve_audio(self, context: RequestContext) -> None:
        if not self.audio_file.is_file():
            logger.warning(f"Audio file not found: {self.audio_file}")
            context.write_failure()
            return

        with self.audio_file.open("rb") as f:
            context.write_success(get_mime_type(self.audio_file))
            context.write_file(f)
        logger.info(f"served {self.audio_file.name} to {context.client_address[0]}")
