"""Open a target page in Playwright for the CLI commands."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Literal, Optional

from playwright.sync_api import Page, sync_playwright

WaitUntil = Literal["commit", "domcontentloaded", "load", "networkidle"]


@dataclass(slots=True)
class BrowserConfig:
    headless: bool = True
    slow_mo: float = 0
    navigation_timeout_ms: int = 45000
    viewport_width: int = 1280
    viewport_height: int = 720
    wait_until: WaitUntil = "load"
    # Embedded application forms often attach their iframes after load.
    settle_ms: int = 750


@contextmanager
def open_page(url: str, config: Optional[BrowserConfig] = None) -> Iterator[Page]:
    """Yield a page navigated to ``url``; the browser is closed on exit."""
    config = config or BrowserConfig()
    with sync_playwright() as playwright:
        browser = playwright.chromium.launch(
            headless=config.headless, slow_mo=config.slow_mo
        )
        try:
            context = browser.new_context(
                viewport={
                    "width": config.viewport_width,
                    "height": config.viewport_height,
                }
            )
            page = context.new_page()
            page.set_default_timeout(config.navigation_timeout_ms)
            page.set_default_navigation_timeout(config.navigation_timeout_ms)
            page.goto(url, wait_until=config.wait_until)
            if config.settle_ms:
                page.wait_for_timeout(config.settle_ms)
            yield page
        finally:
            browser.close()
