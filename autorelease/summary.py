"""Changelog summaries from an OpenAI compatible chat completion API."""

import http.client
import json
import re
import urllib.error
import urllib.request
from typing import Any

from autorelease import __version__
from autorelease.exceptions import SummaryError

SYSTEM_PROMPT = (
    "You are an assistant that writes a summary of 2-3 sentences "
    "based on a list of changes."
)

USER_PROMPT = "Here is the list of changes:\n{bullets}\n\nWrite a short summary."

THINK_BLOCK_PATTERN = re.compile(r"<think>.*?</think>", re.DOTALL)


def strip_think_blocks(text: str) -> str:
    """Remove <think>...</think> reasoning blocks emitted by some models."""
    return THINK_BLOCK_PATTERN.sub("", text).strip()


def completions_url(base_url: str) -> str:
    """Join the API base URL and the chat completions endpoint."""
    return f"{base_url.rstrip('/')}/chat/completions"


class ChangelogSummarizer:
    """Asks a chat model for a short prose summary of the changes."""

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4",
        base_url: str = "https://api.openai.com/v1/",
        timeout: int = 120,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.base_url = base_url
        self.timeout = timeout

    def build_payload(self, bullets: str) -> dict[str, Any]:
        return {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": USER_PROMPT.format(bullets=bullets)},
            ],
        }

    def summarize(self, bullets: str) -> str:
        """Request one completion for the bullet list.

        Raises:
            SummaryError: On any request failure or a malformed response
        """
        try:
            req = urllib.request.Request(
                completions_url(self.base_url),
                data=json.dumps(self.build_payload(bullets)).encode("utf-8"),
                headers={
                    "Content-Type": "application/json",
                    "Authorization": f"Bearer {self.api_key}",
                    "User-Agent": f"autorelease/{__version__}",
                },
                method="POST",
            )
            with urllib.request.urlopen(req, timeout=self.timeout) as response:
                data = json.loads(response.read().decode("utf-8"))
        except urllib.error.HTTPError as e:
            raise SummaryError(
                f"Summary request failed with HTTP {e.code}",
                details=e.reason,
            ) from e
        except urllib.error.URLError as e:
            raise SummaryError("Summary API could not be reached", details=str(e.reason)) from e
        except TimeoutError as e:
            raise SummaryError(f"Summary request timed out after {self.timeout}s") from e
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise SummaryError("Summary API returned invalid JSON", details=str(e)) from e
        except ValueError as e:
            raise SummaryError(
                f"Invalid summary API URL: {self.base_url}",
                details=str(e),
                fix_hint="OPENAI_API_BASE_URL must be an absolute http(s) URL",
            ) from e
        except (OSError, http.client.HTTPException) as e:
            raise SummaryError(
                "Summary API connection failed",
                details=f"{type(e).__name__}: {e}",
            ) from e

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise SummaryError(
                "Summary API response has no completion",
                details=f"{type(e).__name__}: {e}",
            ) from e
        if not isinstance(content, str):
            raise SummaryError("Summary API completion is not text")
        return strip_think_blocks(content)
